from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration merge
(defaults, persistent file, CLI overrides), session start against the
directory service, the requested action, and result rendering.
"""

import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from ldapui.core.session import Session
from ldapui.core.tree.render import render_tree_lines
from ldapui.core.validator import validate_config
from ldapui.domain.config import get_default_config, get_password, load_config, save_config
from ldapui.domain.entry_models import Entry
from ldapui.infra.logging import LoggingConfig, configure_logging, get_logger
from ldapui.infra.network import DirectoryClient
from ldapui.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 failure, 2 bad input, 130 interrupted).
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    conf, warnings = validate_config(raw_conf, strict=False)

    configure_logging(LoggingConfig(
        level=conf["log_level"],
        console=True,
        log_file=conf["log_file"] or None,
    ))
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(conf, ensure_ascii=False, indent=2))
        return 0

    if args.save_config:
        save_config(conf)

    if not conf["base_url"]:
        print("ERROR: no directory service URL configured", file=sys.stderr)
        return 2

    session = Session(_build_client(conf))
    try:
        return _run(session, args)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return 130
    finally:
        session.close()


def _build_client(conf: Dict[str, Any]) -> DirectoryClient:
    auth = None
    if conf["username"]:
        auth = (conf["username"], get_password())
    return DirectoryClient(
        conf["base_url"],
        auth=auth,
        timeout=conf["timeout"],
        verify=conf["verify_tls"],
    )


def _run(session: Session, args: Any) -> int:
    """Start the session and execute the requested action."""
    if not session.start():
        _print_alert(session)
        return 1

    output: Dict[str, Any] = {"user": session.user}
    ok = True

    if args.describe:
        details = _describe(session, args.describe)
        if details is None:
            print(f"ERROR: unknown schema element: {args.describe}", file=sys.stderr)
            return 2
        output["schema"] = details

    if args.new_class:
        ok = session.new_entry(args.new_class, _first_rdn(session, args.new_class), "new", "")
        if ok and session.entry:
            output["draft"] = _entry_dict(session, session.entry)

    if args.search:
        ok = session.search(args.search) and ok
        if session.search_result:
            output["search"] = session.search_result

    if args.entry:
        ok = session.load_entry(args.entry) and ok
    elif args.reveal:
        ok = session.reveal(args.reveal) and ok

    if session.entry and not session.entry.is_new:
        output["entry"] = _entry_dict(session, session.entry)

    tree = session.visible_sequence()
    if args.json_output:
        output["tree"] = [asdict(node) for node in tree]
        if session.alert:
            output["alert"] = asdict(session.alert)
        print(json.dumps(output, ensure_ascii=False, indent=2))
    else:
        _print_human(output, render_tree_lines(tree, show_icons=args.icons))
        _print_alert(session)

    return 0 if ok else 1

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge of non-None overrides for known keys only."""
    out = dict(base)
    for k in ("base_url", "username", "timeout", "log_level"):
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW HELPERS
# -----------------------------------------------------------------------------

def _describe(session: Session, name: str) -> Optional[Dict[str, Any]]:
    definition = session.schema.get_class(name) or session.schema.get_attr(name)
    if definition is None:
        return None
    return session.schema.details(definition)


def _first_rdn(session: Session, object_class: str) -> Optional[str]:
    if session.schema.get_class(object_class) is None:
        return None
    choices = session.model.rdn_choices(object_class)
    return choices[0] if choices else None


def _entry_dict(session: Session, entry: Entry) -> Dict[str, Any]:
    data = asdict(entry)
    data["field_types"] = {k: session.model.field_type(k) for k in entry.attrs}
    data["available_attributes"] = session.model.available_auxiliary_attributes(entry)
    return data


def _print_human(output: Dict[str, Any], tree_lines: List[str]) -> None:
    if output.get("user"):
        print(f"Logged in as: {output['user']}")
    print("\n".join(tree_lines))

    for result in output.get("search", []):
        print(f"  - {result.get('dn')}")

    for key in ("entry", "draft"):
        entry = output.get(key)
        if not entry:
            continue
        print(f"\n{entry['dn'] or '(new entry)'}")
        for name, values in entry["attrs"].items():
            marker = "*" if name in entry["required"] else " "
            for value in values:
                print(f" {marker} {name}: {value}")
        if entry["available_attributes"]:
            print(f"   may add: {', '.join(entry['available_attributes'])}")

    if output.get("schema"):
        print(json.dumps(output["schema"], ensure_ascii=False, indent=2))


def _print_alert(session: Session) -> None:
    if session.alert is not None:
        stream = sys.stderr if session.alert.kind == "danger" else sys.stdout
        print(session.alert.message, file=stream)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
