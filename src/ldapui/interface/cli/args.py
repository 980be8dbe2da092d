from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace
into configuration overrides.
"""

import argparse
from typing import Any, Dict

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the ldapui CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="ldapui",
        description="Browse and inspect an LDAP directory through its REST service.",
    )

    # --- Connection ---
    p.add_argument(
        "-u", "--url",
        dest="base_url",
        default=None,
        help="Base URL of the directory service.",
    )
    p.add_argument(
        "--user",
        dest="username",
        default=None,
        help="Username for HTTP basic auth (password from $LDAPUI_PASSWORD).",
    )
    p.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds.",
    )

    # --- Actions ---
    p.add_argument(
        "--reveal",
        metavar="DN",
        default=None,
        help="Expand the tree down to the given DN.",
    )
    p.add_argument(
        "--entry",
        metavar="DN",
        default=None,
        help="Load and print an entry.",
    )
    p.add_argument(
        "--search",
        metavar="QUERY",
        default=None,
        help="Search the directory.",
    )
    p.add_argument(
        "--new-class",
        metavar="OBJECTCLASS",
        dest="new_class",
        default=None,
        help="Print the draft entry synthesized for an object class.",
    )
    p.add_argument(
        "--describe",
        metavar="NAME",
        default=None,
        help="Print the schema definition of an object class or attribute.",
    )
    p.add_argument(
        "--icons",
        action="store_true",
        help="Show structural class icons in the tree.",
    )

    # --- Configuration and Diagnostics ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the saved configuration file.",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the effective connection settings.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Emit machine-readable JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Overrides; None values mean "keep the base value".
    """
    overrides: Dict[str, Any] = {
        "base_url": args.base_url,
        "username": args.username,
        "timeout": args.timeout,
    }
    if args.debug:
        overrides["log_level"] = "DEBUG"
    return overrides
