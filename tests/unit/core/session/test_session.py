from __future__ import annotations

"""
Unit tests for the Browser Session.

Verifies:
1. Lifecycle: empty on construction, populated by start, cleared by close.
2. Editor workflows (load, create, save, rename, copy, delete, search).
3. Failures become alerts and leave state untouched.
"""

from typing import Any

import pytest

from ldapui.core.session import Session

BASE = "dc=example,dc=com"
PEOPLE = f"ou=people,{BASE}"
ALICE = f"uid=alice,{PEOPLE}"


@pytest.fixture
def session(fake_directory: Any) -> Session:
    s = Session(fake_directory)
    assert s.start() is True
    return s

# -----------------------------------------------------------------------------
# LIFECYCLE
# -----------------------------------------------------------------------------

def test_new_session_is_empty(fake_directory: Any) -> None:
    s = Session(fake_directory)
    assert len(s.cache) == 0
    assert s.entry is None
    assert s.user is None
    assert fake_directory.calls == []


def test_start_loads_user_schema_and_root(session: Session) -> None:
    assert session.user == f"cn=admin,{BASE}"
    assert session.schema.get_class("person") is not None
    assert [n.dn for n in session.visible_sequence()][:2] == [BASE, PEOPLE]


def test_start_failure_is_reported(fake_directory: Any) -> None:
    fake_directory.fail_on = "fetch_schema"
    s = Session(fake_directory)

    assert s.start() is False
    assert s.alert.kind == "danger"
    assert len(s.cache) == 0


def test_close_discards_state(session: Session) -> None:
    session.load_entry(ALICE)
    session.close()
    assert len(session.cache) == 0
    assert session.entry is None
    assert session.schema.get_class("person") is None

# -----------------------------------------------------------------------------
# EDITOR
# -----------------------------------------------------------------------------

def test_load_entry_reveals_and_marks_changed(session: Session) -> None:
    assert session.load_entry(ALICE, changed=["cn"]) is True

    assert session.entry.dn == ALICE
    assert session.changed("cn")
    assert not session.changed("sn")
    assert ALICE in [n.dn for n in session.visible_sequence()]


def test_new_entry_save_writes_and_reloads_parent(session: Session, fake_directory: Any) -> None:
    session.load_entry(ALICE)
    assert session.new_entry("inetOrgPerson", "cn", "Jane", parent_dn=PEOPLE) is True
    session.entry.attrs["sn"] = ["Doe"]
    fake_directory.children[PEOPLE].append(
        {"dn": f"cn=Jane,{PEOPLE}", "hasSubordinates": False, "structuralObjectClass": "inetOrgPerson"}
    )

    assert session.save() is True

    dn, attrs, is_new = fake_directory.calls_to("write_entry")[0]
    assert dn == f"cn=Jane,{PEOPLE}"
    assert is_new is True
    assert attrs["cn"] == ["Jane"]
    assert f"cn=Jane,{PEOPLE}" in session.cache
    assert session.entry.dn == f"cn=Jane,{PEOPLE}"
    assert session.changed("cn")
    assert session.alert.kind == "success"


def test_save_with_missing_required_makes_no_call(session: Session, fake_directory: Any) -> None:
    session.new_entry("inetOrgPerson", "cn", "Jane", parent_dn=PEOPLE)
    draft = session.entry

    assert session.save() is False

    assert fake_directory.calls_to("write_entry") == []
    assert session.entry is draft
    assert session.alert.kind == "warning"
    assert "sn" in session.alert.message


def test_save_transport_failure_keeps_entry(session: Session, fake_directory: Any) -> None:
    session.load_entry(ALICE)
    entry = session.entry
    nodes = [n.dn for n in session.cache.nodes]
    fake_directory.fail_on = "write_entry"

    assert session.save() is False

    assert session.entry is entry
    assert [n.dn for n in session.cache.nodes] == nodes
    assert session.alert.kind == "danger"


def test_load_entry_outside_tree_keeps_previous_alert(session: Session, fake_directory: Any) -> None:
    session.show_info("ready")

    assert session.load_entry("uid=x,dc=other,dc=org") is True

    assert session.entry.dn == "uid=x,dc=other,dc=org"
    assert session.alert.kind == "success"
    assert session.alert.message == "ready"
    assert "uid=x,dc=other,dc=org" not in session.cache


def test_new_entry_defaults_to_current_parent(session: Session) -> None:
    session.load_entry(f"cn=admin,{BASE}")
    session.new_entry("organizationalRole", "cn", "ops")
    assert session.entry.dn == f"cn=ops,cn=admin,{BASE}"


def test_add_class_and_available_attributes(session: Session) -> None:
    session.load_entry(ALICE)
    assert session.add_class("posixAccount") is True
    assert session.required("uidNumber")
    assert "loginShell" in session.available_attributes()

    assert session.add_class("unicorn") is False
    assert session.alert.kind == "warning"


def test_rename_moves_entry(session: Session, fake_directory: Any) -> None:
    session.load_entry(ALICE)

    assert session.rename("cn") is True

    assert fake_directory.calls_to("rename_entry") == [(ALICE, "cn=Alice")]
    assert session.entry.dn == f"cn=Alice,{PEOPLE}"
    assert session.alert is None


def test_rename_to_same_attribute_is_rejected(session: Session, fake_directory: Any) -> None:
    session.load_entry(ALICE)
    assert session.rename("uid") is False
    assert fake_directory.calls_to("rename_entry") == []


def test_copy(session: Session) -> None:
    session.load_entry(ALICE)

    assert session.copy(ALICE) is False
    assert session.alert.kind == "warning"

    assert session.copy(f"cnAlicia,{PEOPLE}") is False
    assert session.alert.kind == "danger"

    assert session.copy(f"cn=Alicia,{PEOPLE}") is True
    assert session.entry.is_new is True


def test_delete_clears_entry_and_reloads_parent(session: Session, fake_directory: Any) -> None:
    session.load_entry(ALICE)
    fake_directory.children[PEOPLE] = fake_directory.children[PEOPLE][1:]

    assert session.delete() is True

    assert session.entry is None
    assert ALICE not in session.cache
    assert session.alert.message == f"Deleted entry: {ALICE}"

# -----------------------------------------------------------------------------
# PASSWORDS & SEARCH
# -----------------------------------------------------------------------------

def test_change_password_rules(session: Session, fake_directory: Any) -> None:
    session.load_entry(f"cn=admin,{BASE}")

    assert session.change_password(None, "a", "b") is False
    assert session.change_password(None, "new", "new") is False  # own entry needs old
    assert fake_directory.calls_to("change_password") == []

    assert session.change_password("secret", "new", "new") is True
    assert session.check_password("secret") is True
    assert session.check_password("") is None


def test_search_outcomes(session: Session, fake_directory: Any) -> None:
    assert session.search("nobody") is False
    assert session.alert.kind == "warning"

    fake_directory.search_results = [{"dn": ALICE, "name": "alice"}]
    assert session.search("alice") is True
    assert session.entry.dn == ALICE

    fake_directory.search_results = [{"dn": ALICE}, {"dn": f"uid=bob,{PEOPLE}"}]
    assert session.search("o") is True
    assert session.entry is None
    assert len(session.search_result) == 2


def test_toggle_unknown_dn(session: Session) -> None:
    assert session.toggle("cn=missing") is False
    assert session.toggle(PEOPLE) is True
    assert session.cache.get(PEOPLE).open is True
