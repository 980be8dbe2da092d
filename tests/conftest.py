from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. An in-memory directory service standing in for the HTTP client.
3. A sample schema payload shaped like the service's schema endpoint.
"""

import copy
import os
import sys
from typing import Any, Dict, List, Optional, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from ldapui.domain.entry_models import Entry  # noqa: E402
from ldapui.domain.errors import TransportFailure  # noqa: E402

BASE = "dc=example,dc=com"
PEOPLE = f"ou=people,{BASE}"
GROUPS = f"ou=groups,{BASE}"
STAFF = f"cn=staff,{GROUPS}"


def _item(dn: str, has_subordinates: bool = False, oc: str = "") -> Dict[str, Any]:
    return {"dn": dn, "hasSubordinates": has_subordinates, "structuralObjectClass": oc}


# -----------------------------------------------------------------------------
# Fake Directory Service
# -----------------------------------------------------------------------------
class FakeDirectory:
    """
    In-memory directory service with the ``DirectoryClient`` interface.

    Records every call in ``calls`` as ``(method, args)`` tuples. Setting
    ``fail_on`` to a method name makes that method raise TransportFailure.
    """

    def __init__(self, schema: Dict[str, Any]) -> None:
        self.schema = schema
        self.user: Optional[str] = f"cn=admin,{BASE}"
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        self.fail_on: Optional[str] = None
        self.children: Dict[Optional[str], List[Dict[str, Any]]] = {
            None: [_item(BASE, True, "organization")],
            BASE: [
                _item(PEOPLE, True, "organizationalUnit"),
                _item(GROUPS, True, "organizationalUnit"),
                _item(f"cn=admin,{BASE}", False, "organizationalRole"),
            ],
            PEOPLE: [
                _item(f"uid=alice,{PEOPLE}", False, "inetOrgPerson"),
                _item(f"uid=bob,{PEOPLE}", False, "inetOrgPerson"),
            ],
            GROUPS: [_item(STAFF, True, "groupOfNames")],
            STAFF: [_item(f"cn=leads,{STAFF}", False, "groupOfNames")],
        }
        self.entries: Dict[str, Dict[str, List[str]]] = {
            f"uid=alice,{PEOPLE}": {
                "objectClass": ["inetOrgPerson", "organizationalPerson", "person", "top"],
                "uid": ["alice"],
                "cn": ["Alice"],
                "sn": ["Liddell"],
            },
            f"cn=admin,{BASE}": {
                "objectClass": ["organizationalRole", "top"],
                "cn": ["admin"],
            },
        }
        self.required: Dict[str, List[str]] = {
            f"uid=alice,{PEOPLE}": ["cn", "sn", "objectClass"],
            f"cn=admin,{BASE}": ["cn", "objectClass"],
        }
        self.search_results: List[Dict[str, Any]] = []
        self.changed: List[str] = ["cn"]

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if self.fail_on == method:
            raise TransportFailure("Service unavailable", 503)

    def calls_to(self, method: str) -> List[Tuple[Any, ...]]:
        return [args for name, args in self.calls if name == method]

    # --- Tree & Schema ---
    def fetch_children(self, dn: Optional[str]) -> List[Dict[str, Any]]:
        self._record("fetch_children", dn)
        return copy.deepcopy(self.children.get(dn, []))

    def fetch_schema(self) -> Dict[str, Any]:
        self._record("fetch_schema")
        return copy.deepcopy(self.schema)

    def whoami(self) -> Optional[str]:
        self._record("whoami")
        return self.user

    def search(self, query: str) -> List[Dict[str, Any]]:
        self._record("search", query)
        return list(self.search_results)

    # --- Entries ---
    def fetch_entry(self, dn: str) -> Entry:
        self._record("fetch_entry", dn)
        attrs = copy.deepcopy(self.entries.get(dn, {"objectClass": ["top"]}))
        return Entry(dn=dn, attrs=attrs, required=list(self.required.get(dn, ["objectClass"])))

    def write_entry(self, dn: str, attrs: Dict[str, List[str]], is_new: bool) -> List[str]:
        self._record("write_entry", dn, attrs, is_new)
        self.entries[dn] = copy.deepcopy(attrs)
        return list(self.changed)

    def rename_entry(self, dn: str, new_rdn: str) -> Entry:
        self._record("rename_entry", dn, new_rdn)
        new_dn = f"{new_rdn},{dn.split(',', 1)[1]}"
        self.entries[new_dn] = self.entries.pop(dn, {})
        return Entry(dn=new_dn, attrs=copy.deepcopy(self.entries[new_dn]))

    def delete_entry(self, dn: str) -> None:
        self._record("delete_entry", dn)
        self.entries.pop(dn, None)

    def check_password(self, dn: str, old: str) -> bool:
        self._record("check_password", dn, old)
        return old == "secret"

    def change_password(self, dn: str, old: Optional[str], new: str) -> None:
        self._record("change_password", dn, old, new)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def schema_payload() -> Dict[str, Any]:
    """
    Return a schema payload keyed by lowercased names, as the service sends it.

    Covers the inetOrgPerson chain, one auxiliary class, one class with
    two superclasses, and an attribute registered under an alias.
    """
    def oc(name: str, sup: List[str], must: List[str], may: List[str], kind: str) -> Dict[str, Any]:
        return {"name": name, "names": [name], "sup": sup, "must": must, "may": may, "kind": kind}

    def attr(name: str, names: List[str], equality: Optional[str] = "caseIgnoreMatch") -> Dict[str, Any]:
        return {"name": name, "names": names, "equality": equality, "syntax": "1.3.6.1.4.1.1466.115.121.1.15"}

    classes = [
        oc("top", [], ["objectClass"], [], "abstract"),
        oc("person", ["top"], ["sn", "cn"], ["userPassword", "telephoneNumber", "description"], "structural"),
        oc("organizationalPerson", ["person"], [], ["title", "ou", "telephoneNumber"], "structural"),
        oc("inetOrgPerson", ["organizationalPerson"], ["cn"], ["mail", "uid", "employeeNumber"], "structural"),
        oc("organizationalRole", ["top"], ["cn"], ["description"], "structural"),
        oc("posixAccount", ["top"], ["uid", "uidNumber", "gidNumber", "homeDirectory"], ["loginShell"], "auxiliary"),
        oc("hybrid", ["organizationalRole", "person"], ["description"], [], "structural"),
    ]
    attributes = [
        attr("objectClass", ["objectClass"], "objectIdentifierMatch"),
        attr("cn", ["cn", "commonName"]),
        attr("sn", ["sn", "surname"]),
        attr("uid", ["uid", "userid"]),
        attr("uidNumber", ["uidNumber"], "integerMatch"),
        attr("gidNumber", ["gidNumber"], "integerMatch"),
        attr("homeDirectory", ["homeDirectory"], "caseExactIA5Match"),
        attr("mail", ["mail", "rfc822Mailbox"]),
        attr("userPassword", ["userPassword"], "octetStringMatch"),
        attr("description", ["description"]),
        attr("telephoneNumber", ["telephoneNumber"], "telephoneNumberMatch"),
        attr("title", ["title"]),
    ]
    return {
        "attributes": {a["name"].lower(): a for a in attributes},
        "objectClasses": {c["name"].lower(): c for c in classes},
    }


@pytest.fixture
def fake_directory(schema_payload: Dict[str, Any]) -> FakeDirectory:
    """Provide a fresh in-memory directory service."""
    return FakeDirectory(schema_payload)
