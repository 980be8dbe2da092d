from __future__ import annotations

"""
Unit tests for DN helpers.

Verifies:
1. Decomposition into components, parent and ancestors.
2. Component-boundary aware descendant checks.
3. RDN parsing and rename composition.
"""

import pytest

from ldapui.domain import dn
from ldapui.domain.errors import ValidationFailure


def test_parent_and_depth() -> None:
    assert dn.parent("uid=a,ou=people,dc=x") == "ou=people,dc=x"
    assert dn.parent("dc=x") == ""
    assert dn.depth("uid=a,ou=people,dc=x") == 3
    assert dn.depth("") == 0
    assert dn.rdn("uid=a,ou=people,dc=x") == "uid=a"


def test_ancestors_nearest_first() -> None:
    assert dn.ancestors("uid=a,ou=people,dc=x,dc=com") == [
        "ou=people,dc=x,dc=com",
        "dc=x,dc=com",
        "dc=com",
    ]
    assert dn.ancestors("dc=com") == []


def test_is_descendant_respects_component_boundaries() -> None:
    """A textual suffix that does not start a component is not a descendant."""
    assert dn.is_descendant("uid=a,ou=people,dc=x", "ou=people,dc=x")
    assert dn.is_descendant("cn=b,uid=a,ou=people,dc=x", "ou=people,dc=x")
    assert not dn.is_descendant("ou=sub-ou=people,dc=x", "ou=people,dc=x")
    assert not dn.is_descendant("cn=ab,o=x", "b,o=x")
    assert not dn.is_descendant("ou=people,dc=x", "ou=people,dc=x")
    assert not dn.is_descendant("ou=people,dc=x", "")


def test_split_rdn_valid_and_invalid() -> None:
    assert dn.split_rdn("cn=Jane") == ("cn", "Jane")
    for bad in ("cnJane", "cn=", "=Jane", "cn=a=b"):
        with pytest.raises(ValidationFailure):
            dn.split_rdn(bad)


def test_rename_keeps_parent_suffix() -> None:
    assert dn.rename("cn=Jane,ou=people,dc=x", "uid=jane") == "uid=jane,ou=people,dc=x"
    assert dn.rename("dc=x", "dc=y") == "dc=y"
    assert dn.rdn_attribute("cn=Jane,ou=people,dc=x") == "cn"


def test_escaped_separators_stay_in_the_value() -> None:
    escaped = r"cn=Doe\, John,ou=people,dc=x"

    assert dn.split(escaped) == [r"cn=Doe\, John", "ou=people", "dc=x"]
    assert dn.depth(escaped) == 3
    assert dn.rdn(escaped) == r"cn=Doe\, John"
    assert dn.parent(escaped) == "ou=people,dc=x"
    assert dn.ancestors(escaped) == ["ou=people,dc=x", "dc=x"]
    assert dn.rdn_attribute(escaped) == "cn"
    assert dn.split_rdn(r"cn=a\=b") == ("cn", r"a\=b")


def test_escaped_backslash_before_separator_still_splits() -> None:
    assert dn.parent(r"cn=a\\,dc=x") == "dc=x"
    assert dn.is_descendant(r"cn=a\\,dc=x", "dc=x")


def test_escaped_separator_is_not_a_component_boundary() -> None:
    assert dn.is_descendant(r"cn=Doe\, John,ou=people,dc=x", "ou=people,dc=x")
    assert not dn.is_descendant(r"cn=x\,ou=people,dc=x", "ou=people,dc=x")
