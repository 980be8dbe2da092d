from __future__ import annotations

"""
Distinguished Name (DN) Helpers.

Pure string operations over hierarchical identifiers. A DN is a
comma-delimited sequence of relative naming components; removing the
leading component yields the identifier of the parent entry. Separators
escaped with a backslash (``cn=Doe\\, John``) belong to the value and
never split a component.
"""

from typing import List, Tuple

from ldapui.domain.errors import ValidationFailure

SEPARATOR = ","
ASSIGNMENT = "="
ESCAPE = "\\"

# -----------------------------------------------------------------------------
# DECOMPOSITION
# -----------------------------------------------------------------------------

def _split_unescaped(text: str, sep: str, maxsplit: int = -1) -> List[str]:
    """Split ``text`` on ``sep``, skipping characters escaped with a backslash."""
    parts: List[str] = []
    start = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == ESCAPE:
            i += 2
            continue
        if ch == sep and (maxsplit < 0 or len(parts) < maxsplit):
            parts.append(text[start:i])
            start = i + 1
        i += 1
    parts.append(text[start:])
    return parts


def _is_escaped(text: str, pos: int) -> bool:
    """True if the character at ``pos`` follows an odd run of backslashes."""
    run = 0
    i = pos - 1
    while i >= 0 and text[i] == ESCAPE:
        run += 1
        i -= 1
    return run % 2 == 1


def split(dn: str) -> List[str]:
    """Return the naming components of a DN, leading component first."""
    if not dn:
        return []
    return _split_unescaped(dn, SEPARATOR)


def depth(dn: str) -> int:
    """Count the hierarchical components of a DN."""
    return len(split(dn))


def rdn(dn: str) -> str:
    """Return the leading relative naming component."""
    return split(dn)[0] if dn else ""


def parent(dn: str) -> str:
    """
    Trim the leading component of a DN.

    Args:
        dn: Identifier to trim.

    Returns:
        str: Parent identifier, or an empty string for a top-level DN.
    """
    parts = _split_unescaped(dn, SEPARATOR, 1)
    if len(parts) < 2:
        return ""
    return parts[1]


def ancestors(dn: str) -> List[str]:
    """List every ancestor identifier of a DN, nearest first."""
    chain: List[str] = []
    current = parent(dn)
    while current:
        chain.append(current)
        current = parent(current)
    return chain


def is_descendant(dn: str, base: str) -> bool:
    """
    Check whether ``dn`` lies strictly below ``base``.

    The suffix must start on a component boundary, so ``cn=ab,o=x`` is
    not below ``b,o=x`` even though it ends with that text.

    Args:
        dn: Candidate identifier.
        base: Ancestor identifier.

    Returns:
        bool: True if ``dn`` is a descendant of ``base``.
    """
    if not base or len(dn) <= len(base):
        return False
    if not dn.endswith(SEPARATOR + base):
        return False
    return not _is_escaped(dn, len(dn) - len(base) - 1)

# -----------------------------------------------------------------------------
# RELATIVE NAMES
# -----------------------------------------------------------------------------

def split_rdn(component: str) -> Tuple[str, str]:
    """
    Split a relative naming component into attribute and value.

    Args:
        component: A single ``attr=value`` component.

    Returns:
        Tuple[str, str]: Attribute name and value.

    Raises:
        ValidationFailure: If the component is not one ``attr=value`` pair.
    """
    parts = _split_unescaped(component, ASSIGNMENT)
    if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
        raise ValidationFailure(f"Invalid RDN: {component}")
    return parts[0].strip(), parts[1].strip()


def rdn_attribute(dn: str) -> str:
    """Return the naming attribute of the leading component."""
    return _split_unescaped(rdn(dn), ASSIGNMENT, 1)[0]


def make_rdn(attr: str, value: str) -> str:
    return f"{attr}{ASSIGNMENT}{value}"


def child(parent_dn: str, component: str) -> str:
    """Join a relative naming component onto a parent identifier."""
    if not parent_dn:
        return component
    return f"{component}{SEPARATOR}{parent_dn}"


def rename(dn: str, new_rdn: str) -> str:
    """
    Build the identifier an entry gets after a rename.

    The leading component is replaced, the parent suffix is kept as-is.
    """
    return child(parent(dn), new_rdn)
