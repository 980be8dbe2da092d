from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the lookup tables shared by the tree and entry models:
structural class icons, input types per matching rule, and the
schema fields hidden from attribute/class detail views.
"""

from typing import Dict, FrozenSet

CURRENT_CONFIG_VERSION = "1.0.0"

ROOT_REQUEST = "base"
PASSWORD_ATTRIBUTE = "userPassword"

# -----------------------------------------------------------------------------
# TREE ICONS
# -----------------------------------------------------------------------------
# Keys are case-folded class names.
UNMAPPED_ICON = "question"

STRUCTURAL_ICONS: Dict[str, str] = {
    "inetorgperson": "address-book",
    "organization": "globe",
    "organizationalrole": "robot",
    "organizationalunit": "sitemap",
    "groupofnames": "user-friends",
    "groupofuniquenames": "user-friends",
    "posixgroup": "user-friends",
    "person": "user-tie",
    "account": "user-tie",
}

# -----------------------------------------------------------------------------
# EDITOR FIELDS
# -----------------------------------------------------------------------------
DEFAULT_INPUT_TYPE = "text"

MATCHING_RULE_INPUT_TYPES: Dict[str, str] = {
    "integerMatch": "number",
}

HIDDEN_SCHEMA_FIELDS: FrozenSet[str] = frozenset({
    "desc", "name", "names", "no_user_mod", "obsolete",
    "oid", "usage", "syntax", "sup",
})
