from __future__ import annotations

"""
Schema Domain Data Models.

Immutable definitions of object classes and attribute types as served
by the directory schema endpoint. Instances are created once when the
schema index is built and never mutated afterwards.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

# -----------------------------------------------------------------------------
# ENUMERATIONS
# -----------------------------------------------------------------------------

class ClassKind(str, Enum):
    """Object class kinds defined by the LDAP schema model."""
    STRUCTURAL = "structural"
    AUXILIARY = "auxiliary"
    ABSTRACT = "abstract"

    @classmethod
    def parse(cls, value: Any) -> "ClassKind":
        """Map a raw kind value to an enum member, defaulting to STRUCTURAL."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.STRUCTURAL

# -----------------------------------------------------------------------------
# DEFINITIONS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AttributeDefinition:
    """
    Attribute type definition.

    Attributes:
        name: Canonical display name.
        names: Every registered name, canonical one included.
        equality: Equality matching rule (e.g. ``caseIgnoreMatch``).
        syntax: Syntax OID.
        oid: Numeric object identifier.
        desc: Human-readable description.
        single_value: Whether the attribute holds at most one value.
    """
    name: str
    names: Tuple[str, ...] = ()
    equality: Optional[str] = None
    syntax: Optional[str] = None
    oid: str = ""
    desc: str = ""
    single_value: bool = False

    @property
    def aliases(self) -> Tuple[str, ...]:
        return tuple(n for n in self.names if n != self.name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AttributeDefinition":
        name = str(data["name"])
        names = tuple(data.get("names") or ()) or (name,)
        return cls(
            name=name,
            names=names,
            equality=data.get("equality"),
            syntax=data.get("syntax"),
            oid=str(data.get("oid") or ""),
            desc=str(data.get("desc") or ""),
            single_value=bool(data.get("single_value", False)),
        )


@dataclass(frozen=True)
class ClassDefinition:
    """
    Object class definition.

    Attributes:
        name: Canonical display name.
        sup: Superclass names in declaration order.
        must: Required attribute names.
        may: Optional attribute names.
        kind: Structural, auxiliary or abstract.
        names: Every registered name, canonical one included.
        oid: Numeric object identifier.
        desc: Human-readable description.
    """
    name: str
    sup: Tuple[str, ...] = ()
    must: Tuple[str, ...] = ()
    may: Tuple[str, ...] = ()
    kind: ClassKind = ClassKind.STRUCTURAL
    names: Tuple[str, ...] = ()
    oid: str = ""
    desc: str = ""

    @property
    def superclass(self) -> Optional[str]:
        """First declared superclass, the only one followed by hierarchy walks."""
        return self.sup[0] if self.sup else None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClassDefinition":
        name = str(data["name"])
        return cls(
            name=name,
            sup=tuple(data.get("sup") or ()),
            must=tuple(data.get("must") or ()),
            may=tuple(data.get("may") or ()),
            kind=ClassKind.parse(data.get("kind", ClassKind.STRUCTURAL.value)),
            names=tuple(data.get("names") or ()) or (name,),
            oid=str(data.get("oid") or ""),
            desc=str(data.get("desc") or ""),
        )


def as_list(payload: Any) -> List[Dict[str, Any]]:
    """Normalize a schema section given either as a mapping or as a list."""
    if isinstance(payload, dict):
        return list(payload.values())
    return list(payload or [])
