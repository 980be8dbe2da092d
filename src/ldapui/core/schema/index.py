from __future__ import annotations

"""
Schema Index.

Read-only lookup structure over object class and attribute type
definitions. Keys are case-folded; returned definitions keep the
server's display casing. Built once per session, never mutated.
"""

import logging
from dataclasses import asdict
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Union

from ldapui.domain.constants import HIDDEN_SCHEMA_FIELDS
from ldapui.domain.errors import ValidationFailure
from ldapui.domain.schema_models import (
    AttributeDefinition,
    ClassDefinition,
    ClassKind,
    as_list,
)

logger = logging.getLogger(__name__)


def _key(name: str) -> str:
    return name.casefold()


class SchemaIndex:
    """
    Case-insensitive index of schema definitions.

    Attribute lookups fall back to a scan over every alias when the
    name is not a canonical key. Class lookups are by canonical name only.
    """

    def __init__(
            self,
            attributes: Iterable[AttributeDefinition] = (),
            classes: Iterable[ClassDefinition] = (),
    ) -> None:
        self._attributes: Dict[str, AttributeDefinition] = {}
        self._classes: Dict[str, ClassDefinition] = {}

        for attr in attributes:
            self._attributes[_key(attr.name)] = attr
        for oc in classes:
            self._classes[_key(oc.name)] = oc

        self._structural: FrozenSet[str] = frozenset(
            oc.name for oc in self._classes.values() if oc.kind is ClassKind.STRUCTURAL
        )
        logger.debug(
            f"Schema index built: {len(self._attributes)} attributes, "
            f"{len(self._classes)} object classes ({len(self._structural)} structural)."
        )

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "SchemaIndex":
        """
        Build an index from a ``fetch_schema`` response.

        Sections may be mappings keyed by lowercased name (as the service
        sends them) or plain lists. ``classes`` is accepted as an alias
        of ``objectClasses``.
        """
        attributes = [AttributeDefinition.from_dict(a) for a in as_list(payload.get("attributes"))]
        raw_classes = payload.get("objectClasses", payload.get("classes"))
        classes = [ClassDefinition.from_dict(c) for c in as_list(raw_classes)]
        return cls(attributes, classes)

    # -------------------------------------------------------------------------
    # OBJECT CLASSES
    # -------------------------------------------------------------------------

    @property
    def classes(self) -> List[ClassDefinition]:
        return list(self._classes.values())

    @property
    def structural(self) -> FrozenSet[str]:
        """Display names of every structural object class."""
        return self._structural

    def get_class(self, name: str) -> Optional[ClassDefinition]:
        return self._classes.get(_key(name))

    def require_class(self, name: str) -> ClassDefinition:
        """
        Look up an object class that must exist.

        Raises:
            ValidationFailure: If the class is not defined in the schema.
        """
        oc = self.get_class(name) if name else None
        if oc is None:
            raise ValidationFailure(f"Unknown object class: {name}")
        return oc

    def is_structural(self, name: str) -> bool:
        oc = self.get_class(name)
        return oc is not None and oc.kind is ClassKind.STRUCTURAL

    def superclass_chain(self, name: str) -> List[ClassDefinition]:
        """
        Walk from a class to the root following the first superclass only.

        Additional declared superclasses are ignored. A superclass missing
        from the schema ends the walk, and a cycle is cut at the first
        repeated class.
        """
        chain: List[ClassDefinition] = []
        seen = set()
        oc: Optional[ClassDefinition] = self.require_class(name)
        while oc is not None and _key(oc.name) not in seen:
            seen.add(_key(oc.name))
            chain.append(oc)
            sup = oc.superclass
            if sup is None:
                break
            oc = self.get_class(sup)
            if oc is None:
                logger.warning(f"Superclass '{sup}' of '{chain[-1].name}' is not in the schema.")
        return chain

    # -------------------------------------------------------------------------
    # ATTRIBUTES
    # -------------------------------------------------------------------------

    @property
    def attributes(self) -> List[AttributeDefinition]:
        return list(self._attributes.values())

    def get_attr(self, name: str) -> Optional[AttributeDefinition]:
        """
        Resolve an attribute by canonical name or by any alias.

        Args:
            name: Attribute name in any casing.

        Returns:
            Optional[AttributeDefinition]: The definition, or None if unknown.
        """
        key = _key(name)
        attr = self._attributes.get(key)
        if attr is not None:
            return attr

        for candidate in self._attributes.values():
            for alias in candidate.names:
                if _key(alias) == key:
                    return candidate
        return None

    def canonical_attr_name(self, name: str) -> str:
        """Display name of an attribute, or the input if it is unknown."""
        attr = self.get_attr(name)
        return attr.name if attr else name

    # -------------------------------------------------------------------------
    # DETAIL VIEWS
    # -------------------------------------------------------------------------

    def details(self, definition: Union[AttributeDefinition, ClassDefinition]) -> Dict[str, Any]:
        """Fields of a definition worth showing in a detail panel."""
        out: Dict[str, Any] = {}
        for k, v in asdict(definition).items():
            if k in HIDDEN_SCHEMA_FIELDS or v in (None, "", ()):
                continue
            out[k] = v.value if isinstance(v, ClassKind) else v
        return out
