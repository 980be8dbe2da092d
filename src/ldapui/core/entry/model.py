from __future__ import annotations

"""
Entry Model.

Builds and edits the single entry shown in the editor by walking the
object class hierarchy of the schema index. All validation happens
here, before the session talks to the directory service.
"""

import logging
from typing import Iterable, List, Optional

from ldapui.core.schema.index import SchemaIndex
from ldapui.domain import dn as dnutil
from ldapui.domain.constants import (
    DEFAULT_INPUT_TYPE,
    MATCHING_RULE_INPUT_TYPES,
    PASSWORD_ATTRIBUTE,
)
from ldapui.domain.entry_models import OBJECT_CLASS, Entry
from ldapui.domain.errors import ValidationFailure
from ldapui.domain.schema_models import ClassDefinition

logger = logging.getLogger(__name__)


class EntryModel:
    """
    Schema-driven operations on an ``Entry``.

    Args:
        schema: Index used to resolve classes and attributes.
    """

    def __init__(self, schema: SchemaIndex) -> None:
        self.schema = schema

    # -------------------------------------------------------------------------
    # DRAFT CONSTRUCTION
    # -------------------------------------------------------------------------

    def build_from_class(self, leaf_class: str, dn: str = "") -> Entry:
        """
        Synthesize a draft entry for a structural class.

        Walks the first-listed superclass at each step up to the root.
        Every visited class contributes its required attributes (first-seen
        order, each seeded with an empty value) and its name, so the
        applied-class list ends up leaf-to-root.

        Args:
            leaf_class: Most specific object class of the new entry.
            dn: Identifier for the draft, if already known.

        Returns:
            Entry: A new, unsaved entry.

        Raises:
            ValidationFailure: If ``leaf_class`` is not in the schema.
        """
        entry = Entry(dn=dn, attrs={OBJECT_CLASS: []}, is_new=True)
        for oc in self.schema.superclass_chain(leaf_class):
            self._apply_class(entry, oc)
        logger.debug(f"Built draft from '{leaf_class}': classes={entry.object_classes}")
        return entry

    def create_entry(
            self,
            parent_dn: str,
            object_class: Optional[str],
            rdn_attr: Optional[str],
            name: Optional[str],
    ) -> Entry:
        """
        Create a named draft below ``parent_dn``.

        Raises:
            ValidationFailure: If any input is missing or the class is unknown.
        """
        if not object_class or not rdn_attr or not name:
            raise ValidationFailure("Object class, RDN attribute and name are required")

        entry = self.build_from_class(
            object_class, dnutil.child(parent_dn, dnutil.make_rdn(rdn_attr, name))
        )
        entry.attrs[rdn_attr] = [name]
        return entry

    def rdn_choices(self, object_class: str) -> List[str]:
        """Canonical names of the attributes required along the class chain."""
        choices: List[str] = []
        for oc in self.schema.superclass_chain(object_class):
            for must in oc.must:
                choices.append(self.schema.canonical_attr_name(must))
        return choices

    def add_class(self, entry: Entry, class_name: str) -> None:
        """
        Apply one more (auxiliary) class to an entry.

        Unlike ``build_from_class`` no superclass chain is walked.

        Raises:
            ValidationFailure: If the class is unknown.
        """
        oc = self.schema.require_class(class_name)
        self._apply_class(entry, oc)
        if entry.is_new and oc.name not in entry.aux:
            entry.aux.append(oc.name)

    def _apply_class(self, entry: Entry, oc: ClassDefinition) -> None:
        self._require(entry, oc.must)
        entry.object_classes.append(oc.name)

    @staticmethod
    def _require(entry: Entry, names: Iterable[str]) -> None:
        for must in names:
            if must not in entry.required:
                entry.required.append(must)
            if not entry.attrs.get(must):
                entry.attrs[must] = [""]

    # -------------------------------------------------------------------------
    # ATTRIBUTE EDITING
    # -------------------------------------------------------------------------

    def available_auxiliary_attributes(self, entry: Entry) -> List[str]:
        """
        Optional attributes that could still be added to the entry.

        Union of the ``may`` lists of every applied class, without
        duplicates and without attributes already present on the entry.
        """
        options: List[str] = []
        for name in entry.attrs.get(OBJECT_CLASS, []):
            oc = self.schema.get_class(name)
            if oc is None:
                continue
            for may in oc.may:
                if may not in options and may not in entry.attrs:
                    options.append(may)
        return options

    @staticmethod
    def add_attribute(entry: Entry, name: str) -> None:
        if not name:
            raise ValidationFailure("Attribute name is required")
        entry.attrs[name] = [""]

    @staticmethod
    def add_row(entry: Entry, key: str) -> bool:
        """
        Append an empty value to a multi-valued field.

        Returns:
            bool: False if nothing was added (``objectClass``, or an empty
            value is already pending).
        """
        if key == OBJECT_CLASS:
            return False
        values = entry.attrs.setdefault(key, [])
        if "" in values:
            return False
        values.append("")
        return True

    @staticmethod
    def required(entry: Entry, name: str) -> bool:
        return name in entry.required

    @staticmethod
    def changed(entry: Optional[Entry], name: str) -> bool:
        return entry is not None and name in entry.changed

    @staticmethod
    def missing_required(entry: Entry) -> List[str]:
        return [name for name in entry.required if not entry.has_value(name)]

    def validate_for_submit(self, entry: Entry) -> None:
        """
        Raises:
            ValidationFailure: If a required attribute has no value.
        """
        missing = self.missing_required(entry)
        if missing:
            raise ValidationFailure(f"Missing required attribute(s): {', '.join(missing)}")

    # -------------------------------------------------------------------------
    # COPY & RENAME
    # -------------------------------------------------------------------------

    @staticmethod
    def copy_entry(entry: Entry, new_dn: str) -> Entry:
        """
        Retarget an entry as a new draft at ``new_dn``.

        The leading component must be a single ``attr=value`` whose
        attribute is required by the entry; its value replaces the
        attribute's values.

        Raises:
            ValidationFailure: On an unchanged DN or an invalid RDN.
        """
        if not new_dn:
            raise ValidationFailure("Target DN is required")
        if new_dn == entry.dn:
            raise ValidationFailure("Entry not copied")

        attr, value = dnutil.split_rdn(dnutil.rdn(new_dn))
        if attr not in entry.required:
            raise ValidationFailure(f"Invalid RDN: {dnutil.rdn(new_dn)}")

        attrs = {k: list(v) for k, v in entry.attrs.items()}
        attrs[attr] = [value]
        return Entry(
            dn=new_dn,
            attrs=attrs,
            required=list(entry.required),
            aux=list(entry.aux),
            is_new=True,
        )

    @staticmethod
    def prepare_rename(entry: Entry, new_rdn_attr: Optional[str]) -> str:
        """
        Build the new RDN for renaming ``entry`` to another naming attribute.

        Returns:
            str: ``attr=value`` using the attribute's first value.

        Raises:
            ValidationFailure: If the attribute is missing, unchanged or empty.
        """
        if not new_rdn_attr or new_rdn_attr == dnutil.rdn_attribute(entry.dn):
            raise ValidationFailure("Choose a different RDN attribute")
        values = entry.attrs.get(new_rdn_attr) or []
        if not values or not values[0]:
            raise ValidationFailure(f"Illegal value for: {new_rdn_attr}")
        return dnutil.make_rdn(new_rdn_attr, values[0])

    # -------------------------------------------------------------------------
    # FIELD PRESENTATION HINTS
    # -------------------------------------------------------------------------

    def field_type(self, name: str) -> str:
        """Input type for an attribute, derived from its equality rule."""
        if name == PASSWORD_ATTRIBUTE:
            return "password"
        attr = self.schema.get_attr(name)
        if attr is None or not attr.equality:
            return DEFAULT_INPUT_TYPE
        return MATCHING_RULE_INPUT_TYPES.get(attr.equality, DEFAULT_INPUT_TYPE)

    @staticmethod
    def is_disabled(entry: Entry, key: str) -> bool:
        """Password and naming attribute are not edited in place."""
        return key == PASSWORD_ATTRIBUTE or key == dnutil.rdn_attribute(entry.dn)

    def is_structural(self, key: str, value: str) -> bool:
        return key == OBJECT_CLASS and value in self.schema.structural
