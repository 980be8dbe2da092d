from __future__ import annotations

"""
Browser Session.

Explicit context object owning every piece of mutable state of a
directory browsing session: the tree cache, the schema index, the entry
in the editor, the current user and the last status alert.

Operations never raise for expected failures. Transport and validation
errors are logged and surfaced through ``alert``; the state touched by
the failing operation is left as it was.
"""

import logging
from typing import Any, Dict, List, Optional

from ldapui.core.entry.model import EntryModel
from ldapui.core.schema.index import SchemaIndex
from ldapui.core.tree.cache import TreeCache
from ldapui.core.tree.resolver import PathResolver
from ldapui.domain import dn as dnutil
from ldapui.domain.entry_models import (
    Alert,
    Entry,
    error_alert,
    info_alert,
    warning_alert,
)
from ldapui.domain.errors import DirectoryError, TransportFailure, ValidationFailure
from ldapui.domain.tree_models import TreeNode
from ldapui.infra.network.directory_client import DirectoryClient

logger = logging.getLogger(__name__)


class Session:
    """
    One browsing session against a directory service.

    Empty on construction; ``start`` populates it, ``close`` discards it.

    Args:
        client: Directory service collaborator.
    """

    def __init__(self, client: DirectoryClient) -> None:
        self.client = client
        self.cache = TreeCache(client.fetch_children)
        self.resolver = PathResolver(self.cache)
        self.schema = SchemaIndex()
        self.model = EntryModel(self.schema)
        self.entry: Optional[Entry] = None
        self.user: Optional[str] = None
        self.search_result: Optional[List[Dict[str, Any]]] = None
        self.alert: Optional[Alert] = None

    # -------------------------------------------------------------------------
    # LIFECYCLE
    # -------------------------------------------------------------------------

    def start(self) -> bool:
        """Fetch the current user, the schema and the root of the tree."""
        try:
            user = self.client.whoami()
            schema = SchemaIndex.from_dict(self.client.fetch_schema())
        except TransportFailure as e:
            self.show_error(str(e))
            return False

        self.user = user
        self.schema = schema
        self.model = EntryModel(schema)
        logger.info(f"Session started as {self.user or '<anonymous>'}")
        return self.reload_root()

    def reload_root(self) -> bool:
        try:
            self.cache.load(None)
        except DirectoryError as e:
            self._report(e)
            return False
        return True

    def close(self) -> None:
        self.cache.clear()
        self.schema = SchemaIndex()
        self.model = EntryModel(self.schema)
        self.entry = None
        self.user = None
        self.search_result = None
        self.alert = None
        logger.info("Session closed")

    # -------------------------------------------------------------------------
    # TREE
    # -------------------------------------------------------------------------

    def visible_sequence(self) -> List[TreeNode]:
        return self.cache.visible_sequence()

    def toggle(self, dn: str) -> bool:
        node = self.cache.get(dn)
        if node is None:
            self.show_warning(f"Not in tree: {dn}")
            return False
        try:
            self.cache.toggle(node)
        except DirectoryError as e:
            self._report(e)
            return False
        return True

    def reveal(self, dn: str) -> bool:
        try:
            self.resolver.reveal(dn)
        except DirectoryError as e:
            self._report(e)
            return False
        return True

    def _reload_parent(self, dn: str) -> None:
        parent = dnutil.parent(dn)
        if parent not in self.cache:
            return
        try:
            self.cache.load(parent)
        except DirectoryError as e:
            self._report(e)

    # -------------------------------------------------------------------------
    # EDITOR
    # -------------------------------------------------------------------------

    def load_entry(self, dn: str, changed: Optional[List[str]] = None) -> bool:
        """
        Reveal ``dn`` in the tree and load it into the editor.

        An entry the tree cannot show is still loaded; the reveal failure
        is logged and the alert shown before the call is kept.
        """
        self.search_result = None
        alert = self.alert
        revealed = self.reveal(dn)
        try:
            entry = self.client.fetch_entry(dn)
        except TransportFailure as e:
            self.show_error(str(e))
            return False
        entry.changed = list(changed or [])
        self.entry = entry
        if not revealed:
            self.alert = alert
        return True

    def new_entry(
            self,
            object_class: Optional[str],
            rdn_attr: Optional[str],
            name: Optional[str],
            parent_dn: Optional[str] = None,
    ) -> bool:
        """Put a fresh draft below ``parent_dn`` (default: current entry) in the editor."""
        if parent_dn is None:
            parent_dn = self.entry.dn if self.entry else ""
        try:
            draft = self.model.create_entry(parent_dn, object_class, rdn_attr, name)
        except ValidationFailure as e:
            self._report(e)
            return False
        self.entry = draft
        return True

    def add_class(self, name: str) -> bool:
        if self.entry is None:
            return False
        try:
            self.model.add_class(self.entry, name)
        except ValidationFailure as e:
            self._report(e)
            return False
        return True

    def add_attribute(self, name: str) -> bool:
        if self.entry is None:
            return False
        try:
            self.model.add_attribute(self.entry, name)
        except ValidationFailure as e:
            self._report(e)
            return False
        return True

    def available_attributes(self) -> List[str]:
        if self.entry is None:
            return []
        return self.model.available_auxiliary_attributes(self.entry)

    def required(self, name: str) -> bool:
        return self.entry is not None and self.model.required(self.entry, name)

    def changed(self, name: str) -> bool:
        return self.model.changed(self.entry, name)

    def save(self) -> bool:
        """Write the current entry, then reload it with the changed markers."""
        entry = self.entry
        if entry is None:
            return False
        try:
            self.model.validate_for_submit(entry)
            changed = self.client.write_entry(entry.dn, entry.attrs, entry.is_new)
        except DirectoryError as e:
            self._report(e)
            return False

        if changed:
            self.show_info("👍 Saved changes")
        if entry.is_new:
            self._reload_parent(entry.dn)
        return self.load_entry(entry.dn, changed)

    def delete(self) -> bool:
        if self.entry is None:
            return False
        dn = self.entry.dn
        try:
            self.client.delete_entry(dn)
        except TransportFailure as e:
            self.show_error(str(e))
            return False
        self.show_info(f"Deleted entry: {dn}")
        self.entry = None
        self._reload_parent(dn)
        return True

    def rename(self, new_rdn_attr: Optional[str]) -> bool:
        """Rename the current entry to use another attribute as its RDN."""
        if self.entry is None:
            return False
        old_dn = self.entry.dn
        try:
            new_rdn = self.model.prepare_rename(self.entry, new_rdn_attr)
            self.entry = self.client.rename_entry(old_dn, new_rdn)
        except DirectoryError as e:
            self._report(e)
            return False

        self._reload_parent(old_dn)
        return self.load_entry(dnutil.rename(old_dn, new_rdn))

    def copy(self, new_dn: str) -> bool:
        """Turn the current entry into an unsaved copy at ``new_dn``."""
        if self.entry is None:
            return False
        try:
            self.entry = self.model.copy_entry(self.entry, new_dn)
        except ValidationFailure as e:
            if new_dn == self.entry.dn:
                self.show_warning(str(e))
            else:
                self.show_error(str(e))
            return False
        return True

    # -------------------------------------------------------------------------
    # PASSWORDS
    # -------------------------------------------------------------------------

    def check_password(self, old: Optional[str]) -> Optional[bool]:
        if self.entry is None or not old:
            return None
        try:
            return self.client.check_password(self.entry.dn, old)
        except TransportFailure as e:
            self.show_error(str(e))
            return None

    def change_password(self, old: Optional[str], new1: str, new2: str) -> bool:
        """
        Set a new password on the current entry.

        The two new values must match; the old password is mandatory when
        users change their own password.
        """
        if self.entry is None:
            return False
        if not new1 or new1 != new2:
            self._report(ValidationFailure("New passwords do not match"))
            return False
        if self.user == self.entry.dn and not old:
            self._report(ValidationFailure("Current password is required"))
            return False
        try:
            self.client.change_password(self.entry.dn, old, new1)
        except TransportFailure as e:
            self.show_error(str(e))
            return False
        self.show_info("👍 Password changed")
        return True

    # -------------------------------------------------------------------------
    # SEARCH
    # -------------------------------------------------------------------------

    def search(self, query: str) -> bool:
        try:
            results = self.client.search(query)
        except TransportFailure as e:
            self.show_error(str(e))
            return False

        self.search_result = None
        self.alert = None
        if not results:
            self.show_warning("No search results")
            return False
        if len(results) == 1:
            return self.load_entry(results[0]["dn"])

        self.entry = None
        self.search_result = results
        return True

    # -------------------------------------------------------------------------
    # ALERTS
    # -------------------------------------------------------------------------

    def show_info(self, message: str) -> None:
        logger.info(message)
        self.alert = info_alert(message)

    def show_warning(self, message: str) -> None:
        logger.warning(message)
        self.alert = warning_alert(message)

    def show_error(self, message: str) -> None:
        logger.error(message)
        self.alert = error_alert(message)

    def _report(self, error: DirectoryError) -> None:
        if isinstance(error, TransportFailure):
            self.show_error(str(error))
        else:
            self.show_warning(str(error))
