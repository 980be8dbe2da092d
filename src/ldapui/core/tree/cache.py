from __future__ import annotations

"""
Directory Tree Cache.

Holds the partially loaded directory tree as a depth-first pre-order
node sequence plus a DN index for constant-time lookup. Every subtree
occupies a contiguous run right after its root node, which lets a
reload prune stale descendants with a single forward scan.
"""

import logging
import threading
from typing import Any, Callable, Dict, Iterator, List, Optional, Set

from ldapui.domain import dn as dnutil
from ldapui.domain.constants import STRUCTURAL_ICONS, UNMAPPED_ICON
from ldapui.domain.errors import LoadInProgressError, UnknownIdentifierError
from ldapui.domain.tree_models import TreeNode

logger = logging.getLogger(__name__)

FetchChildren = Callable[[Optional[str]], List[Dict[str, Any]]]

# Marker key for the root request in the in-progress set
_ROOT_KEY = ""


def icon_for(node: Optional[TreeNode]) -> str:
    """
    Icon name for a node, keyed by its case-folded structural class.

    Returns ``UNMAPPED_ICON`` for unknown classes and missing nodes.
    """
    if node is None or not node.structural_class:
        return UNMAPPED_ICON
    return STRUCTURAL_ICONS.get(node.structural_class.casefold(), UNMAPPED_ICON)


class TreeCache:
    """
    Incrementally loaded tree of directory entries.

    Loading happens one level at a time through the ``fetch_children``
    collaborator. The node sequence and the DN index always contain the
    same node set. Concurrent loads of the same DN are rejected.

    Args:
        fetch_children: Callable returning the child items of a DN
            (None requests the directory root).
    """

    def __init__(self, fetch_children: FetchChildren) -> None:
        self._fetch = fetch_children
        self._nodes: List[TreeNode] = []
        self._index: Dict[str, TreeNode] = {}
        self._origin: Optional[int] = None
        self._loading: Set[str] = set()
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # READ ACCESS
    # -------------------------------------------------------------------------

    @property
    def nodes(self) -> List[TreeNode]:
        """Snapshot of the full node sequence in pre-order."""
        with self._lock:
            return list(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, dn: object) -> bool:
        return dn in self._index

    def __iter__(self) -> Iterator[TreeNode]:
        return iter(self.nodes)

    def get(self, dn: str) -> Optional[TreeNode]:
        return self._index.get(dn)

    def parent(self, dn: str) -> Optional[TreeNode]:
        """The indexed node one level above ``dn``, if loaded."""
        return self._index.get(dnutil.parent(dn))

    def is_loading(self, dn: Optional[str]) -> bool:
        return (dn or _ROOT_KEY) in self._loading

    def visible_sequence(self) -> List[TreeNode]:
        """
        Nodes whose whole loaded ancestor chain is expanded.

        Derived from scratch on every call.
        """
        with self._lock:
            return [node for node in self._nodes if self._ancestors_open(node)]

    def _ancestors_open(self, node: TreeNode) -> bool:
        p = self._index.get(dnutil.parent(node.dn))
        while p is not None:
            if not p.open:
                return False
            p = self._index.get(dnutil.parent(p.dn))
        return True

    # -------------------------------------------------------------------------
    # MUTATIONS
    # -------------------------------------------------------------------------

    def load(self, dn: Optional[str] = None) -> List[TreeNode]:
        """
        Fetch one level below ``dn`` and splice it into the tree.

        Stale descendants of ``dn`` are pruned from both the sequence and
        the index before the fresh children are inserted. A root load
        (``dn`` is None) discards the whole tree and repopulates it. The
        first load into an empty cache expands the first inserted node.

        Args:
            dn: DN whose children to load, or None for the root.

        Returns:
            List[TreeNode]: The freshly inserted child nodes.

        Raises:
            LoadInProgressError: If a load for the same DN is still running.
            UnknownIdentifierError: If ``dn`` is not in the tree.
            TransportFailure: Propagated from the collaborator; the cache
                is left untouched.
        """
        key = dn or _ROOT_KEY
        with self._lock:
            if key in self._loading:
                raise LoadInProgressError(key)
            if dn and dn not in self._index:
                raise UnknownIdentifierError(f"Not in tree: {dn}")
            self._loading.add(key)

        try:
            items = self._fetch(dn)
            children = [TreeNode.from_dict(item) for item in items]
            with self._lock:
                fresh_tree = not self._nodes or dn is None
                self._splice(dn, children)
        finally:
            with self._lock:
                self._loading.discard(key)

        if fresh_tree and self._nodes:
            self.toggle(self._nodes[0])

        return children

    def toggle(self, node: TreeNode) -> None:
        """Flip the expansion flag, loading children on first expansion."""
        node.open = not node.open
        logger.debug(f"Toggled {node.dn} -> {'open' if node.open else 'closed'}")
        if not node.loaded:
            self.load(node.dn)

    def open_ancestors(self, dn: str) -> None:
        """Expand every loaded ancestor of ``dn`` (not ``dn`` itself)."""
        p = self.parent(dn)
        while p is not None:
            p.open = True
            p.has_subordinates = True
            p = self.parent(p.dn)

    def clear(self) -> None:
        """Drop every node and reset the level origin."""
        with self._lock:
            self._nodes.clear()
            self._index.clear()
            self._origin = None

    # -------------------------------------------------------------------------
    # INTERNAL HELPERS
    # -------------------------------------------------------------------------

    def _splice(self, dn: Optional[str], children: List[TreeNode]) -> None:
        """Prune the stale subtree of ``dn`` and insert ``children``. Lock held."""
        if dn is None:
            self._nodes.clear()
            self._index.clear()
            self._origin = None
            pos = 0
        else:
            parent = self._index.get(dn)
            if parent is None:
                # Pruned by another reload while this fetch was in flight
                raise UnknownIdentifierError(f"Not in tree: {dn}")
            parent.loaded = True
            pos = self._nodes.index(parent) + 1
            pruned = 0
            while pos < len(self._nodes) and dnutil.is_descendant(self._nodes[pos].dn, dn):
                del self._index[self._nodes[pos].dn]
                del self._nodes[pos]
                pruned += 1
            if pruned:
                logger.debug(f"Pruned {pruned} node(s) below {dn}")

        if self._origin is None and children:
            self._origin = dnutil.depth(children[0].dn)

        for node in children:
            if node.dn in self._index:
                logger.warning(f"Ignoring duplicate tree item: {node.dn}")
                continue
            node.level = dnutil.depth(node.dn) - (self._origin or 0)
            self._index[node.dn] = node
            self._nodes.insert(pos, node)
            pos += 1

        logger.debug(f"Loaded {len(children)} child(ren) below {dn or '<root>'}")
