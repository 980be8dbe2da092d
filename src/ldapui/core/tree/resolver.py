from __future__ import annotations

"""
Path Resolver.

Makes an arbitrary DN visible in the tree. Missing ancestors are loaded
strictly one after another from the nearest loaded ancestor down to the
target, since a level can only be spliced in once its parent is indexed.
"""

import logging
from typing import List

from ldapui.core.tree.cache import TreeCache
from ldapui.domain import dn as dnutil
from ldapui.domain.errors import UnknownIdentifierError

logger = logging.getLogger(__name__)


class PathResolver:
    """Drives ``TreeCache.load`` to reveal a DN."""

    def __init__(self, cache: TreeCache) -> None:
        self.cache = cache

    def reveal(self, dn: str) -> List[str]:
        """
        Expand the tree so that ``dn`` is visible.

        Args:
            dn: Target DN.

        Returns:
            List[str]: DNs that were loaded, in the order they were loaded
            (empty when the target was already in the tree).

        Raises:
            UnknownIdentifierError: If no ancestor of ``dn`` is loaded, or
                an intermediate entry or the target itself does not
                exist on the server.
            TransportFailure: If a load fails; earlier loads stay applied.
        """
        if dn in self.cache:
            self.cache.open_ancestors(dn)
            return []

        pending = self.missing_chain(dn)
        loaded: List[str] = []
        logger.debug(f"Revealing {dn}: loading {len(pending)} level(s)")

        # Nearest loaded ancestor first, then downwards
        while pending:
            step = pending.pop()
            if step not in self.cache:
                raise UnknownIdentifierError(f"No such entry: {step}")
            self.cache.load(step)
            loaded.append(step)
            node = self.cache.get(step)
            if node is not None:
                node.open = True

        if dn not in self.cache:
            raise UnknownIdentifierError(f"No such entry: {dn}")
        self.cache.open_ancestors(dn)
        return loaded

    def missing_chain(self, dn: str) -> List[str]:
        """
        Ancestors of ``dn`` to load, nearest first, ending at a loaded one.

        The last element is the nearest ancestor already in the cache; it
        is reloaded too so that the chain starts from fresh children.

        Raises:
            UnknownIdentifierError: If no ancestor of ``dn`` is loaded.
        """
        chain: List[str] = []
        for ancestor in dnutil.ancestors(dn):
            chain.append(ancestor)
            if ancestor in self.cache:
                return chain
        raise UnknownIdentifierError(f"Outside the loaded tree: {dn}")
