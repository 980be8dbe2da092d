from __future__ import annotations

"""
Directory Tree Data Models.

Provides the node type held by the tree cache. Nodes are mutable: the
cache flips their expansion and load flags in place while keeping the
node objects themselves stable between reloads of other subtrees.
"""

from dataclasses import dataclass
from typing import Any, Dict

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(eq=False)
class TreeNode:
    """
    A single directory entry as displayed in the tree.

    Attributes:
        dn: Hierarchical identifier of the entry.
        level: Depth relative to the first loaded node (root is 0).
        open: Whether the node is expanded.
        loaded: Whether the children of this node have been fetched.
        has_subordinates: Server hint that the entry has children.
        structural_class: Structural object class of the entry.
    """
    dn: str
    level: int = 0
    open: bool = False
    loaded: bool = False
    has_subordinates: bool = False
    structural_class: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TreeNode":
        """
        Build a node from one item of a ``fetch_children`` response.

        Accepts both the wire casing (``hasSubordinates``,
        ``structuralObjectClass``) and the snake_case field names.
        """
        return cls(
            dn=str(data["dn"]),
            has_subordinates=bool(
                data.get("hasSubordinates", data.get("has_subordinates", False))
            ),
            structural_class=str(
                data.get("structuralObjectClass", data.get("structural_class", "")) or ""
            ),
        )
