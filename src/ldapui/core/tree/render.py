from __future__ import annotations

"""
Tree Renderer.

Converts the visible node sequence into ASCII lines for terminal output.
Uses the node levels computed by the cache to draw connectors.
"""

from typing import Dict, List, Sequence

from ldapui.core.tree.cache import icon_for
from ldapui.domain import dn as dnutil
from ldapui.domain.tree_models import TreeNode

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_tree_lines(nodes: Sequence[TreeNode], show_icons: bool = False) -> List[str]:
    """
    Render a pre-order node sequence with ├── / └── connectors.

    Level-0 nodes print their full DN; deeper nodes print their RDN.
    Collapsed nodes with children are suffixed with ``[+]``.

    Args:
        nodes: Visible nodes in pre-order (see ``TreeCache.visible_sequence``).
        show_icons: Append the structural class icon name.

    Returns:
        List[str]: One line per node.
    """
    last_flags = _last_sibling_flags(nodes)
    branch: Dict[int, bool] = {}
    lines: List[str] = []

    for node, is_last in zip(nodes, last_flags):
        label = node.dn if node.level == 0 else dnutil.rdn(node.dn)
        if node.has_subordinates and not node.open:
            label += " [+]"
        if show_icons:
            label += f" ({icon_for(node)})"

        if node.level <= 0:
            lines.append(label)
            continue

        prefix = "".join(
            "    " if branch.get(k, True) else "│   " for k in range(1, node.level)
        )
        connector = "└── " if is_last else "├── "
        lines.append(f"{prefix}{connector}{label}")
        branch[node.level] = is_last

    return lines

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _last_sibling_flags(nodes: Sequence[TreeNode]) -> List[bool]:
    """For each node, whether no later sibling follows before its parent closes."""
    flags = [True] * len(nodes)
    pending: Dict[int, bool] = {}
    for i in range(len(nodes) - 1, -1, -1):
        level = nodes[i].level
        flags[i] = not pending.get(level, False)
        pending[level] = True
        for deeper in [k for k in pending if k > level]:
            del pending[deeper]
    return flags
