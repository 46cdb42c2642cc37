"""Call-tree data types for backtracking traces (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from . import constants


class NodeStatus(str, Enum):
    DEFAULT = "default"
    ACTIVE = "active"
    VISITED = "visited"
    RESULT = "result"
    BACKTRACKED = "backtracked"
    PRUNED = "pruned"


@dataclass(frozen=True)
class TreeNode:
    """One node of the explored search tree.

    ``label`` is the element chosen on the edge into this node (empty for
    the root); ``path`` is the full choice sequence from the root.
    """

    node_id: str
    parent_id: str | None
    label: str
    path: tuple[int | str, ...] = ()
    depth: int = 0

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


ROOT_NODE = TreeNode(node_id=constants.ROOT_NODE_ID, parent_id=None, label="")


@dataclass(frozen=True)
class CallTree:
    """Every node the search visited, in discovery order."""

    nodes: tuple[TreeNode, ...] = (ROOT_NODE,)
    _index: dict[str, TreeNode] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        self._index.update({node.node_id: node for node in self.nodes})

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._index

    def get(self, node_id: str) -> TreeNode:
        return self._index[node_id]

    def children(self, node_id: str) -> list[TreeNode]:
        return [n for n in self.nodes if n.parent_id == node_id]

    def leaves(self) -> list[TreeNode]:
        parents = {n.parent_id for n in self.nodes}
        return [n for n in self.nodes if n.node_id not in parents]

    def depth(self) -> int:
        return max(n.depth for n in self.nodes)
