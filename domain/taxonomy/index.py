"""Arena-indexed research-field taxonomy with root-to-node path lookups."""

import logging
from collections.abc import Iterator
from typing import Any

from domain.schemas import PathNode, TaxonomyNode

logger = logging.getLogger(__name__)


class TaxonomyIndex:
    """
    Read-only index over a research-field tree.

    Nodes are stored in flat parallel arrays in depth-first pre-order
    (children visited in stored order). Every node keeps an explicit parent
    index, so a root-to-node path is built in O(depth) by walking parent
    pointers. Because parents are assigned exactly once while walking the
    source tree, the index cannot contain cycles.

    Lookups by label follow pre-order, so with duplicate labels the first
    node in pre-order wins. Lookups by id are unambiguous: ids must be unique.
    """

    def __init__(self) -> None:
        self._ids: list[str] = []
        self._labels: list[str] = []
        self._parents: list[int | None] = []
        self._children: list[list[int]] = []
        self._depths: list[int] = []
        self._by_id: dict[str, int] = {}
        self._by_label: dict[str, int] = {}
        self._duplicate_labels: set[str] = set()

    # ----- construction -----

    @classmethod
    def from_tree(cls, root: TaxonomyNode | dict[str, Any]) -> "TaxonomyIndex":
        """
        Build an index from a taxonomy tree.

        Args:
            root: Root TaxonomyNode, or a raw ``{id, label, children}`` mapping

        Returns:
            Populated TaxonomyIndex

        Raises:
            ValueError: If a node id occurs more than once
            pydantic.ValidationError: If the mapping does not have the node shape
        """
        if not isinstance(root, TaxonomyNode):
            root = TaxonomyNode.model_validate(root)

        index = cls()
        # (node, parent_idx); pushed in reverse so children pop in stored order
        stack: list[tuple[TaxonomyNode, int | None]] = [(root, None)]
        while stack:
            node, parent = stack.pop()
            idx = index._add(node.id, node.label, parent)
            for child in reversed(node.children):
                stack.append((child, idx))

        if index._duplicate_labels:
            logger.warning(
                "Taxonomy has %d duplicate label(s); label lookups resolve to the first match: %s",
                len(index._duplicate_labels),
                sorted(index._duplicate_labels),
            )
        logger.debug("Taxonomy index built: %d nodes, max depth %d", len(index), index.max_depth)
        return index

    def _add(self, node_id: str, label: str, parent: int | None) -> int:
        if node_id in self._by_id:
            raise ValueError(f"Duplicate taxonomy node id: {node_id!r}")

        idx = len(self._ids)
        self._ids.append(node_id)
        self._labels.append(label)
        self._parents.append(parent)
        self._children.append([])
        self._depths.append(0 if parent is None else self._depths[parent] + 1)
        if parent is not None:
            self._children[parent].append(idx)

        self._by_id[node_id] = idx
        if label in self._by_label:
            self._duplicate_labels.add(label)
        else:
            self._by_label[label] = idx
        return idx

    # ----- queries -----

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[PathNode]:
        for idx in range(len(self._ids)):
            yield self._node(idx)

    @property
    def max_depth(self) -> int:
        return max(self._depths, default=0)

    @property
    def root(self) -> PathNode | None:
        return self._node(0) if self._ids else None

    def contains(self, node_id: str) -> bool:
        return node_id in self._by_id

    def get_node(self, node_id: str) -> PathNode | None:
        idx = self._by_id.get(node_id)
        return None if idx is None else self._node(idx)

    def id_for_label(self, label: str) -> str | None:
        idx = self._by_label.get(label)
        return None if idx is None else self._ids[idx]

    def duplicate_labels(self) -> list[str]:
        return sorted(self._duplicate_labels)

    def find_path(self, identifier: str) -> list[PathNode]:
        """
        Resolve a root-to-node path by label (exact, case-sensitive).

        Returns an empty list when no node carries that label. Never raises.
        """
        if not isinstance(identifier, str):
            return []
        idx = self._by_label.get(identifier)
        return [] if idx is None else self._path(idx)

    def find_path_by_id(self, node_id: str) -> list[PathNode]:
        """Resolve a root-to-node path by node id; empty list when unknown."""
        if not isinstance(node_id, str):
            return []
        idx = self._by_id.get(node_id)
        return [] if idx is None else self._path(idx)

    def neighbors(self, node_id: str) -> dict[str, Any]:
        """
        Parent, siblings and children of a node.

        Unknown ids yield ``{"parent": None, "siblings": [], "children": []}``.
        """
        idx = self._by_id.get(node_id)
        if idx is None:
            return {"parent": None, "siblings": [], "children": []}

        parent = self._parents[idx]
        siblings: list[PathNode] = []
        if parent is not None:
            siblings = [self._node(i) for i in self._children[parent] if i != idx]

        return {
            "parent": None if parent is None else self._node(parent),
            "siblings": siblings,
            "children": [self._node(i) for i in self._children[idx]],
        }

    # ----- internals -----

    def _node(self, idx: int) -> PathNode:
        return PathNode(id=self._ids[idx], label=self._labels[idx])

    def _path(self, idx: int) -> list[PathNode]:
        path: list[PathNode] = []
        cur: int | None = idx
        while cur is not None:
            path.append(self._node(cur))
            cur = self._parents[cur]
        path.reverse()
        return path
