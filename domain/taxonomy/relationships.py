"""Path-based relationship classification between two taxonomy nodes."""

from collections.abc import Sequence

from domain.schemas import PathNode, RelationshipResult, RelationshipType
from domain.taxonomy.index import TaxonomyIndex

RELATIONSHIP_DESCRIPTIONS = {
    RelationshipType.SAME: "Exact match",
    RelationshipType.PARENT: "Parent field",
    RelationshipType.CHILD: "Child field",
    RelationshipType.SIBLING: "Sibling field",
    RelationshipType.ANCESTOR: "Ancestor field",
    RelationshipType.DESCENDANT: "Descendant field",
    RelationshipType.DISTANT: "Distantly related field",
}


def common_prefix_length(path_a: Sequence[PathNode], path_b: Sequence[PathNode]) -> int:
    """Number of leading path nodes (by id) shared by both paths."""
    n = 0
    for a, b in zip(path_a, path_b):
        if a.id != b.id:
            break
        n += 1
    return n


def describe_relationship(rel_type: RelationshipType | str) -> str:
    try:
        return RELATIONSHIP_DESCRIPTIONS[RelationshipType(rel_type)]
    except ValueError:
        return "Unknown relationship"


class RelationshipAnalyzer:
    """
    Classify how two taxonomy nodes relate through their root-to-node paths.

    Only the immediate parent/child step is reported as such; ancestors and
    descendants two or more levels apart, as well as cross-branch pairs, are
    all ``distant``. Numeric scoring downstream uses ``distance``, not the type.
    """

    def __init__(self, index: TaxonomyIndex) -> None:
        self.index = index

    def relate(self, node_id_a: str, node_id_b: str) -> RelationshipResult:
        """
        Relationship of node A to node B, both given by id.

        Unknown ids never raise; they yield ``distant`` with distance -1.
        """
        if node_id_a == node_id_b:
            return RelationshipResult(type=RelationshipType.SAME, distance=0)

        return self.relate_paths(
            self.index.find_path_by_id(node_id_a),
            self.index.find_path_by_id(node_id_b),
        )

    def relate_labels(self, label_a: str, label_b: str) -> RelationshipResult:
        """Same as relate() but resolving both nodes by label."""
        return self.relate_paths(self.index.find_path(label_a), self.index.find_path(label_b))

    @staticmethod
    def relate_paths(path_a: Sequence[PathNode], path_b: Sequence[PathNode]) -> RelationshipResult:
        if not path_a or not path_b:
            return RelationshipResult(type=RelationshipType.DISTANT, distance=-1)

        common = common_prefix_length(path_a, path_b)
        distance = len(path_a) + len(path_b) - 2 * common
        rest_a = len(path_a) - common
        rest_b = len(path_b) - common

        if rest_a == 0 and rest_b == 0:
            rel_type = RelationshipType.SAME
        elif rest_a == 0 and rest_b == 1:
            rel_type = RelationshipType.PARENT
        elif rest_b == 0 and rest_a == 1:
            rel_type = RelationshipType.CHILD
        elif rest_a == 1 and rest_b == 1:
            rel_type = RelationshipType.SIBLING
        else:
            rel_type = RelationshipType.DISTANT

        return RelationshipResult(
            type=rel_type,
            distance=distance,
            common_ancestor=path_a[common - 1] if common > 0 else None,
        )

    def describe(self, rel_type: RelationshipType | str) -> str:
        return describe_relationship(rel_type)
