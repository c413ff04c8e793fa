import itertools

from domain.schemas import RelationshipType
from domain.taxonomy import RelationshipAnalyzer, TaxonomyIndex, describe_relationship


def test_same_node(index: TaxonomyIndex) -> None:
    rel = RelationshipAnalyzer(index).relate("R112130", "R112130")

    assert rel.type is RelationshipType.SAME
    assert rel.distance == 0


def test_parent_and_child_are_one_step(index: TaxonomyIndex) -> None:
    analyzer = RelationshipAnalyzer(index)

    parent = analyzer.relate("R112125", "R112130")  # Machine Learning -> Computer Vision
    assert parent.type is RelationshipType.PARENT
    assert parent.distance == 1
    assert parent.common_ancestor.label == "Machine Learning"

    child = analyzer.relate("R112130", "R112125")
    assert child.type is RelationshipType.CHILD
    assert child.distance == 1


def test_siblings_share_parent(index: TaxonomyIndex) -> None:
    rel = RelationshipAnalyzer(index).relate_labels("Computer Vision", "Natural Language Processing")

    assert rel.type is RelationshipType.SIBLING
    assert rel.distance == 2
    assert rel.common_ancestor.id == "R112125"


def test_grandparent_and_cross_branch_are_distant(index: TaxonomyIndex) -> None:
    analyzer = RelationshipAnalyzer(index)

    grand = analyzer.relate("R112118", "R112130")
    assert grand.type is RelationshipType.DISTANT
    assert grand.distance == 2

    cross = analyzer.relate("R112130", "R104")
    assert cross.type is RelationshipType.DISTANT
    assert cross.distance == 5
    assert cross.common_ancestor.label == "Science"


def test_unknown_node_is_distant_with_negative_distance(index: TaxonomyIndex) -> None:
    rel = RelationshipAnalyzer(index).relate("R112130", "does-not-exist")

    assert rel.type is RelationshipType.DISTANT
    assert rel.distance == -1
    assert rel.common_ancestor is None


def test_distance_is_symmetric(index: TaxonomyIndex) -> None:
    analyzer = RelationshipAnalyzer(index)
    ids = [n.id for n in index]
    for a, b in itertools.combinations(ids, 2):
        assert analyzer.relate(a, b).distance == analyzer.relate(b, a).distance


def test_describe_relationship() -> None:
    assert describe_relationship(RelationshipType.PARENT) == "Parent field"
    assert describe_relationship("same") == "Exact match"
    assert describe_relationship("cousin") == "Unknown relationship"
