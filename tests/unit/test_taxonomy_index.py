import logging

import pytest

from domain.taxonomy import TaxonomyIndex, normalize_label, parse_taxonomy_config


def test_preorder_layout_and_depth(index: TaxonomyIndex) -> None:
    assert len(index) == 10
    assert index.max_depth == 3
    assert index.root.id == "R11"
    assert [n.id for n in index] == [
        "R11",
        "R132",
        "R155",
        "R112118",
        "R112125",
        "R112130",
        "R112133",
        "R278",
        "R57",
        "R104",
    ]


def test_find_path_by_label_is_root_to_node(index: TaxonomyIndex) -> None:
    path = index.find_path("Computer Vision")

    assert [n.label for n in path] == ["Science", "Computer Sciences", "Machine Learning", "Computer Vision"]
    assert index.find_path_by_id("R112130") == path


def test_find_path_is_exact_and_never_raises(index: TaxonomyIndex) -> None:
    assert index.find_path("computer vision") == []
    assert index.find_path("Nonexistent Field") == []
    assert index.find_path(None) == []  # type: ignore[arg-type]
    assert index.find_path_by_id("R0") == []


def test_duplicate_id_is_rejected() -> None:
    tree = {
        "id": "1",
        "label": "Root",
        "children": [{"id": "2", "label": "A"}, {"id": "2", "label": "B"}],
    }
    with pytest.raises(ValueError, match="Duplicate taxonomy node id"):
        TaxonomyIndex.from_tree(tree)


def test_duplicate_label_resolves_to_first_in_preorder(caplog: pytest.LogCaptureFixture) -> None:
    tree = {
        "id": "1",
        "label": "Root",
        "children": [
            {"id": "2", "label": "A", "children": [{"id": "4", "label": "Other"}]},
            {"id": "3", "label": "Other"},
        ],
    }
    with caplog.at_level(logging.WARNING):
        idx = TaxonomyIndex.from_tree(tree)

    assert idx.id_for_label("Other") == "4"
    assert [n.id for n in idx.find_path("Other")] == ["1", "2", "4"]
    assert idx.duplicate_labels() == ["Other"]
    assert "duplicate label" in caplog.text


def test_numeric_ids_are_coerced_to_strings() -> None:
    idx = TaxonomyIndex.from_tree({"id": 1, "label": "Root", "children": [{"id": 2, "label": "Leaf"}]})

    assert idx.contains("2")
    assert idx.get_node("2").label == "Leaf"


def test_neighbors(index: TaxonomyIndex) -> None:
    n = index.neighbors("R112130")
    assert n["parent"].label == "Machine Learning"
    assert [s.label for s in n["siblings"]] == ["Natural Language Processing"]
    assert n["children"] == []

    root = index.neighbors("R11")
    assert root["parent"] is None
    assert root["siblings"] == []
    assert [c.label for c in root["children"]] == ["Engineering", "Computer Sciences", "Life Sciences"]

    assert index.neighbors("missing") == {"parent": None, "siblings": [], "children": []}


def test_parse_taxonomy_config_accepts_wrapped_root() -> None:
    idx = parse_taxonomy_config({"taxonomy": {"id": "R1", "label": "Root", "children": []}})
    assert len(idx) == 1

    with pytest.raises(ValueError, match="no root node"):
        parse_taxonomy_config({"nodes": []})


def test_normalize_label() -> None:
    assert normalize_label("  Computer   Sciences ") == "Computer Sciences"
    assert normalize_label("Databases / Information Systems") == "Databases/Information Systems"
    assert normalize_label(None) == ""
    assert normalize_label("   ") == ""
