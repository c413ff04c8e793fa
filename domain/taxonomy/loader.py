"""Parse a taxonomy document into a TaxonomyIndex."""

from typing import Any

from domain.taxonomy.index import TaxonomyIndex

_WRAPPER_KEYS = ("taxonomy", "hierarchy", "root")


def parse_taxonomy_config(data: dict[str, Any]) -> TaxonomyIndex:
    """
    Parse a pre-loaded taxonomy document into a TaxonomyIndex.

    This is a pure function - it does NOT perform file I/O.
    The YAML/JSON loading happens in infrastructure.config.loader.

    The document is either the root node itself (``{id, label, children}``)
    or a mapping holding the root node under ``taxonomy``, ``hierarchy`` or ``root``.

    Args:
        data: Dictionary from yaml.safe_load() / json.load()

    Returns:
        TaxonomyIndex over the tree

    Raises:
        ValueError: If the document has no root node or node ids repeat
    """
    if not isinstance(data, dict):
        raise ValueError(f"Taxonomy document must be a mapping, got {type(data).__name__}")

    root: Any = data
    if "id" not in data:
        for key in _WRAPPER_KEYS:
            if isinstance(data.get(key), dict):
                root = data[key]
                break
        else:
            raise ValueError(f"Taxonomy document has no root node (expected 'id' or one of {list(_WRAPPER_KEYS)})")

    return TaxonomyIndex.from_tree(root)
