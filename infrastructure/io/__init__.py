"""I/O utilities: filesystem operations and dataset loading."""

from infrastructure.io.datasets import read_component_scores, read_document, read_records, read_table
from infrastructure.io.fs import ensure_exists, write_json

__all__ = [
    "ensure_exists",
    "write_json",
    "read_document",
    "read_records",
    "read_component_scores",
    "read_table",
]
