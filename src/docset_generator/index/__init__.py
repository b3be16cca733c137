"""Dash search index."""

from docset_generator.index.builder import IndexRecord, build_index_records
from docset_generator.index.store import SearchIndex

__all__ = [
    "IndexRecord",
    "SearchIndex",
    "build_index_records",
]
