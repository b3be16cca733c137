"""Utility functions."""

from docset_generator.utils.url_utils import is_internal, local_path_for, split_href

__all__ = [
    "is_internal",
    "local_path_for",
    "split_href",
]
