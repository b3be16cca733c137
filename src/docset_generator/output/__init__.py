"""Docset bundle output."""

from docset_generator.output.docset import DocsetWriter, render_page

__all__ = [
    "DocsetWriter",
    "render_page",
]
