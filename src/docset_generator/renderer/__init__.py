"""Browser rendering of JavaScript-driven pages."""

from docset_generator.renderer.base import BaseRenderer, RenderedPage, wait_until_stable
from docset_generator.renderer.playwright_renderer import PlaywrightRenderer

__all__ = [
    "BaseRenderer",
    "RenderedPage",
    "PlaywrightRenderer",
    "wait_until_stable",
]
