"""Documentation link discovery."""

from docset_generator.discovery.base import LinkCandidate
from docset_generator.discovery.listing import ListingDiscoverer, extract_links

__all__ = [
    "LinkCandidate",
    "ListingDiscoverer",
    "extract_links",
]
