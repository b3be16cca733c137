"""URL and local path utilities."""

import re
from posixpath import normpath
from urllib.parse import urldefrag, urljoin, urlparse


def split_href(href: str, page_url: str) -> tuple[str, str]:
    """Return ``(path_key, url)`` for an href found on ``page_url``.

    The path key is the href as written without its fragment, except that
    absolute links to the page's own host are reduced to their path. Links
    to other hosts keep their full URL so they fail the internal prefix check.
    """
    href = urldefrag(href).url
    url = urljoin(page_url, href)
    parsed = urlparse(href)
    if parsed.netloc and parsed.netloc.lower() == urlparse(page_url).netloc.lower():
        path_key = parsed.path
        if parsed.query:
            path_key += "?" + parsed.query
        return path_key, url
    return href, url


def is_internal(path_key: str, prefix: str) -> bool:
    """Check if a path key is rooted under the site section prefix."""
    return path_key.startswith(prefix)


def local_path_for(path_key: str, suffix: str = ".html") -> str:
    """Convert a path key into a document path relative to the docset root.

    ``/providers/x/docs/resources/a`` becomes
    ``providers/x/docs/resources/a.html``.

    Raises:
        ValueError: the path would be empty or escape the documents root.
    """
    path = path_key[1:] if path_key.startswith("/") else path_key
    path = re.sub(r"[<>:\"|?*]", "_", path).rstrip("/")

    if not path or normpath(path) != path or path.startswith(("/", "../")) or path == "..":
        raise ValueError(f"Unsafe document path: {path_key!r}")

    return path + suffix
