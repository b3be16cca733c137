"""Exceptions raised by the docset pipeline."""


class DocsetError(Exception):
    """Base class for errors that abort a docset build."""


class DiscoveryError(DocsetError):
    """The listing page could not be loaded or parsed."""


class IndexStoreError(DocsetError):
    """The search index database could not be created."""


class OutputError(DocsetError):
    """The docset directory layout could not be created."""


class RenderError(Exception):
    """A page could not be opened in the browser.

    Raised per page; callers decide whether the failure is fatal.
    """

    def __init__(self, url: str, message: str):
        super().__init__(f"{message} ({url})")
        self.url = url
        self.message = message
