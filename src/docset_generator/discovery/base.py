"""Discovered documentation links."""

from pydantic import BaseModel, Field

from docset_generator.extractor.content import Section


class LinkCandidate(BaseModel):
    """A documentation page found on the listing page.

    ``local_path`` and ``sections`` are filled in once the page has been
    downloaded; a candidate without ``local_path`` is neither written nor
    indexed.
    """

    name: str
    path_key: str
    url: str
    local_path: str | None = None
    sections: list[Section] = Field(default_factory=list)

    @property
    def fetched(self) -> bool:
        return self.local_path is not None
