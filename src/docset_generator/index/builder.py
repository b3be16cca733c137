"""Index records for fetched pages and their sections."""

import logging

from pydantic import BaseModel

from docset_generator.classifier import classify
from docset_generator.config import ClassifierConfig, EntryType
from docset_generator.discovery.base import LinkCandidate
from docset_generator.extractor.content import HeadingLevel

logger = logging.getLogger(__name__)


class IndexRecord(BaseModel):
    """One row of the search index."""

    name: str
    entry_type: EntryType
    path: str


def build_index_records(
    candidates: list[LinkCandidate],
    config: ClassifierConfig | None = None,
) -> list[IndexRecord]:
    """Build records in candidate order, each page followed by its sections.

    Candidates that were not fetched contribute no records.
    """
    records: list[IndexRecord] = []

    for candidate in candidates:
        if candidate.local_path is None:
            continue

        entry_type = classify(candidate.name, candidate.path_key, config)
        logger.debug("Indexing: %s (%s)", candidate.name, entry_type.value)
        records.append(
            IndexRecord(name=candidate.name, entry_type=entry_type, path=candidate.local_path)
        )

        for section in candidate.sections:
            section_type = (
                EntryType.SECTION if section.level == HeadingLevel.H2 else EntryType.ENTRY
            )
            logger.debug("  - %s (%s)", section.text, section_type.value)
            records.append(
                IndexRecord(
                    name=section.text,
                    entry_type=section_type,
                    path=f"{candidate.local_path}#{section.anchor_id}",
                )
            )

    return records
