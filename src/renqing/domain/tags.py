"""Tag vocabulary domain service.

Tags are an open, user-extensible vocabulary kept apart from the ledger
blob. Occasions, by contrast, are a closed enum.
"""

import logging
from typing import Iterable

from renqing.database.base import Storage
from renqing.domain.errors import ValidationError

logger = logging.getLogger(__name__)


def add_tag(tags: list[str], tag: str) -> list[str]:
    """Return the vocabulary with ``tag`` appended if it is not already there.

    Raises:
        ValidationError: If the tag is blank
    """
    label = tag.strip() if tag else ""
    if not label:
        raise ValidationError("Tag cannot be empty")
    if label in tags:
        return list(tags)
    return [*tags, label]


def remove_tag(tags: list[str], tag: str) -> list[str]:
    """Return the vocabulary without ``tag``."""
    label = tag.strip() if tag else ""
    return [t for t in tags if t != label]


def merge_tags(tags: list[str], incoming: Iterable[str]) -> list[str]:
    """Order-preserving union of two vocabularies."""
    merged = list(tags)
    for tag in incoming:
        label = tag.strip()
        if label and label not in merged:
            merged.append(label)
    return merged


class TagService:
    """Service for managing the tag vocabulary."""

    def __init__(self, storage: Storage):
        self.storage = storage

    def list_tags(self) -> list[str]:
        return self.storage.load_tags()

    def add_tag(self, tag: str) -> list[str]:
        """Add a tag to the vocabulary. Returns the updated vocabulary."""
        tags = add_tag(self.storage.load_tags(), tag)
        self.storage.save_tags(tags)
        return tags

    def remove_tag(self, tag: str) -> list[str]:
        """Remove a tag from the vocabulary. Returns the updated vocabulary.

        Transactions already carrying the tag keep it.
        """
        tags = remove_tag(self.storage.load_tags(), tag)
        self.storage.save_tags(tags)
        return tags

    def merge_tags(self, incoming: Iterable[str]) -> list[str]:
        """Merge tags from an import into the vocabulary."""
        current = self.storage.load_tags()
        tags = merge_tags(current, incoming)
        if tags != current:
            self.storage.save_tags(tags)
            logger.info("Added %d tags to vocabulary", len(tags) - len(current))
        return tags
