"""JSON import domain service."""

import logging
from pathlib import Path

from renqing.database.base import Storage
from renqing.domain.errors import ReadError
from renqing.domain.merge import ImportResult, ImportStatus, import_json
from renqing.domain.tags import TagService

logger = logging.getLogger(__name__)


class ImportService:
    """Service for importing ledger files."""

    def __init__(self, storage: Storage):
        """Initialize import service.

        Args:
            storage: Storage instance
        """
        self.storage = storage
        self.tag_service = TagService(storage)

    def import_text(self, text: str) -> ImportResult:
        """Merge the contents of a ledger file into the stored ledger.

        The ledger is saved only when new transactions were added. Tags listed
        under ``customTags`` are merged into the vocabulary whenever the file
        is understood, even if every transaction was a duplicate.

        Args:
            text: JSON text of the file

        Returns:
            ImportResult describing the outcome
        """
        current = self.storage.load()
        result = import_json(current, text)

        if result.ok and result.custom_tags:
            self.tag_service.merge_tags(result.custom_tags)

        if result.changed:
            self.storage.save(result.state)

        return result

    def import_file(self, file_path: str) -> ImportResult:
        """Import a ledger file from disk.

        Args:
            file_path: Path to the JSON file

        Returns:
            ImportResult; a file that cannot be read yields READ_ERROR with
            the stored state unchanged
        """
        try:
            text = Path(file_path).read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read import file %s: %s", file_path, e)
            return ImportResult(
                status=ImportStatus.READ_ERROR,
                state=self.storage.load(),
                error=ReadError(f"Could not read file '{file_path}': {e}"),
            )
        return self.import_text(text)
