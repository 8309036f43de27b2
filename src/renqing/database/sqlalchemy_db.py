"""Generic SQLAlchemy storage implementation."""

import json
import logging
from decimal import Decimal
from typing import Any, Optional
from sqlalchemy.orm import Session

from renqing.database.base import Storage, STORAGE_KEY_DATA, STORAGE_KEY_TAGS
from renqing.database.mappers import state_to_document, transaction_from_record
from renqing.database.models import LedgerBlob, create_session_factory
from renqing.domain.entities import AppState
from renqing.domain.recalculate import recalculate

logger = logging.getLogger(__name__)


class SQLAlchemyStorage(Storage):
    """SQLAlchemy-based implementation of the Storage interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy storage.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def _read(self, key: str) -> Optional[str]:
        session = self._get_session()
        # Another process may have written since this session last looked
        blob = session.get(LedgerBlob, key, populate_existing=True)
        return None if blob is None else blob.value

    def _write(self, key: str, value: str) -> None:
        session = self._get_session()
        blob = session.get(LedgerBlob, key)
        if blob is None:
            session.add(LedgerBlob(key=key, value=value))
        else:
            blob.value = value
        session.commit()

    def _delete(self, key: str) -> None:
        session = self._get_session()
        blob = session.get(LedgerBlob, key)
        if blob is not None:
            session.delete(blob)
        session.commit()

    def load(self) -> AppState:
        """Load the ledger, recomputing people from the stored transactions."""
        raw = self._read(STORAGE_KEY_DATA)
        if raw is None:
            return AppState()

        try:
            document: Any = json.loads(raw, parse_float=Decimal)
            records = document["transactions"]
            if not isinstance(records, list):
                raise ValueError("'transactions' is not a list")
            transactions = [transaction_from_record(record) for record in records]
        except (ValueError, KeyError, TypeError, RecursionError) as e:
            # json.JSONDecodeError is a ValueError
            logger.error("Failed to load ledger data, starting empty: %s", e)
            return AppState()

        return recalculate(transactions)

    def save(self, state: AppState) -> None:
        """Persist the full ledger."""
        self._write(
            STORAGE_KEY_DATA,
            json.dumps(state_to_document(state), ensure_ascii=False),
        )
        logger.debug("Saved ledger with %d transactions", len(state.transactions))

    def clear(self) -> None:
        """Remove the ledger and the tag vocabulary."""
        self._delete(STORAGE_KEY_DATA)
        self._delete(STORAGE_KEY_TAGS)
        logger.info("Cleared all ledger data")

    def load_tags(self) -> list[str]:
        """Load the tag vocabulary."""
        raw = self._read(STORAGE_KEY_TAGS)
        if raw is None:
            return []
        try:
            tags = json.loads(raw)
        except (ValueError, RecursionError) as e:
            logger.error("Failed to load tags, starting empty: %s", e)
            return []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            logger.error("Stored tags are not a list of strings, starting empty")
            return []
        return tags

    def save_tags(self, tags: list[str]) -> None:
        """Persist the tag vocabulary."""
        self._write(STORAGE_KEY_TAGS, json.dumps(list(tags), ensure_ascii=False))
