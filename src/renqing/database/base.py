"""Abstract storage interface."""

from abc import ABC, abstractmethod

# Import entities directly to avoid circular import through domain/__init__.py
from renqing.domain.entities import AppState

STORAGE_KEY_DATA = "relationship_ledger_data"
STORAGE_KEY_TAGS = "relationship_ledger_tags"


class Storage(ABC):
    """Abstract storage for the ledger blob and the tag vocabulary.

    The ledger is read and written wholesale on every mutation. There is no
    coordination between processes: if two processes save concurrently, the
    last save wins and the other write is lost.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the storage backend."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the storage backend."""
        pass

    @abstractmethod
    def load(self) -> AppState:
        """Load the ledger.

        Returns an empty AppState when nothing is stored or the stored data
        cannot be parsed. People are always recomputed from transactions.
        """
        pass

    @abstractmethod
    def save(self, state: AppState) -> None:
        """Persist the full ledger, replacing what was stored."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the ledger and the tag vocabulary."""
        pass

    @abstractmethod
    def load_tags(self) -> list[str]:
        """Load the tag vocabulary. Returns an empty list when none is stored."""
        pass

    @abstractmethod
    def save_tags(self, tags: list[str]) -> None:
        """Persist the tag vocabulary."""
        pass
