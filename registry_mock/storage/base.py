from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Union

from pydantic import BaseModel

# A plain value, or a function of the record's sequence index.
Override = Union[Any, Callable[[int], Any]]


class RecordStore(ABC):
    """
    Abstract base class for the registry record storage.
    """

    @abstractmethod
    def create(self, kind: str, /, **overrides: Override) -> BaseModel:
        """Create one record of `kind`, applying fixture defaults for anything not overridden."""
        pass

    @abstractmethod
    def create_list(self, kind: str, count: int, /, **overrides: Override) -> List[BaseModel]:
        """Create `count` records of `kind`; callable overrides receive each record's index."""
        pass

    @abstractmethod
    def lookup(self, kind: str, record_id: Any) -> Optional[BaseModel]:
        """Get a record by id, or None if it does not exist."""
        pass

    @abstractmethod
    def all(self, kind: str) -> List[BaseModel]:
        """Get all records of `kind` in insertion order."""
        pass

    @abstractmethod
    def reload(self, record: BaseModel) -> BaseModel:
        """Re-read the current stored state of a previously returned record."""
        pass

    @abstractmethod
    def update(self, record: BaseModel) -> None:
        """Write a modified record back to the store."""
        pass
