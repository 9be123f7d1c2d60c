"""
Record Store Interface

Abstract interface for record persistence.
This allows easy switching between the in-memory store (development, tests)
and the MongoDB store (production).

Records are the pydantic domain models (Vehicle, Offer, Customer, Inquiry);
the model class doubles as the collection key.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel

R = TypeVar("R", bound=BaseModel)


class RecordNotFound(Exception):
    """The record (or embedded entry) addressed by id does not exist."""

    def __init__(self, collection: str, record_id: str):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"{collection} with id {record_id} not found")


class EntryNotFound(RecordNotFound):
    """The parent record exists but the embedded entry does not."""

    def __init__(self, collection: str, record_id: str, field: str, entry_id: str):
        super().__init__(collection, record_id)
        self.field = field
        self.entry_id = entry_id
        self.args = (f"{field} entry {entry_id} not found in {collection} {record_id}",)


def collection_name(model: Type[BaseModel]) -> str:
    return f"{model.__name__.lower()}s"


class RecordStore(ABC):
    """Abstract interface for record stores"""

    @abstractmethod
    async def get(self, model: Type[R], record_id: str) -> Optional[R]:
        """
        Fetch one record.

        Returns:
            The record, or None if the id is unknown or malformed
        """
        pass

    @abstractmethod
    async def list(self, model: Type[R], filters: Optional[Dict[str, Any]] = None) -> List[R]:
        """
        List records in insertion order.

        Args:
            filters: Field-name -> value equality filters (all must match)
        """
        pass

    @abstractmethod
    async def create(self, record: R) -> R:
        """Persist a new record and return it with its id assigned."""
        pass

    @abstractmethod
    async def update(self, model: Type[R], record_id: str, changes: Dict[str, Any]) -> R:
        """
        Atomically set top-level fields and return the updated record.
        Each key replaces the stored value whole (no deep merge).

        Raises:
            RecordNotFound: If the id is unknown
        """
        pass

    @abstractmethod
    async def delete(self, model: Type[R], record_id: str) -> None:
        """
        Raises:
            RecordNotFound: If the id is unknown (including repeated deletes)
        """
        pass

    @abstractmethod
    async def append(self, model: Type[R], record_id: str, field: str, entry: BaseModel) -> R:
        """
        Atomically append `entry` to the list field `field`.
        Concurrent appends on the same record must all survive.

        Raises:
            RecordNotFound: If the id is unknown
        """
        pass

    @abstractmethod
    async def update_entry(
        self,
        model: Type[R],
        record_id: str,
        field: str,
        entry_id: str,
        changes: Dict[str, Any]
    ) -> R:
        """
        Atomically set attributes on the embedded entry `field[].id == entry_id`.

        Raises:
            RecordNotFound: If the record is unknown
            EntryNotFound: If the record exists but the entry does not
        """
        pass
