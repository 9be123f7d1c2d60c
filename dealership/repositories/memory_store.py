"""
In-Memory Record Store

Process-local implementation of RecordStore for development and tests.
Every public method completes without suspending, so each call is atomic
with respect to other coroutines on the same event loop.
"""
import logging
from typing import Any, Dict, List, Optional, Type

from bson import ObjectId
from pydantic import BaseModel

from dealership.repositories.store_interface import (
    EntryNotFound,
    R,
    RecordNotFound,
    RecordStore,
    collection_name,
)
from dealership.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, list):
        return [_dump(v) for v in value]
    return value


class InMemoryRecordStore(RecordStore):
    """Record store backed by plain dicts keyed by collection then id."""

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def _collection(self, model: Type[BaseModel]) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(collection_name(model), {})

    def _require(self, model: Type[R], record_id: str) -> Dict[str, Any]:
        data = self._collection(model).get(record_id)
        if data is None:
            raise RecordNotFound(collection_name(model), record_id)
        return data

    def _save(self, model: Type[R], record_id: str, data: Dict[str, Any]) -> R:
        if "updated_at" in model.model_fields:
            data["updated_at"] = utcnow()
        # Round-trip through the model so stored state is always valid
        record = model.model_validate(data)
        self._collection(model)[record_id] = record.model_dump()
        return record

    async def get(self, model: Type[R], record_id: str) -> Optional[R]:
        data = self._collection(model).get(record_id)
        if data is None:
            return None
        return model.model_validate(data)

    async def list(self, model: Type[R], filters: Optional[Dict[str, Any]] = None) -> List[R]:
        filters = filters or {}
        records = []
        for data in self._collection(model).values():
            if all(data.get(key) == value for key, value in filters.items()):
                records.append(model.model_validate(data))
        return records

    async def create(self, record: R) -> R:
        record_id = str(ObjectId())
        data = record.model_dump()
        data["id"] = record_id
        stored = type(record).model_validate(data)
        self._collection(type(record))[record_id] = stored.model_dump()
        logger.debug(f"Created {collection_name(type(record))} {record_id}")
        return stored

    async def update(self, model: Type[R], record_id: str, changes: Dict[str, Any]) -> R:
        data = dict(self._require(model, record_id))
        for key, value in changes.items():
            data[key] = _dump(value)
        return self._save(model, record_id, data)

    async def delete(self, model: Type[R], record_id: str) -> None:
        self._require(model, record_id)
        del self._collection(model)[record_id]

    async def append(self, model: Type[R], record_id: str, field: str, entry: BaseModel) -> R:
        data = dict(self._require(model, record_id))
        data[field] = list(data.get(field) or []) + [entry.model_dump()]
        return self._save(model, record_id, data)

    async def update_entry(
        self,
        model: Type[R],
        record_id: str,
        field: str,
        entry_id: str,
        changes: Dict[str, Any]
    ) -> R:
        data = dict(self._require(model, record_id))
        entries = [dict(e) for e in data.get(field) or []]
        for entry in entries:
            if entry.get("id") == entry_id:
                entry.update({k: _dump(v) for k, v in changes.items()})
                break
        else:
            raise EntryNotFound(collection_name(model), record_id, field, entry_id)
        data[field] = entries
        return self._save(model, record_id, data)
