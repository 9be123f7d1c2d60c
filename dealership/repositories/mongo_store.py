"""
MongoDB Record Store

RecordStore implementation on Beanie/Motor. Every mutation is a single
find-one-and-update so per-record changes stay atomic on the server;
appends use $push and embedded updates use the positional operator.
"""
import logging
from typing import Any, Dict, List, Optional, Type

from beanie import PydanticObjectId, UpdateResponse
from pydantic import BaseModel

from dealership.models.customer import Customer
from dealership.models.inquiry import Inquiry
from dealership.models.offer import Offer
from dealership.models.vehicle import Vehicle
from dealership.repositories.documents import (
    CustomerDocument,
    InquiryDocument,
    OfferDocument,
    VehicleDocument,
)
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


def _object_id(record_id: str) -> Optional[PydanticObjectId]:
    if not record_id or not PydanticObjectId.is_valid(record_id):
        return None
    return PydanticObjectId(record_id)


class MongoRecordStore(RecordStore):
    """Record store persisting through Beanie documents."""

    DOCUMENTS = {
        Vehicle: VehicleDocument,
        Offer: OfferDocument,
        Customer: CustomerDocument,
        Inquiry: InquiryDocument,
    }

    def _document(self, model: Type[BaseModel]):
        return self.DOCUMENTS[model]

    def _to_record(self, model: Type[R], document) -> R:
        data = document.model_dump(include=set(model.model_fields) - {"id"})
        data["id"] = str(document.id)
        return model.model_validate(data)

    async def get(self, model: Type[R], record_id: str) -> Optional[R]:
        oid = _object_id(record_id)
        if oid is None:
            return None
        document = await self._document(model).get(oid)
        if not document:
            return None
        return self._to_record(model, document)

    async def list(self, model: Type[R], filters: Optional[Dict[str, Any]] = None) -> List[R]:
        documents = await self._document(model).find(filters or {}).sort("_id").to_list()
        return [self._to_record(model, d) for d in documents]

    async def create(self, record: R) -> R:
        document_cls = self._document(type(record))
        document = document_cls(**record.model_dump(exclude={"id"}))
        await document.insert()
        logger.debug(f"Inserted {collection_name(type(record))} {document.id}")
        return self._to_record(type(record), document)

    async def _find_one_and_update(self, model: Type[R], query: Dict[str, Any], update: Dict[str, Any]):
        return await self._document(model).find_one(query).update(
            update,
            response_type=UpdateResponse.NEW_DOCUMENT,
        )

    async def update(self, model: Type[R], record_id: str, changes: Dict[str, Any]) -> R:
        oid = _object_id(record_id)
        if oid is None:
            raise RecordNotFound(collection_name(model), record_id)

        fields = {key: _dump(value) for key, value in changes.items()}
        fields["updated_at"] = utcnow()
        document = await self._find_one_and_update(model, {"_id": oid}, {"$set": fields})
        if document is None:
            raise RecordNotFound(collection_name(model), record_id)
        return self._to_record(model, document)

    async def delete(self, model: Type[R], record_id: str) -> None:
        oid = _object_id(record_id)
        if oid is None:
            raise RecordNotFound(collection_name(model), record_id)

        result = await self._document(model).find_one({"_id": oid}).delete()
        if result is None or result.deleted_count == 0:
            raise RecordNotFound(collection_name(model), record_id)

    async def append(self, model: Type[R], record_id: str, field: str, entry: BaseModel) -> R:
        oid = _object_id(record_id)
        if oid is None:
            raise RecordNotFound(collection_name(model), record_id)

        document = await self._find_one_and_update(
            model,
            {"_id": oid},
            {"$push": {field: entry.model_dump()}, "$set": {"updated_at": utcnow()}},
        )
        if document is None:
            raise RecordNotFound(collection_name(model), record_id)
        return self._to_record(model, document)

    async def update_entry(
        self,
        model: Type[R],
        record_id: str,
        field: str,
        entry_id: str,
        changes: Dict[str, Any]
    ) -> R:
        oid = _object_id(record_id)
        if oid is None:
            raise RecordNotFound(collection_name(model), record_id)

        fields = {f"{field}.$.{key}": _dump(value) for key, value in changes.items()}
        fields["updated_at"] = utcnow()
        document = await self._find_one_and_update(
            model,
            {"_id": oid, f"{field}.id": entry_id},
            {"$set": fields},
        )
        if document is None:
            # Tell a missing parent apart from a missing entry
            if await self._document(model).get(oid) is None:
                raise RecordNotFound(collection_name(model), record_id)
            raise EntryNotFound(collection_name(model), record_id, field, entry_id)
        return self._to_record(model, document)
