from bson import ObjectId
from fastapi import Request
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError
from typing import Any, Optional

from ..api.mongo_db_base_class import DuplicateRecordError, MongoDbBaseClass
from ...internal.schemas import (
    AVAILABILITIES_COLLECTION_NAME,
    CHAT_HISTORIES_COLLECTION_NAME,
)

class MongoDbClient(MongoDbBaseClass):

    async def insert(
        self,
        request: Request,
        payload: dict[str, Any],
        collection_name: str
    ) -> dict:
        try:
            document = dict(payload)
            result = await self._collection(request, collection_name).insert_one(document)
            document["_id"] = result.inserted_id
            return self._serialize_document(document)
        except DuplicateKeyError as e:
            raise DuplicateRecordError(f"A {collection_name} record with the same key already exists") from e
        except Exception as e:
            raise RuntimeError(f"Insert failed: {e}") from e

    async def find_one(
        self,
        request: Request,
        filters: dict[str, Any],
        collection_name: str
    ) -> Optional[dict]:
        try:
            document = await self._collection(request, collection_name).find_one(filters)
            return self._serialize_document(document)
        except Exception as e:
            raise RuntimeError(f"Select failed: {e}") from e

    async def update_one(
        self,
        request: Request,
        filters: dict[str, Any],
        payload: dict[str, Any],
        collection_name: str
    ) -> Optional[dict]:
        try:
            document = await self._collection(request, collection_name).find_one_and_update(
                filters,
                {"$set": payload},
                return_document=ReturnDocument.AFTER
            )
            return self._serialize_document(document)
        except DuplicateKeyError as e:
            raise DuplicateRecordError(f"A {collection_name} record with the same key already exists") from e
        except Exception as e:
            raise RuntimeError(f"Update failed: {e}") from e

    async def upsert(
        self,
        request: Request,
        filters: dict[str, Any],
        payload: dict[str, Any],
        collection_name: str
    ) -> dict:
        try:
            document = await self._collection(request, collection_name).find_one_and_update(
                filters,
                {"$set": payload},
                upsert=True,
                return_document=ReturnDocument.AFTER
            )
            return self._serialize_document(document)
        except Exception as e:
            raise RuntimeError(f"Upsert failed: {e}") from e

    async def delete_one(
        self,
        request: Request,
        filters: dict[str, Any],
        collection_name: str
    ) -> Optional[dict]:
        try:
            document = await self._collection(request, collection_name).find_one_and_delete(filters)
            return self._serialize_document(document)
        except Exception as e:
            raise RuntimeError(f"Delete failed: {e}") from e

    async def book_time_slot(
        self,
        request: Request,
        therapist_id: str,
        date: str,
        time: str,
        user_id: str
    ) -> Optional[dict]:
        # The $elemMatch guard makes the free -> booked transition a single
        # conditional write, so concurrent requests for one slot cannot both match.
        try:
            document = await self._collection(request, AVAILABILITIES_COLLECTION_NAME).find_one_and_update(
                {
                    "therapistId": therapist_id,
                    "date": date,
                    "timeSlots": {
                        "$elemMatch": {
                            "time": time,
                            "isBooked": {"$ne": True},
                        }
                    },
                },
                {
                    "$set": {
                        "timeSlots.$.isBooked": True,
                        "timeSlots.$.bookedBy": user_id,
                    }
                },
                return_document=ReturnDocument.AFTER
            )
            return self._serialize_document(document)
        except Exception as e:
            raise RuntimeError(f"Booking update failed: {e}") from e

    async def append_chat_messages(
        self,
        request: Request,
        wallet_address: str,
        messages: list[dict],
        cap: int
    ) -> dict:
        try:
            document = await self._collection(request, CHAT_HISTORIES_COLLECTION_NAME).find_one_and_update(
                {"walletAddress": wallet_address},
                {
                    "$push": {
                        "messages": {
                            "$each": messages,
                            "$slice": -cap,
                        }
                    }
                },
                upsert=True,
                return_document=ReturnDocument.AFTER
            )
            return self._serialize_document(document)
        except Exception as e:
            raise RuntimeError(f"Chat history append failed: {e}") from e

    # Private

    def _collection(self, request: Request, collection_name: str):
        return request.app.state.mongo_db[collection_name]

    def _serialize_document(self, document: Optional[dict]) -> Optional[dict]:
        if document is None:
            return None

        serialized = dict(document)
        if "_id" in serialized:
            serialized["id"] = str(serialized.pop("_id"))
        for key, value in serialized.items():
            if isinstance(value, ObjectId):
                serialized[key] = str(value)
        return serialized
