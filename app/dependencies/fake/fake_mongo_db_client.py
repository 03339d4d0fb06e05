import copy
import uuid

from fastapi import Request
from typing import Any, Optional

from ..api.mongo_db_base_class import DuplicateRecordError, MongoDbBaseClass
from ...internal.schemas import (
    AVAILABILITIES_COLLECTION_NAME,
    CHAT_HISTORIES_COLLECTION_NAME,
    UNIQUE_KEYS,
)

class FakeMongoDbClient(MongoDbBaseClass):

    throws_exception = False

    def __init__(self):
        self.collections: dict[str, list[dict]] = {}

    async def insert(
        self,
        request: Request,
        payload: dict[str, Any],
        collection_name: str
    ) -> dict:
        self._raise_if_needed()
        documents = self.collections.setdefault(collection_name, [])
        unique_keys = UNIQUE_KEYS.get(collection_name, [])
        if unique_keys and self._find(collection_name, {key: payload.get(key) for key in unique_keys}) is not None:
            raise DuplicateRecordError(f"A {collection_name} record with the same key already exists")

        document = copy.deepcopy(payload)
        document["id"] = str(uuid.uuid4())
        documents.append(document)
        return copy.deepcopy(document)

    async def find_one(
        self,
        request: Request,
        filters: dict[str, Any],
        collection_name: str
    ) -> Optional[dict]:
        self._raise_if_needed()
        return copy.deepcopy(self._find(collection_name, filters))

    async def update_one(
        self,
        request: Request,
        filters: dict[str, Any],
        payload: dict[str, Any],
        collection_name: str
    ) -> Optional[dict]:
        self._raise_if_needed()
        document = self._find(collection_name, filters)
        if document is None:
            return None
        document.update(copy.deepcopy(payload))
        return copy.deepcopy(document)

    async def upsert(
        self,
        request: Request,
        filters: dict[str, Any],
        payload: dict[str, Any],
        collection_name: str
    ) -> dict:
        self._raise_if_needed()
        document = self._find(collection_name, filters)
        if document is None:
            return await self.insert(request=request,
                                     payload={**filters, **payload},
                                     collection_name=collection_name)
        document.update(copy.deepcopy(payload))
        return copy.deepcopy(document)

    async def delete_one(
        self,
        request: Request,
        filters: dict[str, Any],
        collection_name: str
    ) -> Optional[dict]:
        self._raise_if_needed()
        document = self._find(collection_name, filters)
        if document is None:
            return None
        self.collections[collection_name].remove(document)
        return copy.deepcopy(document)

    async def book_time_slot(
        self,
        request: Request,
        therapist_id: str,
        date: str,
        time: str,
        user_id: str
    ) -> Optional[dict]:
        self._raise_if_needed()
        availability = self._find(AVAILABILITIES_COLLECTION_NAME, {"therapistId": therapist_id, "date": date})
        if availability is None:
            return None

        for slot in availability.get("timeSlots", []):
            if slot.get("time") == time and slot.get("isBooked") is not True:
                slot["isBooked"] = True
                slot["bookedBy"] = user_id
                return copy.deepcopy(availability)
        return None

    async def append_chat_messages(
        self,
        request: Request,
        wallet_address: str,
        messages: list[dict],
        cap: int
    ) -> dict:
        self._raise_if_needed()
        chat_history = self._find(CHAT_HISTORIES_COLLECTION_NAME, {"walletAddress": wallet_address})
        if chat_history is None:
            chat_history = await self.insert(request=request,
                                             payload={"walletAddress": wallet_address, "messages": []},
                                             collection_name=CHAT_HISTORIES_COLLECTION_NAME)
            chat_history = self._find(CHAT_HISTORIES_COLLECTION_NAME, {"walletAddress": wallet_address})

        chat_history["messages"] = (chat_history.get("messages", []) + copy.deepcopy(messages))[-cap:]
        return copy.deepcopy(chat_history)

    # Private

    def _find(self, collection_name: str, filters: dict[str, Any]) -> Optional[dict]:
        for document in self.collections.get(collection_name, []):
            if all(document.get(key) == value for key, value in filters.items()):
                return document
        return None

    def _raise_if_needed(self):
        if self.throws_exception:
            raise RuntimeError("Fake database exception")
