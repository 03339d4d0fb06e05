from abc import ABC, abstractmethod

from fastapi import Request
from typing import Any, Optional

class DuplicateRecordError(Exception):
    """
    Raised when a write would violate a collection's unique key.
    """
    status_code = 409

class MongoDbBaseClass(ABC):

    @abstractmethod
    async def insert(self,
                     request: Request,
                     payload: dict[str, Any],
                     collection_name: str) -> dict:
        """
        Inserts payload into a collection.

        Arguments:
        request – the FastAPI request associated with the insert operation.
        payload – the document to be inserted.
        collection_name – the collection into which the payload should be inserted.
        """
        pass

    @abstractmethod
    async def find_one(self,
                       request: Request,
                       filters: dict[str, Any],
                       collection_name: str) -> Optional[dict]:
        """
        Fetches the first document matching the incoming filters.

        Arguments:
        request – the FastAPI request associated with the select operation.
        filters – the equality filters to be applied to the collection.
        collection_name – the collection to be queried.
        """
        pass

    @abstractmethod
    async def update_one(self,
                         request: Request,
                         filters: dict[str, Any],
                         payload: dict[str, Any],
                         collection_name: str) -> Optional[dict]:
        """
        Sets the payload fields on the document matching the filters.
        Returns the updated document, or None if nothing matched.

        Arguments:
        request – the FastAPI request associated with the update operation.
        filters – the equality filters to be applied to the collection.
        payload – the fields to be set.
        collection_name – the collection that should be updated.
        """
        pass

    @abstractmethod
    async def upsert(self,
                     request: Request,
                     filters: dict[str, Any],
                     payload: dict[str, Any],
                     collection_name: str) -> dict:
        """
        Sets the payload fields on the document matching the filters, creating it if needed.
        Returns the resulting document.

        Arguments:
        request – the FastAPI request associated with the upsert operation.
        filters – the equality filters identifying the document.
        payload – the fields to be set.
        collection_name – the collection that should be updated.
        """
        pass

    @abstractmethod
    async def delete_one(self,
                         request: Request,
                         filters: dict[str, Any],
                         collection_name: str) -> Optional[dict]:
        """
        Deletes the document matching the filters. Returns the deleted document, if any.

        Arguments:
        request – the FastAPI request associated with the delete operation.
        filters – the equality filters to be applied to the collection.
        collection_name – the collection name.
        """
        pass

    @abstractmethod
    async def book_time_slot(self,
                             request: Request,
                             therapist_id: str,
                             date: str,
                             time: str,
                             user_id: str) -> Optional[dict]:
        """
        Atomically marks a free time slot as booked by the incoming user.
        Returns the updated availability record, or None if no free slot matched.

        Arguments:
        request – the FastAPI request associated with the booking.
        therapist_id – the therapist whose availability is being booked.
        date – the availability date.
        time – the slot time.
        user_id – the user booking the slot.
        """
        pass

    @abstractmethod
    async def append_chat_messages(self,
                                   request: Request,
                                   wallet_address: str,
                                   messages: list[dict],
                                   cap: int) -> dict:
        """
        Appends messages to a wallet's chat history, keeping only the most recent `cap` entries.
        Returns the resulting chat history.

        Arguments:
        request – the FastAPI request associated with the append.
        wallet_address – the wallet owning the chat history.
        messages – the role-tagged messages to be appended, in order.
        cap – the maximum count of messages to keep.
        """
        pass
