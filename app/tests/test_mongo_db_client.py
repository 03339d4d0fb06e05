import asyncio

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError
from types import SimpleNamespace
from unittest.mock import AsyncMock

from ..dependencies.api.mongo_db_base_class import DuplicateRecordError
from ..dependencies.implementation.mongo_db_client import MongoDbClient
from ..internal.schemas import AVAILABILITIES_COLLECTION_NAME, CHAT_HISTORIES_COLLECTION_NAME

FAKE_THERAPIST_ID = "4987b72e-dcbb-41fb-96a6-bf69756942cc"
FAKE_USER_ID = "0x8ba1f109551bD432803012645Ac136ddd64DBA72"
FAKE_WALLET_ADDRESS = "0x71C7656EC7ab88b098defB751B7401B5f6d8976F"
FAKE_DATE = "2025-03-14"

class TestingHarnessMongoDbClient:

    def setup_method(self):
        self.collections = {
            AVAILABILITIES_COLLECTION_NAME: AsyncMock(),
            CHAT_HISTORIES_COLLECTION_NAME: AsyncMock(),
        }
        self.request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(mongo_db=self.collections)))
        self.client = MongoDbClient()

    def test_book_time_slot_uses_conditional_update(self):
        object_id = ObjectId()
        availabilities = self.collections[AVAILABILITIES_COLLECTION_NAME]
        availabilities.find_one_and_update.return_value = {
            "_id": object_id,
            "therapistId": FAKE_THERAPIST_ID,
            "date": FAKE_DATE,
            "timeSlots": [{"time": "10:00", "isBooked": True, "bookedBy": FAKE_USER_ID}],
        }

        availability = asyncio.run(self.client.book_time_slot(request=self.request,
                                                              therapist_id=FAKE_THERAPIST_ID,
                                                              date=FAKE_DATE,
                                                              time="10:00",
                                                              user_id=FAKE_USER_ID))

        availabilities.find_one_and_update.assert_awaited_once()
        args, kwargs = availabilities.find_one_and_update.call_args
        filters, update = args
        assert filters == {
            "therapistId": FAKE_THERAPIST_ID,
            "date": FAKE_DATE,
            "timeSlots": {
                "$elemMatch": {
                    "time": "10:00",
                    "isBooked": {"$ne": True},
                }
            },
        }
        assert update == {
            "$set": {
                "timeSlots.$.isBooked": True,
                "timeSlots.$.bookedBy": FAKE_USER_ID,
            }
        }
        assert kwargs["return_document"] == ReturnDocument.AFTER
        assert "upsert" not in kwargs

        # Reads and writes never happen as separate steps.
        availabilities.find_one.assert_not_awaited()
        availabilities.update_one.assert_not_awaited()
        availabilities.replace_one.assert_not_awaited()

        assert availability["id"] == str(object_id)
        assert "_id" not in availability

    def test_book_time_slot_without_matching_free_slot(self):
        self.collections[AVAILABILITIES_COLLECTION_NAME].find_one_and_update.return_value = None

        availability = asyncio.run(self.client.book_time_slot(request=self.request,
                                                              therapist_id=FAKE_THERAPIST_ID,
                                                              date=FAKE_DATE,
                                                              time="10:00",
                                                              user_id=FAKE_USER_ID))
        assert availability is None

    def test_append_chat_messages_pushes_with_cap(self):
        chat_histories = self.collections[CHAT_HISTORIES_COLLECTION_NAME]
        chat_histories.find_one_and_update.return_value = {
            "_id": ObjectId(),
            "walletAddress": FAKE_WALLET_ADDRESS,
            "messages": [],
        }
        messages = [
            {"role": "user", "message": "Hello"},
            {"role": "assistant", "message": "Hi there"},
        ]

        asyncio.run(self.client.append_chat_messages(request=self.request,
                                                     wallet_address=FAKE_WALLET_ADDRESS,
                                                     messages=messages,
                                                     cap=50))

        args, kwargs = chat_histories.find_one_and_update.call_args
        filters, update = args
        assert filters == {"walletAddress": FAKE_WALLET_ADDRESS}
        assert update == {
            "$push": {
                "messages": {
                    "$each": messages,
                    "$slice": -50,
                }
            }
        }
        assert kwargs["upsert"] is True

    def test_insert_maps_duplicate_key_to_duplicate_record_error(self):
        availabilities = self.collections[AVAILABILITIES_COLLECTION_NAME]
        availabilities.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key error")

        try:
            asyncio.run(self.client.insert(request=self.request,
                                           payload={"therapistId": FAKE_THERAPIST_ID, "date": FAKE_DATE},
                                           collection_name=AVAILABILITIES_COLLECTION_NAME))
            assert False, "Expected a DuplicateRecordError"
        except DuplicateRecordError as e:
            assert e.status_code == 409

    def test_driver_failure_is_wrapped(self):
        self.collections[AVAILABILITIES_COLLECTION_NAME].find_one.side_effect = Exception("connection reset")

        try:
            asyncio.run(self.client.find_one(request=self.request,
                                             filters={"therapistId": FAKE_THERAPIST_ID},
                                             collection_name=AVAILABILITIES_COLLECTION_NAME))
            assert False, "Expected a RuntimeError"
        except RuntimeError as e:
            assert "connection reset" in str(e)
