import logging

from fastapi import HTTPException, Request, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..dependencies.dependency_container import MongoDbBaseClass, dependency_container
from ..internal.schemas import AVAILABILITIES_COLLECTION_NAME
from ..internal.utilities import datetime_handler

class CamelCaseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class TimeSlot(CamelCaseModel):
    time: str
    is_booked: bool = False
    booked_by: str | None = None

class AvailabilityPayload(CamelCaseModel):
    therapist_id: str | None = None
    date: str | None = None
    time_slots: list[TimeSlot] = Field(default_factory=list)

class BookingPayload(CamelCaseModel):
    therapist_id: str | None = None
    date: str | None = None
    time: str | None = None
    user_id: str | None = None

class AvailabilityManager:

    NO_AVAILABILITY_FOUND_ERROR = "No availability found"
    SLOT_ALREADY_BOOKED_ERROR = "Slot already booked"

    async def publish_availability(
        self,
        request: Request,
        therapist_id: str,
        date: str,
        time_slots: list[TimeSlot],
    ) -> dict:
        """
        Creates or replaces the set of time slots a therapist offers on a given date.

        Arguments:
        request – the upstream request object.
        therapist_id – the therapist publishing availability.
        date – the date (YYYY-MM-DD) the slots belong to.
        time_slots – the full set of slots for that date.
        """
        if not datetime_handler.is_valid_date(date):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail="Invalid date. Expected format is YYYY-MM-DD")

        slot_times = [slot.time for slot in time_slots]
        if not all(datetime_handler.is_valid_slot_time(slot_time) for slot_time in slot_times):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail="Invalid slot time. Expected format is HH:MM")
        if len(set(slot_times)) != len(slot_times):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail="Slot times must be unique within a date")

        mongo_db_client: MongoDbBaseClass = dependency_container.inject_mongo_db_client()
        availability = await mongo_db_client.upsert(
            request=request,
            filters={
                "therapistId": therapist_id,
                "date": date,
            },
            payload={
                "timeSlots": [slot.model_dump(by_alias=True, exclude_none=True) for slot in time_slots],
            },
            collection_name=AVAILABILITIES_COLLECTION_NAME
        )
        logging.info(f"[publish_availability] Published {len(time_slots)} slots for {therapist_id} on {date}")
        return availability

    async def retrieve_availability(
        self,
        request: Request,
        therapist_id: str,
        date: str,
    ) -> dict | None:
        mongo_db_client: MongoDbBaseClass = dependency_container.inject_mongo_db_client()
        return await mongo_db_client.find_one(
            request=request,
            filters={
                "therapistId": therapist_id,
                "date": date,
            },
            collection_name=AVAILABILITIES_COLLECTION_NAME
        )

    async def book_time_slot(
        self,
        request: Request,
        therapist_id: str,
        date: str,
        time: str,
        user_id: str,
    ) -> dict:
        """
        Transitions a slot from free to booked for the incoming user.
        Returns the updated availability record.

        Arguments:
        request – the upstream request object.
        therapist_id – the therapist whose slot is being booked.
        date – the availability date.
        time – the slot time.
        user_id – the user booking the slot.
        """
        mongo_db_client: MongoDbBaseClass = dependency_container.inject_mongo_db_client()
        availability = await mongo_db_client.book_time_slot(
            request=request,
            therapist_id=therapist_id,
            date=date,
            time=time,
            user_id=user_id
        )
        if availability is not None:
            logging.info(f"[book_time_slot] Booked {date} {time} with {therapist_id}")
            return availability

        # The conditional update matched nothing; tell not-found apart from conflict.
        existing_availability = await self.retrieve_availability(request=request,
                                                                 therapist_id=therapist_id,
                                                                 date=date)
        if existing_availability is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                                detail=self.NO_AVAILABILITY_FOUND_ERROR)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT,
                            detail=self.SLOT_ALREADY_BOOKED_ERROR)
