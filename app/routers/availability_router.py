from fastapi import (
    APIRouter,
    HTTPException,
    Query,
    Request,
    status
)

from ..internal.utilities import general_utilities
from ..managers.availability_manager import (
    AvailabilityManager,
    AvailabilityPayload,
    BookingPayload,
)

class AvailabilityRouter:

    AVAILABILITY_ENDPOINT = "/availability"
    BOOKING_ENDPOINT = "/booking"
    ROUTER_TAG = "availability"

    def __init__(self):
        self._availability_manager = AvailabilityManager()
        self.router = APIRouter()
        self._register_routes()

    def _register_routes(self):
        """
        Registers the set of routes that the class' router can access.
        """
        @self.router.post(self.AVAILABILITY_ENDPOINT, tags=[self.ROUTER_TAG])
        async def publish_availability(body: AvailabilityPayload,
                                       request: Request):
            return await self._publish_availability_internal(body=body,
                                                             request=request)

        @self.router.get(self.AVAILABILITY_ENDPOINT, tags=[self.ROUTER_TAG])
        async def get_availability(request: Request,
                                   therapist_id: str = Query(None, alias="therapistId"),
                                   date: str = Query(None)):
            return await self._get_availability_internal(request=request,
                                                         therapist_id=therapist_id,
                                                         date=date)

        @self.router.post(self.BOOKING_ENDPOINT, tags=[self.ROUTER_TAG])
        async def book_time_slot(body: BookingPayload,
                                 request: Request):
            return await self._book_time_slot_internal(body=body,
                                                       request=request)

    async def _publish_availability_internal(self,
                                             body: AvailabilityPayload,
                                             request: Request):
        """
        Creates or replaces a therapist's time slots for one date.

        Arguments:
        body – the incoming request json body.
        request – the request object.
        """
        try:
            assert len(body.therapist_id or '') > 0, "Missing therapistId in payload"
            assert len(body.date or '') > 0, "Missing date in payload"
        except Exception as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_400_BAD_REQUEST)

        try:
            availability = await self._availability_manager.publish_availability(
                request=request,
                therapist_id=body.therapist_id,
                date=body.date,
                time_slots=body.time_slots
            )
            return {"success": True, "availability": availability}
        except Exception as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                                   therapist_id=body.therapist_id,
                                                   date=body.date)

    async def _get_availability_internal(self,
                                         request: Request,
                                         therapist_id: str | None,
                                         date: str | None):
        """
        Retrieves a therapist's time slots for one date.

        Arguments:
        request – the request object.
        therapist_id – the therapist whose availability is requested.
        date – the availability date.
        """
        if len(therapist_id or '') == 0 or len(date or '') == 0:
            general_utilities.raise_http_exception(
                request=request,
                exception=HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                        detail="Missing required query parameters"),
                fallback=status.HTTP_400_BAD_REQUEST
            )

        try:
            availability = await self._availability_manager.retrieve_availability(
                request=request,
                therapist_id=therapist_id,
                date=date
            )
            return {"success": True, "availability": availability}
        except Exception as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                                   therapist_id=therapist_id,
                                                   date=date)

    async def _book_time_slot_internal(self,
                                       body: BookingPayload,
                                       request: Request):
        """
        Books a free time slot for a user.

        Arguments:
        body – the incoming request json body.
        request – the request object.
        """
        try:
            assert len(body.therapist_id or '') > 0, "Missing therapistId in payload"
            assert len(body.date or '') > 0, "Missing date in payload"
            assert len(body.time or '') > 0, "Missing time in payload"
            assert len(body.user_id or '') > 0, "Missing userId in payload"
        except Exception as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_400_BAD_REQUEST)

        try:
            availability = await self._availability_manager.book_time_slot(
                request=request,
                therapist_id=body.therapist_id,
                date=body.date,
                time=body.time,
                user_id=body.user_id
            )
            return {"success": True, "availability": availability}
        except Exception as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                                   therapist_id=body.therapist_id,
                                                   date=body.date)
