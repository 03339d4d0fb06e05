from fastapi import (
    APIRouter,
    Body,
    Query,
    Request,
    status
)
from pydantic import ValidationError
from typing import Any

from ..internal.utilities import general_utilities
from ..managers.therapist_manager import (
    TherapistManager,
    TherapistProfile,
    TherapistUpdatePayload,
)

class TherapistRouter:

    THERAPIST_ENDPOINT = "/therapist"
    ROUTER_TAG = "therapists"

    def __init__(self):
        self._therapist_manager = TherapistManager()
        self.router = APIRouter()
        self._register_routes()

    def _register_routes(self):
        """
        Registers the set of routes that the class' router can access.
        """
        @self.router.post(self.THERAPIST_ENDPOINT, tags=[self.ROUTER_TAG], status_code=status.HTTP_201_CREATED)
        async def add_therapist(request: Request,
                                body: dict[str, Any] = Body(None)):
            return await self._add_therapist_internal(request=request,
                                                      body=body)

        @self.router.get(self.THERAPIST_ENDPOINT, tags=[self.ROUTER_TAG])
        async def get_therapist(request: Request,
                                wallet_address: str = Query(None, alias="walletAddress")):
            return await self._get_therapist_internal(request=request,
                                                      wallet_address=wallet_address)

        @self.router.patch(self.THERAPIST_ENDPOINT, tags=[self.ROUTER_TAG])
        async def update_therapist(request: Request,
                                   wallet_address: str = Query(None, alias="walletAddress"),
                                   body: dict[str, Any] = Body(None)):
            return await self._update_therapist_internal(request=request,
                                                         wallet_address=wallet_address,
                                                         body=body)

        @self.router.delete(self.THERAPIST_ENDPOINT, tags=[self.ROUTER_TAG])
        async def delete_therapist(request: Request,
                                   wallet_address: str = Query(None, alias="walletAddress")):
            return await self._delete_therapist_internal(request=request,
                                                         wallet_address=wallet_address)

    async def _add_therapist_internal(self,
                                      request: Request,
                                      body: dict[str, Any] | None):
        """
        Stores a new therapist profile.

        Arguments:
        request – the request object.
        body – the incoming request json body.
        """
        try:
            assert len(body or {}) > 0, "Request body is missing"
            profile = TherapistProfile.model_validate(body)
            assert general_utilities.is_valid_wallet_address(profile.wallet_address), "Invalid walletAddress in payload"
        except (AssertionError, ValidationError) as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_400_BAD_REQUEST)

        try:
            await self._therapist_manager.create_therapist(request=request,
                                                           profile=profile)
            return {"message": "Therapist data saved successfully"}
        except Exception as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                                   wallet_address=profile.wallet_address)

    async def _get_therapist_internal(self,
                                      request: Request,
                                      wallet_address: str | None):
        general_utilities.validate_wallet_address(request=request, wallet_address=wallet_address)

        try:
            return await self._therapist_manager.retrieve_therapist(request=request,
                                                                    wallet_address=wallet_address)
        except Exception as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                                   wallet_address=wallet_address)

    async def _update_therapist_internal(self,
                                         request: Request,
                                         wallet_address: str | None,
                                         body: dict[str, Any] | None):
        """
        Partially updates a therapist profile.

        Arguments:
        request – the request object.
        wallet_address – the therapist's wallet address.
        body – the incoming request json body with the fields to be updated.
        """
        general_utilities.validate_wallet_address(request=request, wallet_address=wallet_address)

        try:
            assert len(body or {}) > 0, "No data provided for update"
            update_payload = TherapistUpdatePayload.model_validate(body)
        except (AssertionError, ValidationError) as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_400_BAD_REQUEST,
                                                   wallet_address=wallet_address)

        try:
            therapist = await self._therapist_manager.update_therapist(request=request,
                                                                       wallet_address=wallet_address,
                                                                       update_payload=update_payload)
            return {"message": "Therapist data updated successfully", "therapistData": therapist}
        except Exception as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                                   wallet_address=wallet_address)

    async def _delete_therapist_internal(self,
                                         request: Request,
                                         wallet_address: str | None):
        general_utilities.validate_wallet_address(request=request, wallet_address=wallet_address)

        try:
            await self._therapist_manager.delete_therapist(request=request,
                                                           wallet_address=wallet_address)
            return {"message": "Therapist data deleted successfully"}
        except Exception as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                                   wallet_address=wallet_address)

