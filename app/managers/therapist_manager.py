import logging

from fastapi import HTTPException, Request, status
from pydantic import EmailStr, Field, field_validator, model_validator
from typing import ClassVar

from .availability_manager import CamelCaseModel
from ..dependencies.dependency_container import MongoDbBaseClass, dependency_container
from ..internal.schemas import THERAPISTS_COLLECTION_NAME, WALLET_ADDRESS_KEY

class WeeklyAvailability(CamelCaseModel):
    days: list[str] = Field(default_factory=list)
    start_time: str | None = None
    end_time: str | None = None

class TherapistProfile(CamelCaseModel):
    full_name: str = Field(..., min_length=1)
    therapist_type: str = Field(..., min_length=1)
    license_number: str = Field(..., min_length=1)
    issuing_authority: str | None = None
    years_of_experience: int = Field(..., ge=0)
    specialties: list[str]
    email: EmailStr
    wallet_address: str = Field(..., min_length=1)
    availability: WeeklyAvailability | None = None
    certifications: list[str] = Field(default_factory=list)
    consultation_fee_eth: float = Field(..., ge=0, alias="consultationFeeETH")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

class TherapistUpdatePayload(CamelCaseModel):
    full_name: str | None = Field(None, min_length=1)
    therapist_type: str | None = Field(None, min_length=1)
    license_number: str | None = Field(None, min_length=1)
    issuing_authority: str | None = None
    years_of_experience: int | None = Field(None, ge=0)
    specialties: list[str] | None = None
    email: EmailStr | None = None
    availability: WeeklyAvailability | None = None
    certifications: list[str] | None = None
    consultation_fee_eth: float | None = Field(None, ge=0, alias="consultationFeeETH")

    # Fields a stored profile cannot be without.
    NON_NULLABLE_FIELDS: ClassVar[tuple[str, ...]] = (
        "full_name",
        "therapist_type",
        "license_number",
        "years_of_experience",
        "specialties",
        "email",
        "consultation_fee_eth",
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str | None) -> str | None:
        return value.strip().lower() if value is not None else None

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        null_fields = [
            field_name for field_name in self.NON_NULLABLE_FIELDS
            if field_name in self.model_fields_set and getattr(self, field_name) is None
        ]
        if len(null_fields) > 0:
            raise ValueError(f"Fields cannot be null: {', '.join(null_fields)}")
        return self

class TherapistManager:

    THERAPIST_NOT_FOUND_ERROR = "No therapist data found for this wallet address"

    async def create_therapist(
        self,
        request: Request,
        profile: TherapistProfile,
    ) -> dict:
        mongo_db_client: MongoDbBaseClass = dependency_container.inject_mongo_db_client()
        therapist = await mongo_db_client.insert(
            request=request,
            payload=profile.model_dump(by_alias=True, exclude_none=True),
            collection_name=THERAPISTS_COLLECTION_NAME
        )
        logging.info(f"[create_therapist] Created therapist profile {therapist['id']}")
        return therapist

    async def retrieve_therapist(
        self,
        request: Request,
        wallet_address: str,
    ) -> dict:
        mongo_db_client: MongoDbBaseClass = dependency_container.inject_mongo_db_client()
        therapist = await mongo_db_client.find_one(
            request=request,
            filters={WALLET_ADDRESS_KEY: wallet_address},
            collection_name=THERAPISTS_COLLECTION_NAME
        )
        if therapist is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                                detail="No therapist data found")
        return therapist

    async def update_therapist(
        self,
        request: Request,
        wallet_address: str,
        update_payload: TherapistUpdatePayload,
    ) -> dict:
        """
        Applies a partial update to the therapist identified by the incoming wallet address.
        Only the fields present in the payload are written.

        Arguments:
        request – the upstream request object.
        wallet_address – the therapist's wallet address.
        update_payload – the fields to be updated.
        """
        updates = update_payload.model_dump(by_alias=True, exclude_unset=True)
        if len(updates) == 0:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail="No data provided for update")

        mongo_db_client: MongoDbBaseClass = dependency_container.inject_mongo_db_client()
        therapist = await mongo_db_client.update_one(
            request=request,
            filters={WALLET_ADDRESS_KEY: wallet_address},
            payload=updates,
            collection_name=THERAPISTS_COLLECTION_NAME
        )
        if therapist is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                                detail=self.THERAPIST_NOT_FOUND_ERROR)
        return therapist

    async def delete_therapist(
        self,
        request: Request,
        wallet_address: str,
    ):
        mongo_db_client: MongoDbBaseClass = dependency_container.inject_mongo_db_client()
        therapist = await mongo_db_client.delete_one(
            request=request,
            filters={WALLET_ADDRESS_KEY: wallet_address},
            collection_name=THERAPISTS_COLLECTION_NAME
        )
        if therapist is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                                detail=self.THERAPIST_NOT_FOUND_ERROR)
        logging.info(f"[delete_therapist] Deleted therapist profile {therapist['id']}")
