from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Generic, List, Optional, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
)

from models.enums import (
    BuyerResponse,
    ContactMessageStatus,
    ContactPreference,
    HoldingStatus,
    TransferStatus,
)

T = TypeVar("T")


class RequestSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class PaginatedResponse(ApiResponse[List[T]], Generic[T]):
    pagination: Optional[PaginationMeta] = None


class UserBriefOut(BaseModel):
    id: uuid.UUID
    name: str
    email: EmailStr
    phone: Optional[str] = None

    model_config = {"from_attributes": True}


class PropertyBriefOut(BaseModel):
    id: uuid.UUID
    title: str
    property_type: Optional[str] = None

    model_config = {"from_attributes": True}


class HoldingBriefOut(BaseModel):
    id: uuid.UUID
    amount_invested: Decimal
    purchase_date: date
    status: HoldingStatus

    model_config = {"from_attributes": True}


class HoldingOut(HoldingBriefOut):
    user_id: uuid.UUID
    property_id: uuid.UUID
    monthly_earning: Decimal
    total_earnings_received: Decimal
    lock_in_months: int
    maturity_date: Optional[date] = None
    last_transferred_at: Optional[datetime] = None
    created_at: datetime
    property: Optional[PropertyBriefOut] = None

    model_config = {"from_attributes": True}


class TransferRequestCreate(RequestSchema):
    holding_id: uuid.UUID = Field(alias="holdingId")
    buyer_id: uuid.UUID = Field(alias="buyerId")
    sale_price: Decimal = Field(alias="salePrice")


class AdminTransferRequestCreate(TransferRequestCreate):
    seller_id: uuid.UUID = Field(alias="sellerId")


class BuyerResponseIn(RequestSchema):
    response: str


class AdminDecisionIn(RequestSchema):
    admin_notes: Optional[str] = Field(default=None, alias="adminNotes")


class TransferRequestOut(BaseModel):
    id: uuid.UUID
    seller_id: uuid.UUID
    buyer_id: uuid.UUID
    holding_id: uuid.UUID
    property_id: uuid.UUID
    sale_price: Decimal
    status: TransferStatus
    buyer_response: BuyerResponse
    admin_notes: str = ""
    last_error: Optional[str] = None
    buyer_response_at: Optional[datetime] = None
    admin_response_at: Optional[datetime] = None
    transfer_completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    seller: Optional[UserBriefOut] = None
    buyer: Optional[UserBriefOut] = None
    property: Optional[PropertyBriefOut] = None
    holding: Optional[HoldingBriefOut] = None

    model_config = {"from_attributes": True}


class ContactOwnerCreate(RequestSchema):
    holding_id: uuid.UUID = Field(alias="holdingId")
    subject: str = ""
    message: str = ""
    contact_preference: ContactPreference = Field(
        default=ContactPreference.EMAIL, alias="contactPreference"
    )

    @field_validator("contact_preference", mode="before")
    @classmethod
    def normalize_preference(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class ContactOwnerRespondIn(RequestSchema):
    message: str = Field(
        default="", validation_alias=AliasChoices("message", "response")
    )
    status: str = ContactMessageStatus.REPLIED.value
    admin_notes: Optional[str] = Field(default=None, alias="adminNotes")


class ContactStatusUpdateIn(RequestSchema):
    status: str
    admin_notes: Optional[str] = Field(default=None, alias="adminNotes")


class AdminResponseOut(BaseModel):
    message: Optional[str] = None
    responded_by: Optional[uuid.UUID] = None
    responded_at: Optional[datetime] = None


class ContactOwnerMessageOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    holding_id: uuid.UUID
    property_id: uuid.UUID
    subject: str
    message: str
    contact_preference: ContactPreference
    status: ContactMessageStatus
    admin_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    admin_response: Optional[AdminResponseOut] = None

    user: Optional[UserBriefOut] = None
    property: Optional[PropertyBriefOut] = None
    holding: Optional[HoldingBriefOut] = None

    model_config = {"from_attributes": True}


class ContactOwnerListResponse(PaginatedResponse[ContactOwnerMessageOut]):
    model_config = ConfigDict(populate_by_name=True)

    status_counts: dict[str, int] = Field(default_factory=dict, alias="statusCounts")


class OwnerInfoOut(BaseModel):
    name: str
    email: EmailStr
    phone: Optional[str] = None
