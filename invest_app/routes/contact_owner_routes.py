import uuid
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from core.throttling import rate_limit
from models.models import User
from schemas.schema import (
    ApiResponse,
    ContactOwnerCreate,
    ContactOwnerMessageOut,
    OwnerInfoOut,
    PaginatedResponse,
)
from services.contact_owner_service import ContactOwnerService

router = APIRouter(tags=["Contact Owner"])


@cbv(router)
class ContactOwnerRoutes:
    @router.post(
        "/contact-owner",
        dependencies=[rate_limit],
        status_code=status.HTTP_201_CREATED,
        response_model=ApiResponse[ContactOwnerMessageOut],
    )
    @safe_handler
    async def create(
        self,
        data: ContactOwnerCreate,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        item = await ContactOwnerService(db).create_message(
            user_id=current_user.id,
            holding_id=data.holding_id,
            subject=data.subject,
            message=data.message,
            contact_preference=data.contact_preference,
        )
        return ApiResponse[ContactOwnerMessageOut](
            message="Your message has been sent to the property owner", data=item
        )

    @router.get(
        "/contact-owner",
        dependencies=[rate_limit],
        response_model=PaginatedResponse[ContactOwnerMessageOut],
    )
    @safe_handler
    async def list_mine(
        self,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await ContactOwnerService(db).list_for_user(
            user_id=current_user.id, status=status, page=page, limit=limit
        )

    @router.get(
        "/contact-owner/property/{property_id}/owner-info",
        dependencies=[rate_limit],
        response_model=ApiResponse[OwnerInfoOut],
    )
    @safe_handler
    async def owner_info(
        self,
        property_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        info = await ContactOwnerService(db).get_owner_info(
            property_id=property_id, user_id=current_user.id
        )
        return ApiResponse[OwnerInfoOut](data=info)

    @router.get(
        "/contact-owner/{message_id}",
        dependencies=[rate_limit],
        response_model=ApiResponse[ContactOwnerMessageOut],
    )
    @safe_handler
    async def get_one(
        self,
        message_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        item = await ContactOwnerService(db).get_for_user(
            message_id=message_id, user_id=current_user.id
        )
        return ApiResponse[ContactOwnerMessageOut](data=item)
