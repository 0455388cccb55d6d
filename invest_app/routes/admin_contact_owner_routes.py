import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_admin
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from core.throttling import rate_limit
from models.models import User
from schemas.schema import (
    ApiResponse,
    ContactOwnerListResponse,
    ContactOwnerMessageOut,
    ContactOwnerRespondIn,
    ContactStatusUpdateIn,
)
from services.contact_owner_service import ContactOwnerService

router = APIRouter(tags=["Admin Contact Owner"])


@cbv(router)
class AdminContactOwnerRoutes:
    @router.get(
        "/contact-owner",
        dependencies=[rate_limit],
        response_model=ContactOwnerListResponse,
    )
    @safe_handler
    async def list_messages(
        self,
        status: Optional[str] = None,
        property_id: Optional[uuid.UUID] = Query(default=None, alias="propertyId"),
        page: int = 1,
        limit: int = 20,
        db: AsyncSession = Depends(get_db_async),
        admin: User = Depends(get_current_admin),
    ):
        return await ContactOwnerService(db).list_for_admin(
            status=status, property_id=property_id, page=page, limit=limit
        )

    @router.get(
        "/contact-owner/{message_id}",
        dependencies=[rate_limit],
        response_model=ApiResponse[ContactOwnerMessageOut],
    )
    @safe_handler
    async def get_message(
        self,
        message_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
        admin: User = Depends(get_current_admin),
    ):
        item = await ContactOwnerService(db).get_for_admin(message_id)
        return ApiResponse[ContactOwnerMessageOut](data=item)

    @router.post(
        "/contact-owner/{message_id}/read",
        dependencies=[rate_limit],
        response_model=ApiResponse[ContactOwnerMessageOut],
    )
    @safe_handler
    async def mark_read(
        self,
        message_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
        admin: User = Depends(get_current_admin),
    ):
        item = await ContactOwnerService(db).mark_read(message_id)
        return ApiResponse[ContactOwnerMessageOut](data=item)

    @router.post(
        "/contact-owner/{message_id}/respond",
        dependencies=[rate_limit],
        response_model=ApiResponse[ContactOwnerMessageOut],
    )
    @safe_handler
    async def respond(
        self,
        message_id: uuid.UUID,
        data: ContactOwnerRespondIn,
        db: AsyncSession = Depends(get_db_async),
        admin: User = Depends(get_current_admin),
    ):
        item = await ContactOwnerService(db).respond(
            message_id=message_id,
            admin_id=admin.id,
            response_text=data.message,
            new_status=data.status,
            admin_notes=data.admin_notes,
        )
        return ApiResponse[ContactOwnerMessageOut](
            message="Response sent successfully", data=item
        )

    @router.post(
        "/contact-owner/{message_id}/status",
        dependencies=[rate_limit],
        response_model=ApiResponse[ContactOwnerMessageOut],
    )
    @safe_handler
    async def update_status(
        self,
        message_id: uuid.UUID,
        data: ContactStatusUpdateIn,
        db: AsyncSession = Depends(get_db_async),
        admin: User = Depends(get_current_admin),
    ):
        item = await ContactOwnerService(db).update_status(
            message_id=message_id,
            new_status=data.status,
            admin_notes=data.admin_notes,
        )
        return ApiResponse[ContactOwnerMessageOut](
            message="Message status updated", data=item
        )
