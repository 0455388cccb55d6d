import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_admin
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from core.throttling import rate_limit
from models.models import User
from schemas.schema import (
    AdminDecisionIn,
    AdminTransferRequestCreate,
    ApiResponse,
    TransferRequestOut,
)
from services.transfer_request_service import TransferRequestService

router = APIRouter(tags=["Admin Transfer Requests"])


@cbv(router)
class AdminTransferRoutes:
    @router.get(
        "/transfer-requests",
        dependencies=[rate_limit],
        response_model=ApiResponse[List[TransferRequestOut]],
    )
    @safe_handler
    async def list_transfers(
        self,
        status: Optional[str] = None,
        db: AsyncSession = Depends(get_db_async),
        admin: User = Depends(get_current_admin),
    ):
        items = await TransferRequestService(db).list_requests(status)
        return ApiResponse[List[TransferRequestOut]](data=items)

    @router.post(
        "/transfer-requests",
        dependencies=[rate_limit],
        status_code=status.HTTP_201_CREATED,
        response_model=ApiResponse[TransferRequestOut],
    )
    @safe_handler
    async def create_transfer(
        self,
        data: AdminTransferRequestCreate,
        db: AsyncSession = Depends(get_db_async),
        admin: User = Depends(get_current_admin),
    ):
        item = await TransferRequestService(db).create_request(
            seller_id=data.seller_id,
            buyer_id=data.buyer_id,
            holding_id=data.holding_id,
            sale_price=data.sale_price,
        )
        return ApiResponse[TransferRequestOut](
            message="Transfer request created on behalf of seller", data=item
        )

    @router.get(
        "/transfer-requests/{request_id}",
        dependencies=[rate_limit],
        response_model=ApiResponse[TransferRequestOut],
    )
    @safe_handler
    async def get_transfer(
        self,
        request_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
        admin: User = Depends(get_current_admin),
    ):
        item = await TransferRequestService(db).get_request(
            request_id=request_id, current_user=admin
        )
        return ApiResponse[TransferRequestOut](data=item)

    @router.post(
        "/transfer-requests/{request_id}/approve",
        dependencies=[rate_limit],
        response_model=ApiResponse[TransferRequestOut],
    )
    @safe_handler
    async def approve(
        self,
        request_id: uuid.UUID,
        data: Optional[AdminDecisionIn] = None,
        db: AsyncSession = Depends(get_db_async),
        admin: User = Depends(get_current_admin),
    ):
        item = await TransferRequestService(db).admin_approve(
            request_id=request_id,
            admin_id=admin.id,
            admin_notes=data.admin_notes if data else None,
        )
        return ApiResponse[TransferRequestOut](
            message="Transfer approved and completed", data=item
        )

    @router.post(
        "/transfer-requests/{request_id}/reject",
        dependencies=[rate_limit],
        response_model=ApiResponse[TransferRequestOut],
    )
    @safe_handler
    async def reject(
        self,
        request_id: uuid.UUID,
        data: Optional[AdminDecisionIn] = None,
        db: AsyncSession = Depends(get_db_async),
        admin: User = Depends(get_current_admin),
    ):
        item = await TransferRequestService(db).admin_reject(
            request_id=request_id,
            admin_id=admin.id,
            admin_notes=data.admin_notes if data else None,
        )
        return ApiResponse[TransferRequestOut](
            message="Transfer request rejected", data=item
        )

