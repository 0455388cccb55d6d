import uuid
from typing import List, Optional

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
    BuyerResponseIn,
    TransferRequestCreate,
    TransferRequestOut,
)
from services.transfer_request_service import TransferRequestService

router = APIRouter(tags=["Transfer Requests"])


@cbv(router)
class TransferRequestRoutes:
    @router.post(
        "/transfer-requests",
        dependencies=[rate_limit],
        status_code=status.HTTP_201_CREATED,
        response_model=ApiResponse[TransferRequestOut],
    )
    @safe_handler
    async def create(
        self,
        data: TransferRequestCreate,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        item = await TransferRequestService(db).create_request(
            seller_id=current_user.id,
            buyer_id=data.buyer_id,
            holding_id=data.holding_id,
            sale_price=data.sale_price,
        )
        return ApiResponse[TransferRequestOut](
            message="Transfer request sent to buyer", data=item
        )

    @router.get(
        "/transfer-requests/received",
        dependencies=[rate_limit],
        response_model=ApiResponse[List[TransferRequestOut]],
    )
    @safe_handler
    async def received(
        self,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        items = await TransferRequestService(db).list_received(current_user.id)
        return ApiResponse[List[TransferRequestOut]](data=items)

    @router.get(
        "/transfer-requests/sent",
        dependencies=[rate_limit],
        response_model=ApiResponse[List[TransferRequestOut]],
    )
    @safe_handler
    async def sent(
        self,
        status: Optional[str] = None,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        items = await TransferRequestService(db).list_sent(current_user.id, status)
        return ApiResponse[List[TransferRequestOut]](data=items)

    @router.get(
        "/transfer-requests/{request_id}",
        dependencies=[rate_limit],
        response_model=ApiResponse[TransferRequestOut],
    )
    @safe_handler
    async def get_one(
        self,
        request_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        item = await TransferRequestService(db).get_request(
            request_id=request_id, current_user=current_user
        )
        return ApiResponse[TransferRequestOut](data=item)

    @router.post(
        "/transfer-requests/{request_id}/respond",
        dependencies=[rate_limit],
        response_model=ApiResponse[TransferRequestOut],
    )
    @safe_handler
    async def respond(
        self,
        request_id: uuid.UUID,
        data: BuyerResponseIn,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        item = await TransferRequestService(db).buyer_respond(
            request_id=request_id,
            buyer_id=current_user.id,
            decision=data.response,
        )
        return ApiResponse[TransferRequestOut](
            message=f"Transfer request {data.response.lower()}", data=item
        )

    @router.post(
        "/transfer-requests/{request_id}/cancel",
        dependencies=[rate_limit],
        response_model=ApiResponse[TransferRequestOut],
    )
    @safe_handler
    async def cancel(
        self,
        request_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        item = await TransferRequestService(db).cancel_request(
            request_id=request_id, seller_id=current_user.id
        )
        return ApiResponse[TransferRequestOut](
            message="Transfer request cancelled", data=item
        )
