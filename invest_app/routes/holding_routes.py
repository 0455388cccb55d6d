import uuid
from typing import List

from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from core.throttling import rate_limit
from models.models import User
from schemas.schema import ApiResponse, HoldingOut
from services.holding_service import HoldingService

router = APIRouter(tags=["Holdings"])


@cbv(router)
class HoldingRoutes:
    @router.get(
        "/holdings", dependencies=[rate_limit], response_model=ApiResponse[List[HoldingOut]]
    )
    @safe_handler
    async def list_mine(
        self,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        items = await HoldingService(db).list_for_user(current_user.id)
        return ApiResponse[List[HoldingOut]](data=items)

    @router.get(
        "/holdings/{holding_id}",
        dependencies=[rate_limit],
        response_model=ApiResponse[HoldingOut],
    )
    @safe_handler
    async def get_one(
        self,
        holding_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        item = await HoldingService(db).get_holding(
            holding_id=holding_id, current_user=current_user
        )
        return ApiResponse[HoldingOut](data=item)
