import uuid
from typing import List

from core.breaker import breaker
from core.cache import cache
from core.check_permission import CheckRolePermission
from core.exceptions import NotFoundError
from core.mapper import ORMMapper
from repos.holding_repo import HoldingRepo
from schemas.schema import HoldingOut
from services.transfer_request_service import holdings_cache_key


class HoldingService:
    def __init__(self, db):
        self.repo: HoldingRepo = HoldingRepo(db)
        self.permission: CheckRolePermission = CheckRolePermission()
        self.mapper: ORMMapper = ORMMapper()

    async def list_for_user(self, user_id: uuid.UUID) -> List[HoldingOut]:
        async def handler():
            cache_key = holdings_cache_key(user_id)
            cached = await cache.get_json(cache_key)
            if cached is not None:
                return self.mapper.many(cached, HoldingOut)

            holdings = await self.repo.list_for_user(user_id)
            items = self.mapper.many(holdings, HoldingOut)
            await cache.set_json(cache_key, self.mapper.dump_many(items), ttl=300)
            return items

        return await breaker.call(handler)

    async def get_holding(self, *, holding_id: uuid.UUID, current_user) -> HoldingOut:
        async def handler():
            holding = await self.repo.get_holding_id(holding_id)
            if not holding:
                raise NotFoundError("Holding not found")
            self.permission.check_owner_or_admin(
                current_user, holding.user_id, "Not authorized to access this holding"
            )
            return self.mapper.one(holding, HoldingOut)

        return await breaker.call(handler)
