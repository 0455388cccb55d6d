import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from models.models import Holding


class HoldingRepo:
    def __init__(self, db):
        self.db = db

    async def get_holding_id(self, holding_id: uuid.UUID) -> Optional[Holding]:
        stmt = (
            select(Holding)
            .options(selectinload(Holding.property))
            .where(Holding.id == holding_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: uuid.UUID) -> List[Holding]:
        stmt = (
            select(Holding)
            .options(selectinload(Holding.property))
            .where(Holding.user_id == user_id)
            .order_by(Holding.purchase_date.desc(), Holding.created_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def find_for_user_and_property(
        self, user_id: uuid.UUID, property_id: uuid.UUID
    ) -> Optional[Holding]:
        stmt = (
            select(Holding)
            .where(Holding.user_id == user_id, Holding.property_id == property_id)
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def reassign_owner(
        self,
        holding_id: uuid.UUID,
        from_user_id: uuid.UUID,
        to_user_id: uuid.UUID,
    ) -> bool:
        """Move a holding to a new owner if it still belongs to `from_user_id`.

        Runs inside the caller's transaction and never commits.
        """
        now = datetime.now(timezone.utc)
        stmt = (
            update(Holding)
            .where(Holding.id == holding_id, Holding.user_id == from_user_id)
            .values(user_id=to_user_id, last_transferred_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1
