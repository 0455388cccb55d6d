import uuid
from typing import List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from models.enums import ContactMessageStatus
from models.models import ContactOwnerMessage


class ContactOwnerRepo:
    def __init__(self, db):
        self.db = db

    def _with_relations(self, stmt):
        return stmt.options(
            selectinload(ContactOwnerMessage.user),
            selectinload(ContactOwnerMessage.property),
            selectinload(ContactOwnerMessage.holding),
        )

    def _filtered(
        self,
        stmt,
        user_id: Optional[uuid.UUID],
        status: Optional[ContactMessageStatus],
        property_id: Optional[uuid.UUID],
    ):
        if user_id is not None:
            stmt = stmt.where(ContactOwnerMessage.user_id == user_id)
        if status is not None:
            stmt = stmt.where(ContactOwnerMessage.status == status)
        if property_id is not None:
            stmt = stmt.where(ContactOwnerMessage.property_id == property_id)
        return stmt

    async def create(self, data: dict) -> ContactOwnerMessage:
        item = ContactOwnerMessage(**data)
        self.db.add(item)
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return await self.get_message_id(item.id)

    async def get_message_id(self, message_id: uuid.UUID) -> Optional[ContactOwnerMessage]:
        stmt = self._with_relations(
            select(ContactOwnerMessage).where(ContactOwnerMessage.id == message_id)
        ).execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_messages(
        self,
        *,
        user_id: Optional[uuid.UUID] = None,
        status: Optional[ContactMessageStatus] = None,
        property_id: Optional[uuid.UUID] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[List[ContactOwnerMessage], int]:
        stmt = self._filtered(
            self._with_relations(select(ContactOwnerMessage)),
            user_id,
            status,
            property_id,
        )
        stmt = (
            stmt.order_by(ContactOwnerMessage.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        items = list(result.scalars().all())

        count_stmt = self._filtered(
            select(func.count(ContactOwnerMessage.id)), user_id, status, property_id
        )
        total = (await self.db.execute(count_stmt)).scalar_one()
        return items, total

    async def status_counts(self) -> dict[str, int]:
        stmt = select(ContactOwnerMessage.status, func.count(ContactOwnerMessage.id)).group_by(
            ContactOwnerMessage.status
        )
        result = await self.db.execute(stmt)
        return {status.value: count for status, count in result.all()}

    async def update_message(
        self,
        message_id: uuid.UUID,
        values: dict,
        expected_status: Optional[ContactMessageStatus] = None,
    ) -> bool:
        stmt = update(ContactOwnerMessage).where(ContactOwnerMessage.id == message_id)
        if expected_status is not None:
            stmt = stmt.where(ContactOwnerMessage.status == expected_status)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return result.rowcount == 1
