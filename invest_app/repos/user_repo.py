import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from models.models import Property, User


class UserRepo:
    def __init__(self, db):
        self.db = db

    async def get_user_id(self, user_id: uuid.UUID) -> Optional[User]:
        result = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_property_with_creator(self, property_id: uuid.UUID) -> Optional[Property]:
        result = await self.db.execute(
            select(Property)
            .options(selectinload(Property.created_by))
            .where(Property.id == property_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
