from fastapi import Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.models import User

from .check_permission import CheckRolePermission
from .get_db import get_db_async
from .validators import jwt_protect


async def get_current_user(
    request: Request,
    user_id=Depends(jwt_protect),
    db: AsyncSession = Depends(get_db_async),
) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalars().first()

    if not user:
        raise HTTPException(status_code=401, detail="Not Authenticated")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is deactivated")

    request.state.user = user
    return user


async def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    await CheckRolePermission().check_admin(current_user)
    return current_user
