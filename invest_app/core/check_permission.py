from fastapi import HTTPException

from models.enums import UserRole

from .exceptions import AuthorizationError


class CheckRolePermission:
    async def check_admin(self, current_user):
        if current_user.role != UserRole.ADMIN:
            raise HTTPException(status_code=403, detail="Admin access required.")

    def is_admin(self, current_user) -> bool:
        return current_user.role == UserRole.ADMIN

    def check_owner_or_admin(self, current_user, owner_id, message: str):
        if current_user.id != owner_id and not self.is_admin(current_user):
            raise AuthorizationError(message)
