import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from core.breaker import breaker
from core.event_publish import publish_event
from core.exceptions import (
    AuthorizationError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from core.mapper import ORMMapper
from core.paginate import PaginatePage
from core.settings import settings
from core.validate_enum import validate_enum
from models.enums import ContactMessageStatus, ContactPreference
from models.models import ContactOwnerMessage
from policy.contact_message_policy import ContactMessagePolicy
from repos.contact_owner_repo import ContactOwnerRepo
from repos.holding_repo import HoldingRepo
from repos.user_repo import UserRepo
from schemas.schema import (
    ContactOwnerListResponse,
    ContactOwnerMessageOut,
    OwnerInfoOut,
    PaginatedResponse,
)

logger = logging.getLogger(__name__)


class ContactOwnerService:
    def __init__(self, db):
        self.repo: ContactOwnerRepo = ContactOwnerRepo(db)
        self.holdings: HoldingRepo = HoldingRepo(db)
        self.users: UserRepo = UserRepo(db)
        self.policy: ContactMessagePolicy = ContactMessagePolicy()
        self.paginate: PaginatePage = PaginatePage()
        self.mapper: ORMMapper = ORMMapper()

    async def _get_or_404(self, message_id: uuid.UUID) -> ContactOwnerMessage:
        message = await self.repo.get_message_id(message_id)
        if not message:
            raise NotFoundError("Message not found")
        return message

    def _admin_status(self, status) -> ContactMessageStatus:
        target = validate_enum(status, ContactMessageStatus, field="status")
        if target is None:
            raise ValidationError("Status is required")
        if target == ContactMessageStatus.PENDING:
            raise ValidationError("Messages cannot be moved back to 'pending'")
        return target

    async def create_message(
        self,
        *,
        user_id: uuid.UUID,
        holding_id: uuid.UUID,
        subject: str,
        message: str,
        contact_preference: ContactPreference = ContactPreference.EMAIL,
    ) -> ContactOwnerMessageOut:
        async def handler():
            clean_subject = (subject or "").strip()
            clean_message = (message or "").strip()
            if not clean_subject:
                raise ValidationError("Subject is required")
            if len(clean_message) < settings.CONTACT_MESSAGE_MIN_LENGTH:
                raise ValidationError(
                    f"Message must be at least {settings.CONTACT_MESSAGE_MIN_LENGTH} characters"
                )

            holding = await self.holdings.get_holding_id(holding_id)
            if not holding:
                raise NotFoundError("Holding not found")
            if holding.user_id != user_id:
                raise AuthorizationError("Not authorized to access this holding")

            created = await self.repo.create(
                {
                    "user_id": user_id,
                    "holding_id": holding_id,
                    "property_id": holding.property_id,
                    "subject": clean_subject,
                    "message": clean_message,
                    "contact_preference": contact_preference,
                    "status": ContactMessageStatus.PENDING,
                }
            )
            logger.info(
                "Contact-owner message %s created by %s for holding %s",
                created.id,
                user_id,
                holding_id,
            )

            await publish_event(
                "contact_owner.created",
                {
                    "message_id": str(created.id),
                    "user_id": str(user_id),
                    "holding_id": str(holding_id),
                    "property_id": str(holding.property_id),
                    "subject": created.subject,
                    "contact_preference": created.contact_preference.value,
                },
            )
            return self.mapper.one(created, ContactOwnerMessageOut)

        return await breaker.call(handler)

    async def mark_read(self, message_id: uuid.UUID) -> ContactOwnerMessageOut:
        async def handler():
            message = await self._get_or_404(message_id)
            if message.status == ContactMessageStatus.PENDING:
                # another admin may have moved it on already, which is fine
                await self.repo.update_message(
                    message_id,
                    {"status": ContactMessageStatus.READ},
                    expected_status=ContactMessageStatus.PENDING,
                )
                message = await self._get_or_404(message_id)
            return self.mapper.one(message, ContactOwnerMessageOut)

        return await breaker.call(handler)

    async def respond(
        self,
        *,
        message_id: uuid.UUID,
        admin_id: uuid.UUID,
        response_text: str,
        new_status=ContactMessageStatus.REPLIED,
        admin_notes: Optional[str] = None,
    ) -> ContactOwnerMessageOut:
        async def handler():
            target = self._admin_status(new_status)
            text = (response_text or "").strip()

            message = await self._get_or_404(message_id)
            if message.status == ContactMessageStatus.CLOSED:
                raise InvalidStateError("Cannot respond to a closed message")
            self.policy.ensure_transition(message.status, target)

            values = {
                "admin_response_message": text or message.admin_response_message,
                "admin_responded_by_id": admin_id,
                "admin_responded_at": datetime.now(timezone.utc),
                "status": target,
            }
            if admin_notes:
                values["admin_notes"] = admin_notes.strip()

            updated = await self.repo.update_message(
                message_id, values, expected_status=message.status
            )
            if not updated:
                raise InvalidStateError("Message changed, please refresh and retry")

            message = await self._get_or_404(message_id)
            logger.info(
                "Admin %s responded to contact-owner message %s (status=%s)",
                admin_id,
                message_id,
                target.value,
            )
            await publish_event(
                "contact_owner.responded",
                {
                    "message_id": str(message_id),
                    "user_id": str(message.user_id),
                    "status": target.value,
                },
            )
            return self.mapper.one(message, ContactOwnerMessageOut)

        return await breaker.call(handler)

    async def update_status(
        self,
        *,
        message_id: uuid.UUID,
        new_status,
        admin_notes: Optional[str] = None,
    ) -> ContactOwnerMessageOut:
        async def handler():
            target = self._admin_status(new_status)
            message = await self._get_or_404(message_id)
            self.policy.ensure_transition(message.status, target)

            values = {"status": target}
            if admin_notes:
                values["admin_notes"] = admin_notes.strip()

            updated = await self.repo.update_message(
                message_id, values, expected_status=message.status
            )
            if not updated:
                raise InvalidStateError("Message changed, please refresh and retry")

            message = await self._get_or_404(message_id)
            return self.mapper.one(message, ContactOwnerMessageOut)

        return await breaker.call(handler)

    async def get_for_user(
        self, *, message_id: uuid.UUID, user_id: uuid.UUID
    ) -> ContactOwnerMessageOut:
        async def handler():
            message = await self._get_or_404(message_id)
            if message.user_id != user_id:
                raise AuthorizationError("Not authorized to access this message")
            return self.mapper.one(message, ContactOwnerMessageOut)

        return await breaker.call(handler)

    async def get_for_admin(self, message_id: uuid.UUID) -> ContactOwnerMessageOut:
        async def handler():
            message = await self._get_or_404(message_id)
            return self.mapper.one(message, ContactOwnerMessageOut)

        return await breaker.call(handler)

    async def list_for_user(
        self, *, user_id: uuid.UUID, status=None, page: int = 1, limit: int = 10
    ) -> PaginatedResponse[ContactOwnerMessageOut]:
        async def handler():
            wanted = validate_enum(status, ContactMessageStatus, field="status")
            page_no, per_page = self.paginate.clamp(page, limit)
            items, total = await self.repo.list_messages(
                user_id=user_id,
                status=wanted,
                offset=self.paginate.offset(page_no, per_page),
                limit=per_page,
            )
            return PaginatedResponse[ContactOwnerMessageOut](
                data=self.mapper.many(items, ContactOwnerMessageOut),
                pagination=self.paginate.meta(page_no, per_page, total),
            )

        return await breaker.call(handler)

    async def list_for_admin(
        self,
        *,
        status=None,
        property_id: Optional[uuid.UUID] = None,
        page: int = 1,
        limit: int = 20,
    ) -> ContactOwnerListResponse:
        async def handler():
            wanted = validate_enum(status, ContactMessageStatus, field="status")
            page_no, per_page = self.paginate.clamp(page, limit)
            items, total = await self.repo.list_messages(
                status=wanted,
                property_id=property_id,
                offset=self.paginate.offset(page_no, per_page),
                limit=per_page,
            )
            counts = await self.repo.status_counts()
            return ContactOwnerListResponse(
                data=self.mapper.many(items, ContactOwnerMessageOut),
                pagination=self.paginate.meta(page_no, per_page, total),
                status_counts=counts,
            )

        return await breaker.call(handler)

    async def get_owner_info(
        self, *, property_id: uuid.UUID, user_id: uuid.UUID
    ) -> OwnerInfoOut:
        async def handler():
            holding = await self.holdings.find_for_user_and_property(user_id, property_id)
            if not holding:
                raise AuthorizationError(
                    "You must have a holding for this property to contact the owner"
                )

            prop = await self.users.get_property_with_creator(property_id)
            if not prop:
                raise NotFoundError("Property not found")

            owner = prop.created_by
            return OwnerInfoOut(
                name=owner.name if owner else "Property Owner",
                email=owner.email if owner else settings.DEFAULT_OWNER_EMAIL,
                phone=owner.phone if owner else None,
            )

        return await breaker.call(handler)
