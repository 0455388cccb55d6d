import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from core.breaker import breaker
from core.cache import cache
from core.check_permission import CheckRolePermission
from core.event_publish import publish_event
from core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from core.mapper import ORMMapper
from core.settings import settings
from core.validate_enum import validate_enum
from models.enums import (
    ACTIVE_TRANSFER_STATUSES,
    BuyerDecision,
    BuyerResponse,
    TransferStatus,
)
from models.models import TransferRequest
from models.utils import days_held
from policy.transfer_policy import TransferPolicy
from repos.holding_repo import HoldingRepo
from repos.transfer_request_repo import TransferRequestRepo
from repos.user_repo import UserRepo
from schemas.schema import TransferRequestOut

logger = logging.getLogger(__name__)

RECEIVED_STATUSES = (
    TransferStatus.PENDING,
    TransferStatus.ACCEPTED,
    TransferStatus.ADMIN_PENDING,
)


def received_cache_key(buyer_id: uuid.UUID) -> str:
    return f"transfer_requests:received:{buyer_id}"


def holdings_cache_key(user_id: uuid.UUID) -> str:
    return f"holdings:user:{user_id}"


class TransferRequestService:
    def __init__(self, db):
        self.db = db
        self.repo: TransferRequestRepo = TransferRequestRepo(db)
        self.holdings: HoldingRepo = HoldingRepo(db)
        self.users: UserRepo = UserRepo(db)
        self.permission: CheckRolePermission = CheckRolePermission()
        self.policy: TransferPolicy = TransferPolicy()
        self.mapper: ORMMapper = ORMMapper()

    async def _get_or_404(self, request_id: uuid.UUID) -> TransferRequest:
        request = await self.repo.get_request_id(request_id)
        if not request:
            raise NotFoundError("Transfer request not found")
        return request

    def _parse_price(self, sale_price) -> Decimal:
        try:
            price = Decimal(str(sale_price))
        except (InvalidOperation, TypeError):
            raise ValidationError("Sale price must be a number")
        if not price.is_finite() or price <= 0:
            raise ValidationError("Sale price must be greater than zero")
        return price

    async def _publish(self, event_name: str, request: TransferRequest, **extra):
        await publish_event(
            event_name,
            {
                "transfer_request_id": str(request.id),
                "holding_id": str(request.holding_id),
                "seller_id": str(request.seller_id),
                "buyer_id": str(request.buyer_id),
                "status": request.status.value,
                **extra,
            },
        )

    async def _invalidate(self, request: TransferRequest, holdings: bool = False):
        keys = [received_cache_key(request.buyer_id)]
        if holdings:
            keys += [
                holdings_cache_key(request.seller_id),
                holdings_cache_key(request.buyer_id),
            ]
        await cache.delete_cache_keys_async(*keys)

    async def create_request(
        self,
        *,
        seller_id: uuid.UUID,
        buyer_id: uuid.UUID,
        holding_id: uuid.UUID,
        sale_price,
    ) -> TransferRequestOut:
        async def handler():
            price = self._parse_price(sale_price)

            if seller_id == buyer_id:
                raise ValidationError("Cannot send transfer request to yourself")

            holding = await self.holdings.get_holding_id(holding_id)
            if not holding:
                raise NotFoundError("Holding not found")
            if holding.user_id != seller_id:
                raise ValidationError("Holding is not owned by the seller")

            held_for = days_held(holding.purchase_date)
            if held_for < settings.TRANSFER_MIN_HOLDING_DAYS:
                raise ValidationError(
                    f"Holding must be at least {settings.TRANSFER_MIN_HOLDING_DAYS} days "
                    f"old to initiate transfer ({held_for} days held)"
                )

            min_price = (
                Decimal(holding.amount_invested) * settings.TRANSFER_MIN_PRICE_RATIO
            ).quantize(Decimal("0.01"))
            if price < min_price:
                raise ValidationError(
                    f"Minimum sale price is {min_price} "
                    f"({settings.TRANSFER_MIN_PRICE_RATIO:.0%} of investment)"
                )

            buyer = await self.users.get_user_id(buyer_id)
            if not buyer:
                raise NotFoundError("Buyer not found")
            if not buyer.is_active:
                raise ValidationError("Buyer account is not active")

            existing = await self.repo.get_active_for_holding(
                holding_id, ACTIVE_TRANSFER_STATUSES
            )
            if existing:
                raise ConflictError(
                    "There is already an active transfer request for this holding"
                )

            request = await self.repo.create(
                {
                    "seller_id": seller_id,
                    "buyer_id": buyer_id,
                    "holding_id": holding_id,
                    "property_id": holding.property_id,
                    "sale_price": price,
                    "status": TransferStatus.PENDING,
                    "buyer_response": BuyerResponse.PENDING,
                }
            )
            logger.info(
                "Transfer request %s created for holding %s (seller=%s buyer=%s)",
                request.id,
                holding_id,
                seller_id,
                buyer_id,
            )

            await self._invalidate(request)
            await self._publish(
                "transfer_request.created", request, sale_price=str(price)
            )
            return self.mapper.one(request, TransferRequestOut)

        return await breaker.call(handler)

    async def buyer_respond(
        self, *, request_id: uuid.UUID, buyer_id: uuid.UUID, decision
    ) -> TransferRequestOut:
        async def handler():
            choice = validate_enum(decision, BuyerDecision, field="response")
            if choice is None:
                raise ValidationError('Response must be either "accepted" or "declined"')

            request = await self._get_or_404(request_id)
            if request.buyer_id != buyer_id:
                raise AuthorizationError("Not authorized to respond to this request")
            self.policy.ensure_status(
                request.status, TransferStatus.PENDING, "respond to request"
            )

            if choice == BuyerDecision.ACCEPTED:
                target, response = TransferStatus.ADMIN_PENDING, BuyerResponse.ACCEPTED
            else:
                target, response = TransferStatus.REJECTED, BuyerResponse.DECLINED
            self.policy.ensure_transition(request.status, target)

            moved = await self.repo.transition(
                request_id,
                from_statuses=[TransferStatus.PENDING],
                values={
                    "status": target,
                    "buyer_response": response,
                    "buyer_response_at": datetime.now(timezone.utc),
                },
            )
            if not moved:
                raise InvalidStateError("Request has already been responded to")

            updated = await self._get_or_404(request_id)
            logger.info("Buyer %s %s transfer request %s", buyer_id, choice.value, request_id)
            await self._invalidate(updated)
            await self._publish(
                "transfer_request.buyer_responded", updated, response=choice.value
            )
            return self.mapper.one(updated, TransferRequestOut)

        return await breaker.call(handler)

    async def cancel_request(
        self, *, request_id: uuid.UUID, seller_id: uuid.UUID
    ) -> TransferRequestOut:
        async def handler():
            request = await self._get_or_404(request_id)
            if request.seller_id != seller_id:
                raise AuthorizationError("Not authorized to cancel this request")
            self.policy.ensure_transition(request.status, TransferStatus.CANCELLED)

            moved = await self.repo.transition(
                request_id,
                from_statuses=[request.status],
                values={
                    "status": TransferStatus.CANCELLED,
                    "cancelled_at": datetime.now(timezone.utc),
                },
            )
            if not moved:
                raise InvalidStateError("Transfer request changed, please refresh")

            updated = await self._get_or_404(request_id)
            await self._invalidate(updated)
            await self._publish("transfer_request.cancelled", updated)
            return self.mapper.one(updated, TransferRequestOut)

        return await breaker.call(handler)

    async def admin_approve(
        self,
        *,
        request_id: uuid.UUID,
        admin_id: uuid.UUID,
        admin_notes: Optional[str] = None,
    ) -> TransferRequestOut:
        async def handler():
            request = await self._get_or_404(request_id)
            self.policy.ensure_status(
                request.status, TransferStatus.ADMIN_PENDING, "approve"
            )
            now = datetime.now(timezone.utc)

            # approval, ownership change and completion commit together or not at all
            try:
                approved = await self.repo.transition(
                    request_id,
                    from_statuses=[TransferStatus.ADMIN_PENDING],
                    values={
                        "status": TransferStatus.ADMIN_APPROVED,
                        "admin_notes": admin_notes or request.admin_notes or "",
                        "admin_response_at": now,
                        "admin_responded_by_id": admin_id,
                    },
                    commit=False,
                )
                if not approved:
                    raise InvalidStateError(
                        "Cannot approve: transfer request is no longer awaiting admin review"
                    )

                moved = await self.holdings.reassign_owner(
                    request.holding_id,
                    from_user_id=request.seller_id,
                    to_user_id=request.buyer_id,
                )
                if not moved:
                    raise ConflictError(
                        "Holding is no longer owned by the seller; ownership not changed"
                    )

                completed = await self.repo.transition(
                    request_id,
                    from_statuses=[TransferStatus.ADMIN_APPROVED],
                    values={
                        "status": TransferStatus.COMPLETED,
                        "transfer_completed_at": now,
                        "last_error": None,
                    },
                    commit=False,
                )
                if not completed:
                    raise InvalidStateError("Transfer request changed during approval")

                await self.db.commit()
            except InvalidStateError:
                await self.db.rollback()
                raise
            except Exception as e:
                await self.db.rollback()
                logger.error(
                    "Approval of transfer request %s rolled back: %s", request_id, e
                )
                await self.repo.record_error(
                    request_id, TransferStatus.ADMIN_PENDING, f"Approval failed: {e}"
                )
                raise

            updated = await self._get_or_404(request_id)
            logger.info(
                "Transfer request %s approved by %s; holding %s now owned by %s",
                request_id,
                admin_id,
                updated.holding_id,
                updated.buyer_id,
            )
            await self._invalidate(updated, holdings=True)
            await self._publish("transfer_request.approved", updated)
            return self.mapper.one(updated, TransferRequestOut)

        return await breaker.call(handler)

    async def admin_reject(
        self,
        *,
        request_id: uuid.UUID,
        admin_id: uuid.UUID,
        admin_notes: Optional[str] = None,
    ) -> TransferRequestOut:
        async def handler():
            request = await self._get_or_404(request_id)
            self.policy.ensure_status(
                request.status, TransferStatus.ADMIN_PENDING, "reject"
            )

            moved = await self.repo.transition(
                request_id,
                from_statuses=[TransferStatus.ADMIN_PENDING],
                values={
                    "status": TransferStatus.ADMIN_REJECTED,
                    "admin_notes": admin_notes or request.admin_notes or "",
                    "admin_response_at": datetime.now(timezone.utc),
                    "admin_responded_by_id": admin_id,
                },
            )
            if not moved:
                raise InvalidStateError(
                    "Cannot reject: transfer request is no longer awaiting admin review"
                )

            updated = await self._get_or_404(request_id)
            logger.info("Transfer request %s rejected by %s", request_id, admin_id)
            await self._invalidate(updated)
            await self._publish("transfer_request.rejected", updated)
            return self.mapper.one(updated, TransferRequestOut)

        return await breaker.call(handler)

    async def get_request(self, *, request_id: uuid.UUID, current_user) -> TransferRequestOut:
        async def handler():
            request = await self._get_or_404(request_id)
            if current_user.id not in (
                request.seller_id,
                request.buyer_id,
            ) and not self.permission.is_admin(current_user):
                raise AuthorizationError("Not authorized to view this request")
            return self.mapper.one(request, TransferRequestOut)

        return await breaker.call(handler)

    async def list_requests(self, status=None) -> List[TransferRequestOut]:
        async def handler():
            wanted = validate_enum(status, TransferStatus, field="status")
            requests = await self.repo.list_requests(
                statuses=[wanted] if wanted else None
            )
            return self.mapper.many(requests, TransferRequestOut)

        return await breaker.call(handler)

    async def list_received(self, buyer_id: uuid.UUID) -> List[TransferRequestOut]:
        async def handler():
            cache_key = received_cache_key(buyer_id)
            cached = await cache.get_json(cache_key)
            if cached is not None:
                return self.mapper.many(cached, TransferRequestOut)

            requests = await self.repo.list_requests(
                buyer_id=buyer_id, statuses=RECEIVED_STATUSES
            )
            items = self.mapper.many(requests, TransferRequestOut)
            await cache.set_json(cache_key, self.mapper.dump_many(items), ttl=120)
            return items

        return await breaker.call(handler)

    async def list_sent(self, seller_id: uuid.UUID, status=None) -> List[TransferRequestOut]:
        async def handler():
            wanted = validate_enum(status, TransferStatus, field="status")
            requests = await self.repo.list_requests(
                seller_id=seller_id, statuses=[wanted] if wanted else None
            )
            return self.mapper.many(requests, TransferRequestOut)

        return await breaker.call(handler)
