import logging
import uuid
from typing import Iterable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload

from core.exceptions import ConflictError
from models.enums import TransferStatus
from models.models import TransferRequest

logger = logging.getLogger(__name__)

ACTIVE_HOLDING_INDEX_MARKERS = (
    "uq_transfer_requests_active_holding",
    "transfer_requests.holding_id",
)


class TransferRequestRepo:
    def __init__(self, db):
        self.db = db

    def _with_relations(self, stmt):
        return stmt.options(
            selectinload(TransferRequest.seller),
            selectinload(TransferRequest.buyer),
            selectinload(TransferRequest.property),
            selectinload(TransferRequest.holding),
        )

    async def create(self, data: dict) -> TransferRequest:
        item = TransferRequest(**data)
        self.db.add(item)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if any(marker in str(e.orig) for marker in ACTIVE_HOLDING_INDEX_MARKERS):
                raise ConflictError(
                    "There is already an active transfer request for this holding"
                )
            raise
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return await self.get_request_id(item.id)

    async def get_request_id(self, request_id: uuid.UUID) -> Optional[TransferRequest]:
        stmt = self._with_relations(
            select(TransferRequest).where(TransferRequest.id == request_id)
        ).execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active_for_holding(
        self, holding_id: uuid.UUID, active_statuses: Iterable[TransferStatus]
    ) -> Optional[TransferRequest]:
        stmt = select(TransferRequest).where(
            TransferRequest.holding_id == holding_id,
            TransferRequest.status.in_(list(active_statuses)),
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_requests(
        self,
        *,
        statuses: Optional[Iterable[TransferStatus]] = None,
        buyer_id: Optional[uuid.UUID] = None,
        seller_id: Optional[uuid.UUID] = None,
        holding_id: Optional[uuid.UUID] = None,
    ) -> List[TransferRequest]:
        stmt = self._with_relations(select(TransferRequest))
        if statuses is not None:
            stmt = stmt.where(TransferRequest.status.in_(list(statuses)))
        if buyer_id is not None:
            stmt = stmt.where(TransferRequest.buyer_id == buyer_id)
        if seller_id is not None:
            stmt = stmt.where(TransferRequest.seller_id == seller_id)
        if holding_id is not None:
            stmt = stmt.where(TransferRequest.holding_id == holding_id)
        stmt = stmt.order_by(TransferRequest.created_at.desc())

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def transition(
        self,
        request_id: uuid.UUID,
        *,
        from_statuses: Iterable[TransferStatus],
        values: dict,
        commit: bool = True,
    ) -> bool:
        """Compare-and-swap status update.

        Only rows whose current status is in `from_statuses` are touched, so a
        concurrent writer that got there first makes this return False.
        """
        stmt = (
            update(TransferRequest)
            .where(
                TransferRequest.id == request_id,
                TransferRequest.status.in_(list(from_statuses)),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(stmt)
            if commit:
                await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return result.rowcount == 1

    async def record_error(
        self, request_id: uuid.UUID, expected_status: TransferStatus, error: str
    ) -> None:
        stmt = (
            update(TransferRequest)
            .where(
                TransferRequest.id == request_id,
                TransferRequest.status == expected_status,
            )
            .values(last_error=error[:1000])
            .execution_options(synchronize_session=False)
        )
        try:
            await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Could not record error on transfer request %s", request_id)
