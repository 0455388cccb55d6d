from core.exceptions import InvalidStateError
from models.enums import TERMINAL_TRANSFER_STATUSES, TransferStatus

TRANSFER_TRANSITIONS: dict[TransferStatus, frozenset[TransferStatus]] = {
    TransferStatus.PENDING: frozenset(
        {
            TransferStatus.ADMIN_PENDING,
            TransferStatus.REJECTED,
            TransferStatus.CANCELLED,
        }
    ),
    # never written here; older rows in this state may still proceed
    TransferStatus.ACCEPTED: frozenset(
        {TransferStatus.ADMIN_PENDING, TransferStatus.CANCELLED}
    ),
    TransferStatus.ADMIN_PENDING: frozenset(
        {
            TransferStatus.ADMIN_APPROVED,
            TransferStatus.ADMIN_REJECTED,
            TransferStatus.CANCELLED,
        }
    ),
    TransferStatus.ADMIN_APPROVED: frozenset({TransferStatus.COMPLETED}),
    TransferStatus.COMPLETED: frozenset(),
    TransferStatus.REJECTED: frozenset(),
    TransferStatus.ADMIN_REJECTED: frozenset(),
    TransferStatus.CANCELLED: frozenset(),
}


class TransferPolicy:
    @staticmethod
    def is_terminal(status: TransferStatus) -> bool:
        return status in TERMINAL_TRANSFER_STATUSES

    @staticmethod
    def can_transition(current: TransferStatus, target: TransferStatus) -> bool:
        return target in TRANSFER_TRANSITIONS.get(current, frozenset())

    @classmethod
    def ensure_transition(cls, current: TransferStatus, target: TransferStatus):
        if not cls.can_transition(current, target):
            raise InvalidStateError(
                f"Cannot move transfer request from '{current.value}' to '{target.value}'"
            )

    @staticmethod
    def ensure_status(current: TransferStatus, expected: TransferStatus, action: str):
        if current != expected:
            raise InvalidStateError(
                f"Cannot {action}: transfer request is '{current.value}', "
                f"expected '{expected.value}'"
            )
