from core.exceptions import InvalidStateError
from models.enums import ContactMessageStatus

STATUS_ORDER = {
    ContactMessageStatus.PENDING: 0,
    ContactMessageStatus.READ: 1,
    ContactMessageStatus.REPLIED: 2,
    ContactMessageStatus.RESOLVED: 3,
    ContactMessageStatus.CLOSED: 4,
}

ADMIN_SETTABLE_STATUSES = frozenset(
    {
        ContactMessageStatus.READ,
        ContactMessageStatus.REPLIED,
        ContactMessageStatus.RESOLVED,
        ContactMessageStatus.CLOSED,
    }
)

REOPEN_STATUSES = frozenset(
    {ContactMessageStatus.CLOSED, ContactMessageStatus.RESOLVED}
)


class ContactMessagePolicy:
    """Admin actions may hold or advance a message's status, never rewind it.

    `pending` is only ever the initial state. A `closed` message can only be
    reopened to `resolved`.
    """

    @staticmethod
    def can_transition(
        current: ContactMessageStatus, target: ContactMessageStatus
    ) -> bool:
        if target not in ADMIN_SETTABLE_STATUSES:
            return False
        if current == ContactMessageStatus.CLOSED:
            return target in REOPEN_STATUSES
        return STATUS_ORDER[target] >= STATUS_ORDER[current]

    @classmethod
    def ensure_transition(
        cls, current: ContactMessageStatus, target: ContactMessageStatus
    ):
        if not cls.can_transition(current, target):
            raise InvalidStateError(
                f"Cannot move message from '{current.value}' to '{target.value}'"
            )
