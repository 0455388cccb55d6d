from enum import Enum


class UserRole(str, Enum):
    INVESTOR = "investor"
    ADMIN = "admin"


class HoldingStatus(str, Enum):
    ACTIVE = "active"
    MATURED = "matured"
    TRANSFERRED = "transferred"


class TransferStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    ADMIN_PENDING = "admin_pending"
    ADMIN_APPROVED = "admin_approved"
    ADMIN_REJECTED = "admin_rejected"
    COMPLETED = "completed"


class BuyerResponse(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class BuyerDecision(str, Enum):
    ACCEPTED = "accepted"
    DECLINED = "declined"


class ContactMessageStatus(str, Enum):
    PENDING = "pending"
    READ = "read"
    REPLIED = "replied"
    RESOLVED = "resolved"
    CLOSED = "closed"


class ContactPreference(str, Enum):
    EMAIL = "email"
    PHONE = "phone"


TERMINAL_TRANSFER_STATUSES = frozenset(
    {
        TransferStatus.COMPLETED,
        TransferStatus.REJECTED,
        TransferStatus.ADMIN_REJECTED,
        TransferStatus.CANCELLED,
    }
)

ACTIVE_TRANSFER_STATUSES = frozenset(
    status for status in TransferStatus if status not in TERMINAL_TRANSFER_STATUSES
)
