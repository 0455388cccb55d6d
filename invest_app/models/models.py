import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from core.get_db import Base

from .enums import (
    ACTIVE_TRANSFER_STATUSES,
    BuyerResponse,
    ContactMessageStatus,
    ContactPreference,
    HoldingStatus,
    TransferStatus,
    UserRole,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def enum_column(enum_cls, length: int = 20):
    return Enum(
        enum_cls,
        native_enum=False,
        length=length,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


ACTIVE_TRANSFER_SQL = "status IN ({})".format(
    ", ".join(f"'{s.value}'" for s in sorted(ACTIVE_TRANSFER_STATUSES, key=lambda s: s.value))
)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        enum_column(UserRole), nullable=False, default=UserRole.INVESTOR
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    holdings: Mapped[List["Holding"]] = relationship(
        "Holding", back_populates="owner", foreign_keys="Holding.user_id"
    )
    properties_created: Mapped[List["Property"]] = relationship(
        "Property", back_populates="created_by", foreign_keys="Property.created_by_id"
    )
    transfers_sold: Mapped[List["TransferRequest"]] = relationship(
        "TransferRequest",
        back_populates="seller",
        foreign_keys="TransferRequest.seller_id",
    )
    transfers_bought: Mapped[List["TransferRequest"]] = relationship(
        "TransferRequest",
        back_populates="buyer",
        foreign_keys="TransferRequest.buyer_id",
    )
    contact_messages: Mapped[List["ContactOwnerMessage"]] = relationship(
        "ContactOwnerMessage",
        back_populates="user",
        foreign_keys="ContactOwnerMessage.user_id",
    )

    @validates("email")
    def normalize_email(self, key, value: str) -> str:
        return value.strip().lower()


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    property_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    created_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    created_by: Mapped[Optional["User"]] = relationship(
        "User", back_populates="properties_created", foreign_keys=[created_by_id]
    )
    holdings: Mapped[List["Holding"]] = relationship(
        "Holding", back_populates="property"
    )


class Holding(Base):
    __tablename__ = "holdings"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        index=True,
        nullable=False,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="RESTRICT"),
        index=True,
        nullable=False,
    )
    amount_invested: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    monthly_earning: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )
    total_earnings_received: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )
    lock_in_months: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    purchase_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    maturity_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[HoldingStatus] = mapped_column(
        enum_column(HoldingStatus), nullable=False, default=HoldingStatus.ACTIVE
    )
    last_transferred_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    owner: Mapped["User"] = relationship(
        "User", back_populates="holdings", foreign_keys=[user_id]
    )
    property: Mapped["Property"] = relationship("Property", back_populates="holdings")
    transfer_requests: Mapped[List["TransferRequest"]] = relationship(
        "TransferRequest", back_populates="holding"
    )

    __table_args__ = (
        CheckConstraint("amount_invested > 0", name="ck_holding_amount_positive"),
    )


class TransferRequest(Base):
    __tablename__ = "transfer_requests"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    seller_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id"), index=True, nullable=False
    )
    buyer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id"), index=True, nullable=False
    )
    holding_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("holdings.id"), index=True, nullable=False
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("properties.id"), nullable=False
    )
    sale_price: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    status: Mapped[TransferStatus] = mapped_column(
        enum_column(TransferStatus),
        nullable=False,
        default=TransferStatus.PENDING,
        index=True,
    )
    buyer_response: Mapped[BuyerResponse] = mapped_column(
        enum_column(BuyerResponse), nullable=False, default=BuyerResponse.PENDING
    )
    admin_notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    last_error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    admin_responded_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True
    )

    buyer_response_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    admin_response_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    transfer_completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    seller: Mapped["User"] = relationship(
        "User", back_populates="transfers_sold", foreign_keys=[seller_id]
    )
    buyer: Mapped["User"] = relationship(
        "User", back_populates="transfers_bought", foreign_keys=[buyer_id]
    )
    holding: Mapped["Holding"] = relationship(
        "Holding", back_populates="transfer_requests"
    )
    property: Mapped["Property"] = relationship("Property")

    __table_args__ = (
        CheckConstraint("sale_price > 0", name="ck_transfer_sale_price_positive"),
        CheckConstraint("seller_id <> buyer_id", name="ck_transfer_distinct_parties"),
        Index("ix_transfer_requests_seller_status", "seller_id", "status"),
        Index("ix_transfer_requests_buyer_status", "buyer_id", "status"),
        Index(
            "uq_transfer_requests_active_holding",
            "holding_id",
            unique=True,
            sqlite_where=text(ACTIVE_TRANSFER_SQL),
            postgresql_where=text(ACTIVE_TRANSFER_SQL),
        ),
    )


class ContactOwnerMessage(Base):
    __tablename__ = "contact_owner_messages"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False
    )
    holding_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("holdings.id"), nullable=False
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("properties.id"), index=True, nullable=False
    )
    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    contact_preference: Mapped[ContactPreference] = mapped_column(
        enum_column(ContactPreference),
        nullable=False,
        default=ContactPreference.EMAIL,
    )
    status: Mapped[ContactMessageStatus] = mapped_column(
        enum_column(ContactMessageStatus),
        nullable=False,
        default=ContactMessageStatus.PENDING,
        index=True,
    )
    admin_response_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    admin_responded_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True
    )
    admin_responded_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    admin_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    @property
    def admin_response(self) -> Optional[dict]:
        if self.admin_responded_at is None and self.admin_response_message is None:
            return None
        return {
            "message": self.admin_response_message,
            "responded_by": self.admin_responded_by_id,
            "responded_at": self.admin_responded_at,
        }

    user: Mapped["User"] = relationship(
        "User", back_populates="contact_messages", foreign_keys=[user_id]
    )
    responded_by: Mapped[Optional["User"]] = relationship(
        "User", foreign_keys=[admin_responded_by_id]
    )
    holding: Mapped["Holding"] = relationship("Holding")
    property: Mapped["Property"] = relationship("Property")

    __table_args__ = (
        Index("ix_contact_owner_messages_user_created", "user_id", "created_at"),
    )
