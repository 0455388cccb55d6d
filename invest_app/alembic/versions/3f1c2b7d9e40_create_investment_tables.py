"""create investment tables

Revision ID: 3f1c2b7d9e40
Revises:
Create Date: 2026-10-18 09:12:41.208113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2b7d9e40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ACTIVE_TRANSFER_SQL = "status IN ('accepted', 'admin_approved', 'admin_pending', 'pending')"


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "properties",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("property_type", sa.String(length=50), nullable=True),
        sa.Column("created_by_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "holdings",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("property_id", sa.Uuid(), nullable=False),
        sa.Column("amount_invested", sa.Numeric(14, 2), nullable=False),
        sa.Column("monthly_earning", sa.Numeric(14, 2), nullable=False),
        sa.Column("total_earnings_received", sa.Numeric(14, 2), nullable=False),
        sa.Column("lock_in_months", sa.Integer(), nullable=False),
        sa.Column("purchase_date", sa.Date(), nullable=False),
        sa.Column("maturity_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("last_transferred_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("amount_invested > 0", name="ck_holding_amount_positive"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_holdings_user_id", "holdings", ["user_id"])
    op.create_index("ix_holdings_property_id", "holdings", ["property_id"])

    op.create_table(
        "transfer_requests",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("seller_id", sa.Uuid(), nullable=False),
        sa.Column("buyer_id", sa.Uuid(), nullable=False),
        sa.Column("holding_id", sa.Uuid(), nullable=False),
        sa.Column("property_id", sa.Uuid(), nullable=False),
        sa.Column("sale_price", sa.Numeric(14, 2), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("buyer_response", sa.String(length=20), nullable=False),
        sa.Column("admin_notes", sa.Text(), nullable=False),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("admin_responded_by_id", sa.Uuid(), nullable=True),
        sa.Column("buyer_response_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("admin_response_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("transfer_completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("sale_price > 0", name="ck_transfer_sale_price_positive"),
        sa.CheckConstraint("seller_id <> buyer_id", name="ck_transfer_distinct_parties"),
        sa.ForeignKeyConstraint(["seller_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["buyer_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["holding_id"], ["holdings.id"]),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"]),
        sa.ForeignKeyConstraint(["admin_responded_by_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_transfer_requests_seller_id", "transfer_requests", ["seller_id"])
    op.create_index("ix_transfer_requests_buyer_id", "transfer_requests", ["buyer_id"])
    op.create_index("ix_transfer_requests_holding_id", "transfer_requests", ["holding_id"])
    op.create_index("ix_transfer_requests_status", "transfer_requests", ["status"])
    op.create_index(
        "ix_transfer_requests_seller_status", "transfer_requests", ["seller_id", "status"]
    )
    op.create_index(
        "ix_transfer_requests_buyer_status", "transfer_requests", ["buyer_id", "status"]
    )
    op.create_index(
        "uq_transfer_requests_active_holding",
        "transfer_requests",
        ["holding_id"],
        unique=True,
        sqlite_where=sa.text(ACTIVE_TRANSFER_SQL),
        postgresql_where=sa.text(ACTIVE_TRANSFER_SQL),
    )

    op.create_table(
        "contact_owner_messages",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("holding_id", sa.Uuid(), nullable=False),
        sa.Column("property_id", sa.Uuid(), nullable=False),
        sa.Column("subject", sa.String(length=200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("contact_preference", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("admin_response_message", sa.Text(), nullable=True),
        sa.Column("admin_responded_by_id", sa.Uuid(), nullable=True),
        sa.Column("admin_responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["holding_id"], ["holdings.id"]),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"]),
        sa.ForeignKeyConstraint(["admin_responded_by_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_contact_owner_messages_property_id", "contact_owner_messages", ["property_id"]
    )
    op.create_index("ix_contact_owner_messages_status", "contact_owner_messages", ["status"])
    op.create_index(
        "ix_contact_owner_messages_user_created",
        "contact_owner_messages",
        ["user_id", "created_at"],
    )


def downgrade():
    op.drop_table("contact_owner_messages")
    op.drop_index("uq_transfer_requests_active_holding", table_name="transfer_requests")
    op.drop_table("transfer_requests")
    op.drop_table("holdings")
    op.drop_table("properties")
    op.drop_table("users")
