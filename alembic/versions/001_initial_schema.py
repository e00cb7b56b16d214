"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates the dispatch desk tables:
- Bookings
- Booking status history (append-only)
- Message logs
"""

from typing import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

BOOKING_STATUSES = (
    "'pending', 'confirmed', 'in_progress', 'delivered', 'not_accepted', 'cancelled'"
)


def upgrade() -> None:
    """Create all database tables."""

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("tracking_id", sa.String(20), unique=True, nullable=False, index=True),
        sa.Column("sender_name", sa.String(200), nullable=False),
        sa.Column("sender_phone", sa.String(30), nullable=False, index=True),
        sa.Column("sender_whatsapp", sa.String(30)),
        sa.Column("receiver_name", sa.String(200), nullable=False),
        sa.Column("receiver_phone", sa.String(30), nullable=False),
        sa.Column("receiver_whatsapp", sa.String(30)),
        sa.Column("pickup_address", sa.Text, nullable=False),
        sa.Column("pickup_landmark", sa.Text),
        sa.Column("dropoff_address", sa.Text, nullable=False),
        sa.Column("dropoff_landmark", sa.Text),
        sa.Column("item_category_id", sa.String(50)),
        sa.Column("item_notes", sa.Text),
        sa.Column("price_base", sa.Numeric(12, 2), nullable=False),
        sa.Column("price_addons", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("price_total", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending", index=True),
        sa.Column("version", sa.Integer, nullable=False, server_default="0"),
        sa.Column("rider_name", sa.String(200)),
        sa.Column("rider_phone", sa.String(30)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint(f"status IN ({BOOKING_STATUSES})", name="check_booking_status"),
        sa.CheckConstraint(
            "price_total = price_base + price_addons", name="check_booking_price_total"
        ),
    )

    # ==================== STATUS HISTORY ====================
    op.create_table(
        "booking_status_history",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("bookings.id"), nullable=False, index=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("note", sa.Text, nullable=False),
        sa.Column("created_by", sa.String(100), nullable=False),
        sa.Column("version", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, index=True),
        sa.CheckConstraint(f"status IN ({BOOKING_STATUSES})", name="check_history_status"),
        sa.UniqueConstraint("booking_id", "version", name="uq_history_booking_version"),
    )

    # ==================== MESSAGE LOGS ====================
    op.create_table(
        "message_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("message_type", sa.String(20), nullable=False),
        sa.Column("recipient", sa.String(100), nullable=False),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("bookings.id"), index=True),
        sa.Column("template_code", sa.String(50)),
        sa.Column("subject", sa.String(200)),
        sa.Column("body", sa.Text, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending", index=True),
        sa.Column("triggered_by", sa.String(100)),
        sa.Column("cost", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    """Drop all database tables in reverse order."""
    op.drop_table("message_logs")
    op.drop_table("booking_status_history")
    op.drop_table("bookings")
