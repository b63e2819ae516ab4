"""Initial scheduling schema.

Revision ID: 0001
Revises:
Create Date: 2024-05-20
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "modified_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    court_status_enum = sa.Enum("open", "closed", "maintenance", name="courtstatus")
    op.create_table(
        "courts",
        sa.Column("court_number", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("court_name", sa.String(length=64), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", court_status_enum, nullable=False, server_default="open"),
        *_timestamps(),
    )

    reservation_type_enum = sa.Enum(
        "open",
        "contractor",
        "team_usta",
        "team_hs",
        "team_college",
        "team_other",
        "tournament",
        "maintenance",
        "hold",
        name="reservationtype",
    )
    payment_status_enum = sa.Enum(
        "pending", "paid", "waived", "invoiced", "refunded", "na", name="paymentstatus"
    )
    payment_method_enum = sa.Enum(
        "pos", "cash", "check", "invoice", "card", "na", name="paymentmethod"
    )
    reservation_status_enum = sa.Enum(
        "active", "cancelled", "no_show", "completed", name="reservationstatus"
    )
    cancel_reason_enum = sa.Enum(
        "customer", "weather", "facility", "no_show", "other", name="cancelreason"
    )
    refund_status_enum = sa.Enum(
        "none", "partial", "full", "credit", "na", name="refundstatus"
    )

    op.create_table(
        "reservations",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("booking_id", sa.String(length=9), nullable=False),
        sa.Column("group_id", sa.String(length=16)),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("court", sa.Integer(), nullable=False),
        sa.Column("time_start", sa.String(length=5), nullable=False),
        sa.Column("time_end", sa.String(length=5), nullable=False),
        sa.Column("booking_type", reservation_type_enum, nullable=False),
        sa.Column("entity_id", sa.String(length=64)),
        sa.Column("customer_name", sa.String(length=255)),
        sa.Column("customer_phone", sa.String(length=32)),
        sa.Column("payment_status", payment_status_enum, nullable=False),
        sa.Column("payment_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_method", payment_method_enum),
        sa.Column("notes", sa.String(length=1024)),
        sa.Column("participant_count", sa.Integer()),
        sa.Column("is_youth", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("status", reservation_status_enum, nullable=False),
        sa.Column("created_by", sa.String(length=64)),
        sa.Column("checked_in", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("checked_in_by", sa.String(length=64)),
        sa.Column("checked_in_at", sa.DateTime(timezone=True)),
        sa.Column("cancel_reason", cancel_reason_enum),
        sa.Column("cancelled_by", sa.String(length=64)),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.Column("refund_status", refund_status_enum),
        sa.Column("refund_amount", sa.Numeric(10, 2)),
        sa.Column("refund_note", sa.String(length=1024)),
        *_timestamps(),
    )
    op.create_index("ix_reservations_booking_id", "reservations", ["booking_id"])
    op.create_index("ix_reservations_group_id", "reservations", ["group_id"])
    op.create_index("ix_reservations_date_court", "reservations", ["date", "court"])

    op.create_table(
        "court_closures",
        sa.Column("closure_id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("court", sa.String(length=8), nullable=False, server_default="all"),
        sa.Column("time_start", sa.String(length=5)),
        sa.Column("time_end", sa.String(length=5)),
        sa.Column("reason", sa.String(length=255)),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_court_closures_date", "court_closures", ["date"])

    op.create_table(
        "teams",
        sa.Column("team_id", sa.String(length=64), primary_key=True),
        sa.Column("team_name", sa.String(length=255), nullable=False),
        sa.Column("team_type", sa.String(length=32), nullable=False),
        sa.Column("court_rate", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("contact_name", sa.String(length=255)),
        sa.Column("contact_phone", sa.String(length=32)),
        sa.Column("season_start", sa.Date()),
        sa.Column("season_end", sa.Date()),
        *_timestamps(),
    )
    op.create_table(
        "contractors",
        sa.Column("contractor_id", sa.String(length=64), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32)),
        sa.Column("court_rate", sa.Numeric(10, 2), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_table(
        "tournaments",
        sa.Column("tournament_id", sa.String(length=64), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("start_date", sa.Date()),
        sa.Column("end_date", sa.Date()),
        sa.Column("default_courts", sa.String(length=128)),
        sa.Column("court_rate", sa.Numeric(10, 2), nullable=False, server_default="0"),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("tournaments")
    op.drop_table("contractors")
    op.drop_table("teams")

    op.drop_index("ix_court_closures_date", table_name="court_closures")
    op.drop_table("court_closures")

    op.drop_index("ix_reservations_date_court", table_name="reservations")
    op.drop_index("ix_reservations_group_id", table_name="reservations")
    op.drop_index("ix_reservations_booking_id", table_name="reservations")
    op.drop_table("reservations")
    for enum_name in (
        "refundstatus",
        "cancelreason",
        "reservationstatus",
        "paymentmethod",
        "paymentstatus",
        "reservationtype",
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)

    op.drop_table("courts")
    sa.Enum(name="courtstatus").drop(op.get_bind(), checkfirst=True)
