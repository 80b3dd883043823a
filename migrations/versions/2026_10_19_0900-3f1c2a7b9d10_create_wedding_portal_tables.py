"""create_wedding_portal_tables

Revision ID: 3f1c2a7b9d10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "3f1c2a7b9d10"
down_revision = None
branch_labels = None
depends_on = None

invite_type_enum = postgresql.ENUM(
    "single", "couple", "plusone", name="invite_type_enum", create_type=False
)
rsvp_status_enum = postgresql.ENUM(
    "pending", "confirmed", "partial", "declined", name="rsvp_status_enum", create_type=False
)
contribution_tier_enum = postgresql.ENUM(
    "none", "half", "full", name="contribution_tier_enum", create_type=False
)
payment_type_enum = postgresql.ENUM(
    "accommodation", "atitlan", name="payment_type_enum", create_type=False
)
admin_role_enum = postgresql.ENUM(
    "admin", "wedding_planner", name="admin_role_enum", create_type=False
)

ENUMS = (
    invite_type_enum,
    rsvp_status_enum,
    contribution_tier_enum,
    payment_type_enum,
    admin_role_enum,
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    for enum in ENUMS:
        enum.create(bind, checkfirst=True)

    op.create_table(
        "accommodation_groups",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("group_code", sa.String(length=100), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("per_night_cost", sa.Numeric(10, 2), nullable=False),
        sa.Column("number_of_nights", sa.Integer(), nullable=False),
        sa.Column("payment_options", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_accommodation_groups_group_code"),
        "accommodation_groups",
        ["group_code"],
        unique=True,
    )

    op.create_table(
        "admin_users",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("role", admin_role_enum, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_admin_users_email"), "admin_users", ["email"], unique=True)

    op.create_table(
        "invites",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("invite_code", sa.String(length=100), nullable=False),
        sa.Column("invite_type", invite_type_enum, nullable=False),
        sa.Column("accommodation_group", sa.String(length=100), nullable=True),
        sa.Column("invited_to_atitlan", sa.Boolean(), nullable=False),
        sa.Column("rsvp_status", rsvp_status_enum, nullable=False, server_default="pending"),
        sa.Column("rsvp_submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("invite_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_invites_invite_code"), "invites", ["invite_code"], unique=True)
    op.create_index(
        op.f("ix_invites_accommodation_group"), "invites", ["accommodation_group"], unique=False
    )

    op.create_table(
        "guests",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("invite_id", sa.UUID(), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("user_id", sa.UUID(), nullable=True),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["invite_id"], ["invites.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("invite_id", "first_name", "last_name", "email", "user_id"):
        op.create_index(op.f(f"ix_guests_{column}"), "guests", [column], unique=False)

    op.create_table(
        "rsvp_responses",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("guest_id", sa.UUID(), nullable=False),
        sa.Column("attending", sa.Boolean(), nullable=False),
        sa.Column(
            "dietary_restrictions",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("dietary_notes", sa.Text(), nullable=True),
        sa.Column("accommodation_needed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("accommodation_payment_level", contribution_tier_enum, nullable=True),
        sa.Column("atitlan_attending", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("atitlan_payment_level", contribution_tier_enum, nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_rsvp_responses_guest_id"), "rsvp_responses", ["guest_id"], unique=True
    )

    op.create_table(
        "travel_details",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("guest_id", sa.UUID(), nullable=False),
        sa.Column("arrival_date", sa.Date(), nullable=True),
        sa.Column("arrival_time", sa.Time(), nullable=True),
        sa.Column("arrival_airline", sa.String(length=255), nullable=True),
        sa.Column("arrival_flight_number", sa.String(length=50), nullable=True),
        sa.Column("departure_date", sa.Date(), nullable=True),
        sa.Column("departure_time", sa.Time(), nullable=True),
        sa.Column("departure_airline", sa.String(length=255), nullable=True),
        sa.Column("departure_flight_number", sa.String(length=50), nullable=True),
        sa.Column("needs_transfer", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_travel_details_guest_id"), "travel_details", ["guest_id"], unique=True
    )

    op.create_table(
        "payments",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("invite_id", sa.UUID(), nullable=False),
        sa.Column("payment_type", payment_type_enum, nullable=False),
        sa.Column("amount_committed", sa.Numeric(10, 2), nullable=False),
        sa.Column("amount_paid", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("payment_method", sa.String(length=100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["invite_id"], ["invites.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_payments_invite_id"), "payments", ["invite_id"], unique=False)


def downgrade() -> None:
    op.drop_table("payments")
    op.drop_table("travel_details")
    op.drop_table("rsvp_responses")
    op.drop_table("guests")
    op.drop_table("invites")
    op.drop_table("admin_users")
    op.drop_table("accommodation_groups")

    bind = op.get_bind()
    for enum in reversed(ENUMS):
        enum.drop(bind, checkfirst=True)
