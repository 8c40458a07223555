"""initial schema: users, events, wishlist and event guests

Revision ID: 3f1c2a7b9d10
Revises:
Create Date: 2026-10-01 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f1c2a7b9d10"
down_revision = None
branch_labels = None
depends_on = None


def timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("uuid", sa.UUID(), nullable=False),
        *timestamps(),
        sa.Column("phone_number", sa.String(20), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_users_phone_number", "users", ["phone_number"], unique=True)

    op.create_table(
        "events",
        sa.Column("uuid", sa.UUID(), nullable=False),
        *timestamps(),
        sa.Column("host_id", sa.UUID(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("event_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("venue", sa.String(500), nullable=True),
        sa.Column("theme", sa.String(255), nullable=True),
        sa.Column(
            "status",
            sa.Enum("draft", "live", name="event_status_enum"),
            nullable=False,
        ),
        sa.Column("invite_link", sa.String(36), nullable=False),
        sa.ForeignKeyConstraint(["host_id"], ["users.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_events_host_id", "events", ["host_id"])
    op.create_index("ix_events_invite_link", "events", ["invite_link"], unique=True)

    op.create_table(
        "wishlist",
        sa.Column("uuid", sa.UUID(), nullable=False),
        *timestamps(),
        sa.Column("host_id", sa.UUID(), nullable=False),
        sa.Column("event_id", sa.UUID(), nullable=True),
        sa.Column("gift_name", sa.String(255), nullable=False),
        sa.Column("gift_url", sa.Text(), nullable=True),
        sa.Column("gift_image_url", sa.Text(), nullable=True),
        sa.Column("is_claimed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("claimed_by", sa.UUID(), nullable=True),
        sa.Column(
            "claim_status",
            sa.Enum("pending", "confirmed", name="claim_status_enum"),
            nullable=False,
        ),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("released_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["host_id"], ["users.uuid"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["event_id"], ["events.uuid"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["claimed_by"], ["users.uuid"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_wishlist_host_id", "wishlist", ["host_id"])
    op.create_index("ix_wishlist_event_id", "wishlist", ["event_id"])
    op.create_index("ix_wishlist_claimed_by", "wishlist", ["claimed_by"])

    op.create_table(
        "event_guests",
        sa.Column("uuid", sa.UUID(), nullable=False),
        *timestamps(),
        sa.Column("event_id", sa.UUID(), nullable=False),
        sa.Column("phone_number", sa.String(20), nullable=False),
        sa.Column("guest_name", sa.String(255), nullable=False),
        sa.Column(
            "invite_status",
            sa.Enum("invited", "joined", "removed", name="invite_status_enum"),
            nullable=False,
        ),
        sa.Column(
            "rsvp_status",
            sa.Enum("pending", "yes", "no", "maybe", name="rsvp_status_enum"),
            nullable=False,
        ),
        sa.Column(
            "gift_option",
            sa.Enum("BYOG", "no gift", "gift card", "gift", name="gift_option_enum"),
            nullable=True,
        ),
        sa.Column("wishlist_id", sa.UUID(), nullable=True),
        sa.Column("invited_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["event_id"], ["events.uuid"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["wishlist_id"], ["wishlist.uuid"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("uuid"),
        sa.UniqueConstraint("event_id", "phone_number", name="uq_event_guests_event_phone"),
    )
    op.create_index("ix_event_guests_event_id", "event_guests", ["event_id"])
    op.create_index("ix_event_guests_phone_number", "event_guests", ["phone_number"])


def downgrade() -> None:
    op.drop_index("ix_event_guests_phone_number", table_name="event_guests")
    op.drop_index("ix_event_guests_event_id", table_name="event_guests")
    op.drop_table("event_guests")
    op.drop_index("ix_wishlist_claimed_by", table_name="wishlist")
    op.drop_index("ix_wishlist_event_id", table_name="wishlist")
    op.drop_index("ix_wishlist_host_id", table_name="wishlist")
    op.drop_table("wishlist")
    op.drop_index("ix_events_invite_link", table_name="events")
    op.drop_index("ix_events_host_id", table_name="events")
    op.drop_table("events")
    op.drop_index("ix_users_phone_number", table_name="users")
    op.drop_table("users")

    op.execute("DROP TYPE IF EXISTS gift_option_enum")
    op.execute("DROP TYPE IF EXISTS rsvp_status_enum")
    op.execute("DROP TYPE IF EXISTS invite_status_enum")
    op.execute("DROP TYPE IF EXISTS claim_status_enum")
    op.execute("DROP TYPE IF EXISTS event_status_enum")
