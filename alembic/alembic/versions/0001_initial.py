"""initial studio schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

user_role = sa.Enum("ADMIN", "STAFF", name="user_role")
team_role = sa.Enum("EDITOR", "CUSTOMER_SERVICE", "EVENT_PLANNER", "PHOTO_CREW", name="team_role")
template_category = sa.Enum("TRADITIONAL", "MODERN", "RELIGIOUS", name="template_category")
guest_category = sa.Enum("GENERAL", "BRIDE_GUEST", "GROOM_GUEST", name="guest_category")
media_type = sa.Enum("IMAGE", "VIDEO", name="media_type")


def _timestamps(with_updated=True):
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now())]
    if with_updated:
        columns.append(sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()))
    return columns


def upgrade():
    op.create_table(
        "studios",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String()),
        sa.Column("phone", sa.String()),
        sa.Column("logo_url", sa.String()),
        sa.Column("primary_color", sa.String()),
        *_timestamps(),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("phone", sa.String(), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("team_role", team_role, nullable=False),
        sa.Column(
            "studio_id",
            sa.String(36),
            sa.ForeignKey("studios.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index("ix_users_studio_id", "users", ["studio_id"])

    op.create_table(
        "templates",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False, unique=True),
        sa.Column("category", template_category, nullable=False),
        sa.Column("preview_image", sa.String()),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "events",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "studio_id",
            sa.String(36),
            sa.ForeignKey("studios.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("template_id", sa.String(36), sa.ForeignKey("templates.id"), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("bride_name", sa.String()),
        sa.Column("groom_name", sa.String()),
        sa.Column("bride_phone", sa.String(), nullable=False),
        sa.Column("groom_phone", sa.String(), nullable=False),
        sa.Column("couple_access_token", sa.String(), nullable=False, unique=True),
        sa.Column("event_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String()),
        sa.Column("description", sa.Text()),
        sa.Column("cover_image", sa.String()),
        sa.Column("slug", sa.String(), nullable=False, unique=True),
        sa.Column("subdomain", sa.String(), unique=True),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_events_studio_id", "events", ["studio_id"])

    op.create_table(
        "guests",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "event_id",
            sa.String(36),
            sa.ForeignKey("events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("phone", sa.String()),
        sa.Column("email", sa.String()),
        sa.Column("category", guest_category, nullable=False),
        sa.Column("invitation_code", sa.String(), nullable=False, unique=True),
        sa.Column("checked_in", sa.Boolean(), nullable=False),
        sa.Column("checked_in_at", sa.DateTime(timezone=True)),
        *_timestamps(with_updated=False),
    )
    op.create_index("ix_guests_event_id", "guests", ["event_id"])

    op.create_table(
        "media",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "event_id",
            sa.String(36),
            sa.ForeignKey("events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", media_type, nullable=False),
        sa.Column("url", sa.String(), nullable=False),
        *_timestamps(with_updated=False),
    )
    op.create_index("ix_media_event_id", "media", ["event_id"])


def downgrade():
    op.drop_index("ix_media_event_id", table_name="media")
    op.drop_table("media")
    op.drop_index("ix_guests_event_id", table_name="guests")
    op.drop_table("guests")
    op.drop_index("ix_events_studio_id", table_name="events")
    op.drop_table("events")
    op.drop_table("templates")
    op.drop_index("ix_users_studio_id", table_name="users")
    op.drop_table("users")
    op.drop_table("studios")

    bind = op.get_bind()
    for enum in (media_type, guest_category, template_category, team_role, user_role):
        enum.drop(bind, checkfirst=True)
