"""initial schema: accounts, musicians, availability, schedules, invitations

Revision ID: 3f1c2a9d7e10
Revises:
Create Date: 2026-10-18 09:00:00
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f1c2a9d7e10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "instruments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
    )
    op.create_index("ix_instruments_id", "instruments", ["id"])

    op.create_table(
        "locations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(500), nullable=True),
    )
    op.create_index("ix_locations_id", "locations", ["id"])

    op.create_table(
        "musicians",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("whatsapp", sa.String(50), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
            unique=True,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_musicians_id", "musicians", ["id"])
    op.create_index("ix_musicians_email", "musicians", ["email"])
    op.create_index("ix_musicians_active", "musicians", ["active"])
    op.create_index("ix_musicians_deleted_at", "musicians", ["deleted_at"])

    op.create_table(
        "musician_unavailability",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "musician_id",
            sa.Integer(),
            sa.ForeignKey("musicians.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("start_date <= end_date", name="ck_unavailability_range"),
    )
    op.create_index("ix_musician_unavailability_id", "musician_unavailability", ["id"])
    op.create_index(
        "ix_musician_unavailability_deleted_at", "musician_unavailability", ["deleted_at"]
    )
    op.create_index(
        "ix_unavailability_musician_range",
        "musician_unavailability",
        ["musician_id", "start_date", "end_date"],
    )

    op.create_table(
        "schedules",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column(
            "location_id",
            sa.Integer(),
            sa.ForeignKey("locations.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_schedules_id", "schedules", ["id"])
    op.create_index("ix_schedules_date", "schedules", ["date"])
    op.create_index("ix_schedules_deleted_at", "schedules", ["deleted_at"])

    op.create_table(
        "schedule_times",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "schedule_id",
            sa.Integer(),
            sa.ForeignKey("schedules.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
    )
    op.create_index("ix_schedule_times_schedule_id", "schedule_times", ["schedule_id"])

    op.create_table(
        "schedule_rehearsals",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "schedule_id",
            sa.Integer(),
            sa.ForeignKey("schedules.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
    )
    op.create_index(
        "ix_schedule_rehearsals_schedule_id", "schedule_rehearsals", ["schedule_id"]
    )
    op.create_index(
        "ix_schedule_rehearsals_date", "schedule_rehearsals", ["schedule_id", "date"]
    )

    op.create_table(
        "schedule_musicians",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "schedule_id",
            sa.Integer(),
            sa.ForeignKey("schedules.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "musician_id",
            sa.Integer(),
            sa.ForeignKey("musicians.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("instrument_id", sa.Integer(), sa.ForeignKey("instruments.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("schedule_id", "musician_id", name="uq_schedule_musician"),
    )
    op.create_index("ix_schedule_musicians_id", "schedule_musicians", ["id"])
    op.create_index("ix_schedule_musicians_schedule_id", "schedule_musicians", ["schedule_id"])
    op.create_index("ix_schedule_musicians_musician_id", "schedule_musicians", ["musician_id"])

    op.create_table(
        "musician_invitations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("token", sa.String(128), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("invited_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_musician_invitations_id", "musician_invitations", ["id"])
    op.create_index("ix_musician_invitations_email", "musician_invitations", ["email"])
    op.create_index("ix_musician_invitations_token", "musician_invitations", ["token"], unique=True)
    op.create_index(
        "ix_musician_invitations_deleted_at", "musician_invitations", ["deleted_at"]
    )

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("action", sa.String(64), nullable=False),
        sa.Column("entity_type", sa.String(64), nullable=True),
        sa.Column("entity_id", sa.Integer(), nullable=True),
        sa.Column("meta", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"])
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("musician_invitations")
    op.drop_table("schedule_musicians")
    op.drop_table("schedule_rehearsals")
    op.drop_table("schedule_times")
    op.drop_table("schedules")
    op.drop_table("musician_unavailability")
    op.drop_table("musicians")
    op.drop_table("locations")
    op.drop_table("instruments")
    op.drop_table("users")
