# backend/alembic/versions/001_initial_schema.py
"""Initial schema - users, trainers, classes, bookings, memberships, payments, notifications

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18 00:00:00.000000

On PostgreSQL this also installs btree_gist and adds the exclusion
constraints that stop overlapping confirmed personal training sessions per
trainer and per member.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_CONFIRMED = sa.text("status = 'confirmed'")
_CONFIRMED_PERSONAL = sa.text("status = 'confirmed' AND type = 'personal_training'")
_CURRENT_MEMBERSHIP = sa.text("status IN ('active', 'cancelled')")


def _create_extension_prefer_extensions_schema(extension_name: str) -> None:
    """Create extension using extensions schema when available."""

    bind = op.get_bind()
    if bind is None or bind.dialect.name != "postgresql":
        return

    op.execute(
        f"""
        DO $$
        DECLARE
            extensions_schema_exists BOOLEAN;
        BEGIN
            SELECT EXISTS (
                SELECT 1 FROM pg_namespace WHERE nspname = 'extensions'
            ) INTO extensions_schema_exists;

            IF extensions_schema_exists THEN
                EXECUTE 'CREATE EXTENSION IF NOT EXISTS {extension_name} WITH SCHEMA extensions';
            ELSE
                EXECUTE 'CREATE EXTENSION IF NOT EXISTS {extension_name}';
            END IF;
        END$$;
        """
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create the booking schema."""
    bind = op.get_bind()
    is_postgres = bind is not None and bind.dialect.name == "postgresql"

    op.create_table(
        "users",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(120), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="member"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("role IN ('admin', 'trainer', 'member')", name="ck_users_role"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "trainer_profiles",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(26), nullable=False),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("trainer_type", sa.String(20), nullable=False, server_default="personal"),
        sa.Column("bio", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id"),
        sa.CheckConstraint("hourly_rate > 0", name="check_trainer_rate_positive"),
        sa.CheckConstraint(
            "trainer_type IN ('personal', 'group', 'both')", name="ck_trainer_profiles_type"
        ),
    )
    op.create_index("ix_trainer_profiles_id", "trainer_profiles", ["id"])

    op.create_table(
        "group_classes",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("trainer_user_id", sa.String(26), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("schedule", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="approved"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["trainer_user_id"], ["users.id"]),
        sa.CheckConstraint("capacity > 0", name="check_class_capacity_positive"),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')", name="ck_group_classes_status"
        ),
    )
    op.create_index("ix_group_classes_id", "group_classes", ["id"])
    op.create_index("ix_group_classes_trainer_user_id", "group_classes", ["trainer_user_id"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(26), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="confirmed"),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("group_class_id", sa.String(26), nullable=True),
        sa.Column("class_date", sa.Date(), nullable=True),
        sa.Column("trainer_id", sa.String(26), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["group_class_id"], ["group_classes.id"]),
        sa.ForeignKeyConstraint(["trainer_id"], ["users.id"]),
        sa.CheckConstraint(
            "status IN ('confirmed', 'cancelled', 'completed')", name="ck_bookings_status"
        ),
        sa.CheckConstraint(
            "(type = 'group_class'"
            " AND group_class_id IS NOT NULL AND class_date IS NOT NULL"
            " AND trainer_id IS NULL AND start_time IS NULL AND end_time IS NULL)"
            " OR (type = 'personal_training'"
            " AND trainer_id IS NOT NULL AND start_time IS NOT NULL AND end_time IS NOT NULL"
            " AND group_class_id IS NULL AND class_date IS NULL)",
            name="ck_bookings_variant_fields",
        ),
        sa.CheckConstraint("start_time IS NULL OR start_time < end_time", name="check_time_order"),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_status", "bookings", ["status"])
    op.create_index("ix_bookings_group_class_id", "bookings", ["group_class_id"])
    op.create_index("ix_bookings_trainer_id", "bookings", ["trainer_id"])
    op.create_index(
        "ix_bookings_class_occurrence_status",
        "bookings",
        ["group_class_id", "class_date", "status"],
    )
    op.create_index(
        "uq_bookings_member_class_occurrence",
        "bookings",
        ["user_id", "group_class_id", "class_date"],
        unique=True,
        sqlite_where=_CONFIRMED,
        postgresql_where=_CONFIRMED,
    )
    op.create_index(
        "uq_bookings_trainer_slot",
        "bookings",
        ["trainer_id", "start_time"],
        unique=True,
        sqlite_where=_CONFIRMED_PERSONAL,
        postgresql_where=_CONFIRMED_PERSONAL,
    )
    op.create_index(
        "uq_bookings_member_slot",
        "bookings",
        ["user_id", "start_time"],
        unique=True,
        sqlite_where=_CONFIRMED_PERSONAL,
        postgresql_where=_CONFIRMED_PERSONAL,
    )

    if is_postgres:
        _create_extension_prefer_extensions_schema("btree_gist")
        op.execute(
            """
            ALTER TABLE bookings
              ADD CONSTRAINT bookings_no_overlap_per_trainer
              EXCLUDE USING gist (
                trainer_id WITH =,
                tstzrange(start_time, end_time, '[)') WITH &&
              )
              WHERE (status = 'confirmed' AND type = 'personal_training')
            """
        )
        op.execute(
            """
            ALTER TABLE bookings
              ADD CONSTRAINT bookings_no_overlap_per_member
              EXCLUDE USING gist (
                user_id WITH =,
                tstzrange(start_time, end_time, '[)') WITH &&
              )
              WHERE (status = 'confirmed' AND type = 'personal_training')
            """
        )

    op.create_table(
        "membership_packages",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(80), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
        sa.CheckConstraint("price >= 0", name="check_package_price_non_negative"),
    )
    op.create_index("ix_membership_packages_id", "membership_packages", ["id"])

    op.create_table(
        "memberships",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(26), nullable=False),
        sa.Column("package_id", sa.String(26), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("auto_renew", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("next_package_id", sa.String(26), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["package_id"], ["membership_packages.id"]),
        sa.ForeignKeyConstraint(["next_package_id"], ["membership_packages.id"]),
        sa.CheckConstraint(
            "status IN ('active', 'cancelled', 'expired')", name="ck_memberships_status"
        ),
        sa.CheckConstraint("start_date < end_date", name="check_membership_period_order"),
    )
    op.create_index("ix_memberships_id", "memberships", ["id"])
    op.create_index("ix_memberships_user_id", "memberships", ["user_id"])
    op.create_index("ix_memberships_end_date", "memberships", ["end_date"])
    op.create_index(
        "uq_memberships_user_current",
        "memberships",
        ["user_id"],
        unique=True,
        sqlite_where=_CURRENT_MEMBERSHIP,
        postgresql_where=_CURRENT_MEMBERSHIP,
    )

    op.create_table(
        "payments",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(26), nullable=False),
        sa.Column("membership_id", sa.String(26), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("payment_method", sa.String(50), nullable=False),
        sa.Column("payment_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["membership_id"], ["memberships.id"]),
        sa.CheckConstraint("amount >= 0", name="check_payment_amount_non_negative"),
        sa.CheckConstraint(
            "status IN ('pending', 'completed', 'failed', 'refunded')", name="ck_payments_status"
        ),
    )
    op.create_index("ix_payments_id", "payments", ["id"])
    op.create_index("ix_payments_user_id", "payments", ["user_id"])
    op.create_index("ix_payments_membership_id", "payments", ["membership_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(26), nullable=False),
        sa.Column("booking_id", sa.String(26), nullable=True),
        sa.Column("type", sa.String(20), nullable=False, server_default="reminder"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("scheduled_for", sa.DateTime(timezone=True), nullable=False),
        sa.Column("message", sa.Text(), nullable=False, server_default=""),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["booking_id"], ["bookings.id"]),
        sa.CheckConstraint(
            "status IN ('pending', 'sent', 'cancelled', 'failed')",
            name="ck_notifications_status",
        ),
        sa.CheckConstraint("type IN ('reminder')", name="ck_notifications_type"),
    )
    op.create_index("ix_notifications_id", "notifications", ["id"])
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index("ix_notifications_booking_id", "notifications", ["booking_id"])
    op.create_index(
        "ix_notifications_status_scheduled_for", "notifications", ["status", "scheduled_for"]
    )


def downgrade() -> None:
    """Drop the booking schema."""
    bind = op.get_bind()
    is_postgres = bind is not None and bind.dialect.name == "postgresql"

    op.drop_table("notifications")
    op.drop_table("payments")
    op.drop_index("uq_memberships_user_current", table_name="memberships")
    op.drop_table("memberships")
    op.drop_table("membership_packages")

    if is_postgres:
        op.execute("ALTER TABLE bookings DROP CONSTRAINT IF EXISTS bookings_no_overlap_per_member")
        op.execute(
            "ALTER TABLE bookings DROP CONSTRAINT IF EXISTS bookings_no_overlap_per_trainer"
        )
    op.drop_index("uq_bookings_member_slot", table_name="bookings")
    op.drop_index("uq_bookings_trainer_slot", table_name="bookings")
    op.drop_index("uq_bookings_member_class_occurrence", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("group_classes")
    op.drop_table("trainer_profiles")
    op.drop_table("users")
