"""Initial clinic booking schema

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UUID = postgresql.UUID(as_uuid=True)

user_role_enum = postgresql.ENUM("PATIENT", "ADMIN", "SUPER_ADMIN", name="user_role_enum", create_type=False)
appointment_status_enum = postgresql.ENUM(
    "PENDING", "CONFIRMED", "COMPLETED", "CANCELLED", "RESCHEDULED", "NO_SHOW",
    name="appointment_status_enum",
    create_type=False,
)
lead_source_enum = postgresql.ENUM(
    "WEBSITE_FORM", "CALLBACK_REQUEST", "PHONE_INQUIRY", "WALK_IN", "REFERRAL", "SOCIAL_MEDIA",
    name="lead_source_enum",
    create_type=False,
)
lead_status_enum = postgresql.ENUM(
    "NEW", "CONTACTED", "INTERESTED", "CONVERTED", "LOST",
    name="lead_status_enum",
    create_type=False,
)

ENUMS = (user_role_enum, appointment_status_enum, lead_source_enum, lead_status_enum)


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in ENUMS:
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("email", sa.String, nullable=False),
        sa.Column("hashed_password", sa.String, nullable=False),
        sa.Column("first_name", sa.String, nullable=False),
        sa.Column("last_name", sa.String, nullable=False),
        sa.Column("phone", sa.String, nullable=True, unique=True),
        sa.Column("role", user_role_enum, nullable=False, server_default="PATIENT"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_verified", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("date_of_birth", sa.Date, nullable=True),
        sa.Column("gender", sa.String, nullable=True),
        sa.Column("address", sa.String, nullable=True),
        sa.Column("city", sa.String, nullable=True),
        sa.Column("state", sa.String, nullable=True),
        sa.Column("pincode", sa.String, nullable=True),
        sa.Column("reset_token", sa.String, nullable=True),
        sa.Column("reset_expires", sa.DateTime, nullable=True),
        sa.Column("last_login_at", sa.DateTime, nullable=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])
    op.create_index("ix_users_reset_token", "users", ["reset_token"])

    op.create_table(
        "branches",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("code", sa.String, nullable=False),
        sa.Column("address", sa.String, nullable=False),
        sa.Column("city", sa.String, nullable=False),
        sa.Column("state", sa.String, nullable=False),
        sa.Column("pincode", sa.String, nullable=False),
        sa.Column("phone", sa.String, nullable=False),
        sa.Column("email", sa.String, nullable=True),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("opening_time", sa.String, nullable=False, server_default="09:00"),
        sa.Column("closing_time", sa.String, nullable=False, server_default="20:00"),
        sa.Column("image", sa.String, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_branches_code", "branches", ["code"], unique=True)
    op.create_index("ix_branches_city", "branches", ["city"])

    op.create_table(
        "service_categories",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("slug", sa.String, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("icon", sa.String, nullable=True),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_service_categories_slug", "service_categories", ["slug"], unique=True)

    op.create_table(
        "services",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("slug", sa.String, nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("short_desc", sa.String, nullable=True),
        sa.Column("duration", sa.Integer, nullable=False),
        sa.Column("price", sa.Float, nullable=False),
        sa.Column("discount_price", sa.Float, nullable=True),
        sa.Column("image", sa.String, nullable=True),
        sa.Column("is_popular", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("category_id", UUID, sa.ForeignKey("service_categories.id"), nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_services_slug", "services", ["slug"], unique=True)
    op.create_index("ix_services_category_id", "services", ["category_id"])

    op.create_table(
        "branch_services",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("branch_id", UUID, sa.ForeignKey("branches.id", ondelete="CASCADE"), nullable=False),
        sa.Column("service_id", UUID, sa.ForeignKey("services.id", ondelete="CASCADE"), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.UniqueConstraint("branch_id", "service_id", name="uq_branch_service"),
    )
    op.create_index("ix_branch_services_branch_id", "branch_services", ["branch_id"])
    op.create_index("ix_branch_services_service_id", "branch_services", ["service_id"])

    op.create_table(
        "appointments",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("appointment_date", sa.Date, nullable=False),
        sa.Column("time_slot", sa.String(5), nullable=False),
        sa.Column("status", appointment_status_enum, nullable=False, server_default="PENDING"),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("patient_name", sa.String, nullable=False),
        sa.Column("patient_phone", sa.String, nullable=False),
        sa.Column("patient_email", sa.String, nullable=True),
        sa.Column("user_id", UUID, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("service_id", UUID, sa.ForeignKey("services.id"), nullable=False),
        sa.Column("branch_id", UUID, sa.ForeignKey("branches.id"), nullable=False),
        sa.Column("admin_notes", sa.Text, nullable=True),
        sa.Column("cancel_reason", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_appointments_appointment_date", "appointments", ["appointment_date"])
    op.create_index("ix_appointments_status", "appointments", ["status"])
    op.create_index("ix_appointments_user_id", "appointments", ["user_id"])
    op.create_index("ix_appointments_service_id", "appointments", ["service_id"])
    op.create_index("ix_appointments_branch_id", "appointments", ["branch_id"])
    # At most one PENDING/CONFIRMED appointment per (branch, date, slot)
    op.create_index(
        "uq_appointments_active_slot",
        "appointments",
        ["branch_id", "appointment_date", "time_slot"],
        unique=True,
        postgresql_where=sa.text("status IN ('PENDING', 'CONFIRMED')"),
    )

    op.create_table(
        "leads",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("message", sa.Text, nullable=True),
        sa.Column("service_interest", sa.String(500), nullable=True),
        sa.Column("source", lead_source_enum, nullable=False, server_default="WEBSITE_FORM"),
        sa.Column("status", lead_status_enum, nullable=False, server_default="NEW"),
        sa.Column("assigned_to", sa.String(255), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("follow_up_date", sa.DateTime, nullable=True),
        sa.Column("user_id", UUID, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_leads_status", "leads", ["status"])
    op.create_index("ix_leads_user_id", "leads", ["user_id"])

    op.create_table(
        "contact_messages",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("subject", sa.String(255), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("contact_messages")
    op.drop_table("leads")
    op.drop_index("uq_appointments_active_slot", table_name="appointments")
    op.drop_table("appointments")
    op.drop_table("branch_services")
    op.drop_table("services")
    op.drop_table("service_categories")
    op.drop_table("branches")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in reversed(ENUMS):
        enum_type.drop(bind, checkfirst=True)
