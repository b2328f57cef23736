"""Create casework tables

Revision ID: 001
Revises: None
Create Date: 2024-05-01 00:00:00.000000+00:00

What:  Creates helpers, cases, assignments, service entries, vacations,
       helper documents, reports, invoices and youth-office contacts.

Rollback: downgrade() drops every table (all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "helpers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("highest_degree", sa.String(255), nullable=True),
        sa.Column("qualifications", sa.Text(), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "cases",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("case_number", sa.String(20), nullable=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("school", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("first_contact_text", sa.Text(), nullable=True),
        sa.Column("status", sa.String(30), server_default=sa.text("'offen'"), nullable=False),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("case_number"),
    )
    op.create_index("ix_cases_status", "cases", ["status"])

    op.create_table(
        "helper_assignments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("helper_id", sa.Integer(), sa.ForeignKey("helpers.id"), nullable=False),
        sa.Column("case_id", sa.Integer(), sa.ForeignKey("cases.id"), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_helper_assignments_helper_id", "helper_assignments", ["helper_id"])
    op.create_index("ix_helper_assignments_case_id", "helper_assignments", ["case_id"])

    op.create_table(
        "service_entries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("case_id", sa.Integer(), sa.ForeignKey("cases.id"), nullable=False),
        sa.Column("helper_id", sa.Integer(), sa.ForeignKey("helpers.id"), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("service_type", sa.String(50), nullable=True),
        sa.Column("approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("approved_by", sa.String(100), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_service_entries_case_id", "service_entries", ["case_id"])
    op.create_index("ix_service_entries_helper_id", "service_entries", ["helper_id"])
    op.create_index("idx_service_entries_start_time", "service_entries", ["start_time"])

    op.create_table(
        "vacations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("helper_id", sa.Integer(), sa.ForeignKey("helpers.id"), nullable=False),
        sa.Column("substitute_id", sa.Integer(), sa.ForeignKey("helpers.id"), nullable=True),
        sa.Column("from_date", sa.Date(), nullable=False),
        sa.Column("to_date", sa.Date(), nullable=False),
        sa.Column("approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(100), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    # Overlap checks filter by helper and compare both dates
    op.create_index(
        "idx_vacations_helper_dates", "vacations", ["helper_id", "from_date", "to_date"],
    )

    op.create_table(
        "helper_documents",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "helper_id",
            sa.Integer(),
            sa.ForeignKey("helpers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("file_path", sa.String(255), nullable=False),
        sa.Column("original_name", sa.String(255), nullable=False),
        sa.Column("document_type", sa.String(50), nullable=False, server_default=sa.text("'other'")),
        sa.Column("mime_type", sa.String(100), nullable=False),
        sa.Column("size_bytes", sa.Integer(), nullable=False),
        sa.Column("visible_to_helper", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("valid_until", sa.Date(), nullable=True),
        sa.Column("uploaded_by", sa.String(100), nullable=False, server_default=sa.text("'admin'")),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_helper_documents_helper_id", "helper_documents", ["helper_id"])

    op.create_table(
        "reports",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("case_id", sa.Integer(), sa.ForeignKey("cases.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("status", sa.String(30), nullable=False, server_default=sa.text("'entwurf'")),
        sa.Column("total_hours", sa.Float(), nullable=True),
        sa.Column("visible_to_youth_office", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reports_case_id", "reports", ["case_id"])

    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("case_id", sa.Integer(), sa.ForeignKey("cases.id"), nullable=False),
        sa.Column("invoice_number", sa.String(20), nullable=False),
        sa.Column("work_hours", sa.Float(), nullable=False),
        sa.Column("service_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("hourly_rate", sa.Float(), nullable=False),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("status", sa.String(30), nullable=False, server_default=sa.text("'erstellt'")),
        sa.Column("invoice_date", sa.Date(), nullable=False),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(100), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("invoice_number"),
    )
    op.create_index("ix_invoices_case_id", "invoices", ["case_id"])

    op.create_table(
        "contacts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("youth_office", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("mail", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("contacts")
    op.drop_index("ix_invoices_case_id", table_name="invoices")
    op.drop_table("invoices")
    op.drop_index("ix_reports_case_id", table_name="reports")
    op.drop_table("reports")
    op.drop_index("ix_helper_documents_helper_id", table_name="helper_documents")
    op.drop_table("helper_documents")
    op.drop_index("idx_vacations_helper_dates", table_name="vacations")
    op.drop_table("vacations")
    op.drop_index("idx_service_entries_start_time", table_name="service_entries")
    op.drop_index("ix_service_entries_helper_id", table_name="service_entries")
    op.drop_index("ix_service_entries_case_id", table_name="service_entries")
    op.drop_table("service_entries")
    op.drop_index("ix_helper_assignments_case_id", table_name="helper_assignments")
    op.drop_index("ix_helper_assignments_helper_id", table_name="helper_assignments")
    op.drop_table("helper_assignments")
    op.drop_index("ix_cases_status", table_name="cases")
    op.drop_table("cases")
    op.drop_table("helpers")
