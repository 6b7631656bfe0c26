# /alembic/versions/2026_10_19_1200-5b1c2e7d9a40_lines_faults_requests.py
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "5b1c2e7d9a40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # --- справочники ---
    op.create_table(
        "subsidiaries",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_subsidiaries"),
    )
    op.create_table(
        "line_types",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_line_types"),
        sa.UniqueConstraint("code", name="uq_line_types_code"),
    )
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("subsidiary_id", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.ForeignKeyConstraint(
            ["subsidiary_id"],
            ["subsidiaries.id"],
            name="fk_users_subsidiary_id_subsidiaries",
            ondelete="RESTRICT",
        ),
        sa.CheckConstraint("role IN ('admin','subsidiary','maintenance')", name="ck_users_role_values"),
    )
    op.create_index("ix_users_subsidiary_id", "users", ["subsidiary_id"])

    # --- линии ---
    op.create_table(
        "lines",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("number", sa.String(length=100), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("subsidiary_id", sa.Integer(), nullable=False),
        sa.Column("location", sa.Text(), nullable=False),
        sa.Column("establishment_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="working"),
        sa.Column("last_checked", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("in_fault_flow", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_lines"),
        sa.ForeignKeyConstraint(
            ["type"],
            ["line_types.code"],
            name="fk_lines_type_line_types",
            ondelete="RESTRICT",
            onupdate="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["subsidiary_id"],
            ["subsidiaries.id"],
            name="fk_lines_subsidiary_id_subsidiaries",
            ondelete="RESTRICT",
        ),
        sa.UniqueConstraint("subsidiary_id", "number", name="uq_lines_subsidiary_id_number"),
        sa.CheckConstraint(
            "status IN ('working','faulty','maintenance','out_of_service','archived')",
            name="ck_lines_status_values",
        ),
    )
    op.create_index("ix_lines_subsidiary_id", "lines", ["subsidiary_id"])

    # --- заявки о неисправностях ---
    op.create_table(
        "faults",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("line_id", sa.Integer(), nullable=False),
        sa.Column("subsidiary_id", sa.Integer(), nullable=False),
        sa.Column("declared_by", sa.Integer(), nullable=False),
        sa.Column("declared_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("symptoms", sa.Text(), nullable=False),
        sa.Column("probable_cause", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="open"),
        sa.Column("assigned_to", sa.Integer(), nullable=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_faults"),
        sa.ForeignKeyConstraint(["line_id"], ["lines.id"], name="fk_faults_line_id_lines", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["subsidiary_id"],
            ["subsidiaries.id"],
            name="fk_faults_subsidiary_id_subsidiaries",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(["declared_by"], ["users.id"], name="fk_faults_declared_by_users", ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["assigned_to"], ["users.id"], name="fk_faults_assigned_to_users", ondelete="RESTRICT"),
        sa.CheckConstraint("status IN ('open','assigned','resolved')", name="ck_faults_status_values"),
    )
    op.create_index("ix_faults_line_id", "faults", ["line_id"])
    op.create_index("ix_faults_subsidiary_id", "faults", ["subsidiary_id"])
    op.create_index("ix_faults_line_id_status", "faults", ["line_id", "status"])

    # --- запросы на выделение линий ---
    op.create_table(
        "line_requests",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("subsidiary_id", sa.Integer(), nullable=False),
        sa.Column("requested_type", sa.String(length=50), nullable=False),
        sa.Column("assigned_number", sa.String(length=100), nullable=True),
        sa.Column("admin_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("line_id", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_line_requests"),
        sa.ForeignKeyConstraint(
            ["subsidiary_id"],
            ["subsidiaries.id"],
            name="fk_line_requests_subsidiary_id_subsidiaries",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["requested_type"],
            ["line_types.code"],
            name="fk_line_requests_requested_type_line_types",
            ondelete="RESTRICT",
            onupdate="CASCADE",
        ),
        sa.ForeignKeyConstraint(["admin_id"], ["users.id"], name="fk_line_requests_admin_id_users", ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["line_id"], ["lines.id"], name="fk_line_requests_line_id_lines", ondelete="SET NULL"),
        sa.CheckConstraint("status IN ('pending','approved','rejected')", name="ck_line_requests_status_values"),
    )
    op.create_index("ix_line_requests_subsidiary_id", "line_requests", ["subsidiary_id"])
    op.create_index("ix_line_requests_created_at", "line_requests", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_line_requests_created_at", table_name="line_requests")
    op.drop_index("ix_line_requests_subsidiary_id", table_name="line_requests")
    op.drop_table("line_requests")

    op.drop_index("ix_faults_line_id_status", table_name="faults")
    op.drop_index("ix_faults_subsidiary_id", table_name="faults")
    op.drop_index("ix_faults_line_id", table_name="faults")
    op.drop_table("faults")

    op.drop_index("ix_lines_subsidiary_id", table_name="lines")
    op.drop_table("lines")

    op.drop_index("ix_users_subsidiary_id", table_name="users")
    op.drop_table("users")
    op.drop_table("line_types")
    op.drop_table("subsidiaries")
