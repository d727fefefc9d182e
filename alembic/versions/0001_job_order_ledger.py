"""job orders and revision ledger

Revision ID: 0001_job_order_ledger
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_job_order_ledger"
down_revision = None
branch_labels = None
depends_on = None

USER_ROLES = ("ADMIN", "MANAGER", "JOB_ORDER_MANAGER", "EMPLOYEE", "DESIGNER", "SALESMAN")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=128), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.Enum(*USER_ROLES, name="user_role"), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "job_orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("job_order_number", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("client_name", sa.String(length=255), nullable=True),
        sa.Column("branch", sa.String(length=128), nullable=True),
        sa.Column("assignee", sa.String(length=255), nullable=True),
        sa.Column("salesman", sa.String(length=255), nullable=True),
        sa.Column("designer", sa.String(length=255), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="pending"),
        sa.Column("priority", sa.String(length=16), nullable=False, server_default="medium"),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("estimated_hours", sa.Numeric(10, 2), nullable=True),
        sa.Column("actual_hours", sa.Numeric(10, 2), nullable=True),
        sa.Column("total_value", sa.Numeric(12, 2), nullable=True),
        sa.Column("invoice_number", sa.String(length=64), nullable=True),
        sa.Column("approval_status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("approval_notes", sa.Text(), nullable=True),
        sa.Column("job_order_details", sa.Text(), nullable=True),
        sa.Column("delivered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_job_orders_job_order_number", "job_orders", ["job_order_number"], unique=True)

    op.create_table(
        "job_order_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("job_order_id", sa.Integer(), sa.ForeignKey("job_orders.id"), nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False),
        sa.Column("changed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("changed_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("action", sa.String(length=16), nullable=False),
        sa.Column("changed_fields", sa.JSON(), nullable=True),
        sa.Column("snapshot", sa.JSON(), nullable=True),
        sa.Column("reverted_from_id", sa.Integer(), sa.ForeignKey("job_order_logs.id"), nullable=True),
    )
    op.create_index("ix_job_order_logs_job_order_changed_at", "job_order_logs", ["job_order_id", "changed_at"])
    op.create_index("uq_job_order_logs_job_order_seq", "job_order_logs", ["job_order_id", "seq"], unique=True)


def downgrade() -> None:
    op.drop_index("uq_job_order_logs_job_order_seq", table_name="job_order_logs")
    op.drop_index("ix_job_order_logs_job_order_changed_at", table_name="job_order_logs")
    op.drop_table("job_order_logs")
    op.drop_index("ix_job_orders_job_order_number", table_name="job_orders")
    op.drop_table("job_orders")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
    sa.Enum(name="user_role").drop(op.get_bind(), checkfirst=True)
