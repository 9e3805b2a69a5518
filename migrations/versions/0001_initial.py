"""initial organization master data tables

Revision ID: 0001_initial
Revises:
Create Date: 2025-01-06 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from orgadmin.core.database_base import SCHEMA, fk

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns(prefix: str):
    return [
        sa.Column(f"{prefix}_created_by", sa.String(length=50), nullable=True),
        sa.Column(f"{prefix}_updated_by", sa.String(length=50), nullable=True),
        sa.Column(f"{prefix}_created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column(f"{prefix}_updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "login_divisions",
        sa.Column("div_id", sa.Integer(), primary_key=True),
        sa.Column("div_code", sa.String(length=10), nullable=False, unique=True),
        sa.Column("div_name", sa.String(length=100), nullable=False),
        sa.Column("div_is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_audit_columns("div"),
        schema=SCHEMA,
    )
    op.create_table(
        "login_positions",
        sa.Column("pos_id", sa.Integer(), primary_key=True),
        sa.Column("pos_code", sa.String(length=10), nullable=False, unique=True),
        sa.Column("pos_name", sa.String(length=100), nullable=False),
        sa.Column("pos_is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_audit_columns("pos"),
        schema=SCHEMA,
    )
    op.create_table(
        "login_roles",
        sa.Column("role_id", sa.Integer(), primary_key=True),
        sa.Column("role_name", sa.String(length=50), nullable=False, unique=True),
        sa.Column("role_level", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("role_is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_audit_columns("role"),
        schema=SCHEMA,
    )
    op.create_table(
        "login_users",
        sa.Column("u_id", sa.Integer(), primary_key=True),
        sa.Column("u_employee_id", sa.String(length=20), nullable=False, unique=True),
        sa.Column("u_name", sa.String(length=100), nullable=False),
        sa.Column("u_email", sa.String(length=100), nullable=False, unique=True),
        sa.Column("u_password", sa.String(length=255), nullable=False),
        sa.Column("u_phone", sa.String(length=20), nullable=True),
        sa.Column("u_address", sa.Text(), nullable=True),
        sa.Column("u_birthdate", sa.Date(), nullable=True),
        sa.Column("u_join_date", sa.Date(), nullable=False),
        sa.Column("u_profile_image", sa.String(length=255), nullable=True),
        sa.Column(
            "u_division_id",
            sa.Integer(),
            sa.ForeignKey(fk("login_divisions.div_id"), onupdate="CASCADE", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column(
            "u_position_id",
            sa.Integer(),
            sa.ForeignKey(fk("login_positions.pos_id"), onupdate="CASCADE", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column("u_is_manager", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "u_manager_id",
            sa.Integer(),
            sa.ForeignKey(fk("login_users.u_id"), ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("u_is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_audit_columns("u"),
        schema=SCHEMA,
    )
    op.create_table(
        "login_user_roles",
        sa.Column(
            "ur_user_id",
            sa.Integer(),
            sa.ForeignKey(fk("login_users.u_id"), ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "ur_role_id",
            sa.Integer(),
            sa.ForeignKey(fk("login_roles.role_id"), ondelete="RESTRICT"),
            primary_key=True,
        ),
        sa.Column("ur_created_by", sa.String(length=50), nullable=True),
        sa.Column("ur_created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=True),
        schema=SCHEMA,
    )
    op.create_table(
        "personal_access_tokens",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey(fk("login_users.u_id"), ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("jti", sa.String(length=64), nullable=False, unique=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("last_used_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=True),
        schema=SCHEMA,
    )
    op.create_index(
        "ix_personal_access_tokens_user_id", "personal_access_tokens", ["user_id"], schema=SCHEMA
    )


def downgrade() -> None:
    op.drop_index("ix_personal_access_tokens_user_id", table_name="personal_access_tokens", schema=SCHEMA)
    op.drop_table("personal_access_tokens", schema=SCHEMA)
    op.drop_table("login_user_roles", schema=SCHEMA)
    op.drop_table("login_users", schema=SCHEMA)
    op.drop_table("login_roles", schema=SCHEMA)
    op.drop_table("login_positions", schema=SCHEMA)
    op.drop_table("login_divisions", schema=SCHEMA)
