"""Initial schema - users, projects, credits.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(100), nullable=False, unique=True),
        sa.Column("password", sa.Text, nullable=False),
        sa.Column("balance", sa.Numeric(18, 2), nullable=False, server_default="1000"),
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("location", sa.String(200), nullable=False),
        sa.Column("credits", sa.Numeric(18, 4), nullable=False),
        sa.Column("price", sa.Numeric(18, 2), nullable=False),
        sa.Column("image_url", sa.Text, nullable=False),
    )

    op.create_table(
        "credits",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("amount", sa.Numeric(18, 4), nullable=False),
        sa.Column("price", sa.Numeric(18, 2), nullable=False),
        sa.Column("type", sa.String(4), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_credits_user_id", "credits", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_credits_user_id", table_name="credits")
    op.drop_table("credits")
    op.drop_table("projects")
    op.drop_table("users")
