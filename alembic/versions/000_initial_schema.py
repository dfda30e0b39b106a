"""Initial database schema

Revision ID: 000_initial_schema
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "000_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the affiliates table read by the commission engine."""

    op.create_table(
        "affiliates",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("tier", sa.Integer(), nullable=True),
        sa.Column("total_sales", sa.Numeric(14, 2), server_default="0", nullable=False),
        sa.Column("total_commissions", sa.Numeric(14, 2), server_default="0", nullable=False),
        sa.Column(
            "status",
            sa.Enum("active", "suspended", "inactive", name="affiliatestatus"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_affiliates_email", "affiliates", ["email"], unique=True)


def downgrade() -> None:
    """Drop the affiliates table."""
    op.drop_index("ix_affiliates_email", table_name="affiliates")
    op.drop_table("affiliates")
    sa.Enum(name="affiliatestatus").drop(op.get_bind(), checkfirst=True)
