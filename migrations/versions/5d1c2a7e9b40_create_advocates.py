"""create advocates table

Revision ID: 5d1c2a7e9b40
Revises:
Create Date: 2024-01-01 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5d1c2a7e9b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_INDEXES = {
    "idx_advocates_first_name": ["first_name"],
    "idx_advocates_last_name": ["last_name"],
    "idx_advocates_city": ["city"],
    "idx_advocates_degree": ["degree"],
    "idx_advocates_years_experience": ["years_of_experience"],
    "idx_advocates_created_at": ["created_at"],
    "idx_advocates_name_search": ["first_name", "last_name"],
    "idx_advocates_location_experience": ["city", "years_of_experience"],
}


def upgrade() -> None:
    """Create the advocates table and its lookup indexes."""
    op.create_table(
        "advocates",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("first_name", sa.Text(), nullable=False),
        sa.Column("last_name", sa.Text(), nullable=False),
        sa.Column("city", sa.Text(), nullable=False),
        sa.Column("degree", sa.Text(), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("years_of_experience", sa.Integer(), nullable=False),
        sa.Column("phone_number", sa.BigInteger(), nullable=False),
        sa.Column("profile_image_url", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    for name, columns in _INDEXES.items():
        op.create_index(name, "advocates", columns)


def downgrade() -> None:
    """Drop the advocates table."""
    for name in _INDEXES:
        op.drop_index(name, table_name="advocates")
    op.drop_table("advocates")
