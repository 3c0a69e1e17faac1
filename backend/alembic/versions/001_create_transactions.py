"""Create transactions table with unique reference index.

Revision ID: 001_create_transactions
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_create_transactions"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "transactions",
        sa.Column(
            "id", sa.BigInteger().with_variant(sa.Integer, "sqlite"),
            primary_key=True, autoincrement=True,
        ),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("amount", sa.Numeric(19, 4), nullable=False),
        sa.Column("type", sa.String(6), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("transaction_reference", sa.String(50), nullable=False),
        sa.Column(
            "transaction_date", sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "idx_txn_ref", "transactions", ["transaction_reference"], unique=True,
    )


def downgrade() -> None:
    op.drop_index("idx_txn_ref", table_name="transactions")
    op.drop_table("transactions")
