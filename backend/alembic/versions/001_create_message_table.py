"""Create Message table

Revision ID: 001
Revises: None
Create Date: 2025-01-06 00:00:00.000000+00:00

What:  Creates the `Message` table and its createdAt DESC index.
Rollback: downgrade() drops the table (all messages are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the Message table. Column docs live in app/models/message.py."""
    op.create_table(
        "Message",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("message", sa.String(1000), nullable=False),
        sa.Column(
            "createdAt",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(
        "idx_message_created_at",
        "Message",
        [sa.text('"createdAt" DESC')],
    )


def downgrade() -> None:
    op.drop_index("idx_message_created_at", table_name="Message")
    op.drop_table("Message")
