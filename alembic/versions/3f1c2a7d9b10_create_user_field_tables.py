"""Create user field tables

Revision ID: 3f1c2a7d9b10
Revises:
Create Date: 2026-10-19 09:12:44.318205

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a7d9b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "options",
        sa.Column("name", sa.VARCHAR(length=191), nullable=False),
        sa.Column("value", sa.TEXT(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("name"),
    )

    op.create_table(
        "calendar_field_settings",
        sa.Column("calendar_id", sa.Integer(), nullable=False),
        sa.Column(
            "mode",
            sa.Enum("global", "none", "custom", name="calendar_fields_mode"),
            nullable=False,
            server_default="global",
        ),
        sa.Column(
            "position",
            sa.Enum("before", "after", name="calendar_fields_position"),
            nullable=False,
            server_default="before",
        ),
        sa.Column("custom_fields", sa.TEXT(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("calendar_id"),
    )

    op.create_table(
        "booking_field_data",
        sa.Column("booking_id", sa.Integer(), nullable=False),
        sa.Column("data", sa.TEXT(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("booking_id"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("booking_field_data")
    op.drop_table("calendar_field_settings")
    op.drop_table("options")
    sa.Enum(name="calendar_fields_position").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="calendar_fields_mode").drop(op.get_bind(), checkfirst=True)
