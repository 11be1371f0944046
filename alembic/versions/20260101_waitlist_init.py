"""waitlist baseline: users and waitlist_emails

Revision ID: 20260101_waitlist_init
Revises:
Create Date: 2026-01-01 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from waitlist_api.core.types import UUIDString

# revision identifiers, used by Alembic.
revision: str = "20260101_waitlist_init"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUIDString(), primary_key=True),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("password", sa.String(), nullable=False),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "waitlist_emails",
        sa.Column("id", UUIDString(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("confirmed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("confirmation_token", sa.String(), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("email", name="uq_waitlist_email"),
        sa.UniqueConstraint("confirmation_token", name="uq_waitlist_confirmation_token"),
    )
    op.create_index("ix_waitlist_emails_email", "waitlist_emails", ["email"])


def downgrade() -> None:
    op.drop_index("ix_waitlist_emails_email", table_name="waitlist_emails")
    op.drop_table("waitlist_emails")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
