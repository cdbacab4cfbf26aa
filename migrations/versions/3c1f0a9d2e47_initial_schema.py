"""initial_schema

Create the users table for third-party login onboarding:
- One row per person, created on first login
- One nullable linkage column per external provider (Google, Discord, Microsoft)
- Unique index per linkage column so concurrent first logins cannot
  create duplicate users

Revision ID: 3c1f0a9d2e47
Revises:
Create Date: 2026-10-19 10:12:44.518203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1f0a9d2e47"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Enable required extensions
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    op.create_table(
        "users",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("uuid_generate_v4()"),
        ),
        sa.Column("provider", sa.String(20), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("picture", sa.Text, nullable=True),
        sa.Column("google_id", sa.String(255), nullable=True),
        sa.Column("discord_id", sa.String(255), nullable=True),
        sa.Column("microsoft_id", sa.String(255), nullable=True),
        sa.Column("password", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.CheckConstraint(
            "provider IN ('local', 'google', 'discord', 'microsoft')",
            name="check_users_provider",
        ),
    )

    op.create_index("idx_users_email", "users", ["email"])
    op.create_index("uq_users_google_id", "users", ["google_id"], unique=True)
    op.create_index("uq_users_discord_id", "users", ["discord_id"], unique=True)
    op.create_index("uq_users_microsoft_id", "users", ["microsoft_id"], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("uq_users_microsoft_id", table_name="users")
    op.drop_index("uq_users_discord_id", table_name="users")
    op.drop_index("uq_users_google_id", table_name="users")
    op.drop_index("idx_users_email", table_name="users")
    op.drop_table("users")
