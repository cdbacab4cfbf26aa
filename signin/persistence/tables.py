"""SQLAlchemy table definitions.

These table definitions are used for classical ORM mapping.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import Column, Index, MetaData, String, Table, Text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE (one row per provider identity or local signup)
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("provider", String(20), nullable=False),  # local/google/discord/microsoft
    Column("name", String(255), nullable=True),
    Column("email", String(255), nullable=True),  # Lower-cased on write
    Column("picture", Text, nullable=True),
    # Provider linkage - at most one is set, matching `provider`
    Column("google_id", String(255), nullable=True),
    Column("discord_id", String(255), nullable=True),
    Column("microsoft_id", String(255), nullable=True),
    Column("password", String(255), nullable=True),  # bcrypt hash (local only)
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_users_email", users_table.c.email)
# NULLs never collide, so each index only constrains its own provider's rows
Index("uq_users_google_id", users_table.c.google_id, unique=True)
Index("uq_users_discord_id", users_table.c.discord_id, unique=True)
Index("uq_users_microsoft_id", users_table.c.microsoft_id, unique=True)
