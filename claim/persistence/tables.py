"""SQLAlchemy table definitions for the identity store.

These definitions match the schema created by the Alembic migrations.
Column types are kept dialect-neutral so the same metadata can be created
on SQLite for tests.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Index,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    Uuid,
    func,
    true,
)

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE (anonymous and linked identity records)
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("public_id", String(64), nullable=False),  # Anonymous bearer token
    Column("display_name", String(100), nullable=False),
    Column("email", String(255), nullable=True),
    Column("avatar_image", Text, nullable=True),
    Column("is_anonymous", Boolean, nullable=False, server_default=true()),
    Column("external_id", String(255), nullable=True),  # Set once, on link
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
    UniqueConstraint("public_id", name="uq_users_public_id"),
    UniqueConstraint("external_id", name="uq_users_external_id"),
    CheckConstraint(
        "(is_anonymous AND external_id IS NULL) "
        "OR (NOT is_anonymous AND external_id IS NOT NULL)",
        name="ck_users_link_state",
    ),
)

Index("idx_users_email", users_table.c.email)
