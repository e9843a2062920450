"""create_users_table

Create the identity store:
- Users (anonymous until linked to one verified external identity)

Revision ID: 3f1c9a7d52e4
Revises:
Create Date: 2026-10-19 10:12:43.512208

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d52e4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # ========================================================================
    # USERS table
    # ========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("public_id", sa.String(64), nullable=False),  # Anonymous token
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("avatar_image", sa.Text(), nullable=True),
        sa.Column(
            "is_anonymous", sa.Boolean(), nullable=False, server_default=sa.true()
        ),
        sa.Column("external_id", sa.String(255), nullable=True),  # Set on link
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("public_id", name="uq_users_public_id"),
        sa.UniqueConstraint("external_id", name="uq_users_external_id"),
        sa.CheckConstraint(
            "(is_anonymous AND external_id IS NULL) "
            "OR (NOT is_anonymous AND external_id IS NOT NULL)",
            name="ck_users_link_state",
        ),
    )
    op.create_index("idx_users_email", "users", ["email"])

    # No updated_at trigger: the linking write sets updated_at itself


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_users_email", table_name="users")
    op.drop_table("users")
