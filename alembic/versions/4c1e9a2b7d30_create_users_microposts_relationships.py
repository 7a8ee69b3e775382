"""Create users, microposts and relationships

Revision ID: 4c1e9a2b7d30
Revises:
Create Date: 2026-10-18 09:12:41.208113

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4c1e9a2b7d30"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_digest", sa.String(length=255), nullable=False),
        sa.Column("remember_token", sa.String(length=64), nullable=True),
        sa.Column("admin", sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_remember_token"), "users", ["remember_token"], unique=False)

    op.create_table(
        "microposts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("content", sa.String(length=140), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_microposts_id"), "microposts", ["id"], unique=False)
    op.create_index(op.f("ix_microposts_user_id"), "microposts", ["user_id"], unique=False)
    op.create_index(
        "ix_microposts_user_id_created_at", "microposts", ["user_id", "created_at"], unique=False
    )

    op.create_table(
        "relationships",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("follower_id", sa.Integer(), nullable=False),
        sa.Column("followed_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["follower_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["followed_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "follower_id", "followed_id", name="uq_relationships_follower_followed"
        ),
    )
    op.create_index(op.f("ix_relationships_id"), "relationships", ["id"], unique=False)
    op.create_index(
        op.f("ix_relationships_follower_id"), "relationships", ["follower_id"], unique=False
    )
    op.create_index(
        op.f("ix_relationships_followed_id"), "relationships", ["followed_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_relationships_followed_id"), table_name="relationships")
    op.drop_index(op.f("ix_relationships_follower_id"), table_name="relationships")
    op.drop_index(op.f("ix_relationships_id"), table_name="relationships")
    op.drop_table("relationships")

    op.drop_index("ix_microposts_user_id_created_at", table_name="microposts")
    op.drop_index(op.f("ix_microposts_user_id"), table_name="microposts")
    op.drop_index(op.f("ix_microposts_id"), table_name="microposts")
    op.drop_table("microposts")

    op.drop_index(op.f("ix_users_remember_token"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_table("users")
