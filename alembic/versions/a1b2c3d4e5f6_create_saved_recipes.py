"""Create users and saved_recipes

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-01 12:00:00.000000
"""

from alembic import op
import sqlalchemy as sa

revision = 'a1b2c3d4e5f6'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_index("ix_users_user_id", "users", ["user_id"])

    op.create_table(
        "saved_recipes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("ingredients", sa.JSON(), nullable=False),
        sa.Column("instructions", sa.JSON(), nullable=False),
        sa.Column("cooking_time", sa.Integer(), nullable=True),
        sa.Column("cuisine", sa.String(), nullable=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("servings", sa.Integer(), nullable=True),
        sa.Column("difficulty", sa.String(), nullable=False, server_default="medium"),
        sa.Column("nutritional_info", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.user_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_saved_recipes_id", "saved_recipes", ["id"])
    op.create_index("ix_saved_recipes_user_id", "saved_recipes", ["user_id"])
    op.create_index("ix_saved_recipes_user_created", "saved_recipes", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_saved_recipes_user_created", table_name="saved_recipes")
    op.drop_index("ix_saved_recipes_user_id", table_name="saved_recipes")
    op.drop_index("ix_saved_recipes_id", table_name="saved_recipes")
    op.drop_table("saved_recipes")
    op.drop_index("ix_users_user_id", table_name="users")
    op.drop_table("users")
