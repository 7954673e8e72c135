"""Create users, products and subscriptions tables."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "001_create_marketplace_core"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("email", sa.String(), nullable=False, unique=True),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    op.create_table(
        "products",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column(
            "seller_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.String(length=20),
            nullable=False,
            server_default=sa.text("'available'"),
        ),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_products_seller_status", "products", ["seller_id", "status"])

    op.create_table(
        "subscriptions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("plan", sa.String(length=20), nullable=False),
        sa.Column(
            "billing_cycle",
            sa.String(length=20),
            nullable=False,
            server_default=sa.text("'mensual'"),
        ),
        sa.Column("price", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "status",
            sa.String(length=20),
            nullable=False,
            server_default=sa.text("'activa'"),
        ),
        sa.Column("products_limit", sa.Integer(), nullable=False, server_default=sa.text("10")),
        sa.Column(
            "featured_products_limit",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("1"),
        ),
        sa.Column(
            "analytics_enabled",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("start_date <= end_date", name="ck_subscriptions_period"),
        sa.CheckConstraint("price >= 0", name="ck_subscriptions_price"),
        sa.CheckConstraint("products_limit >= 1", name="ck_subscriptions_products_limit"),
        sa.CheckConstraint(
            "featured_products_limit >= 0", name="ck_subscriptions_featured_limit"
        ),
    )
    op.create_index(
        "ix_subscriptions_user_status_end",
        "subscriptions",
        ["user_id", "status", "end_date"],
    )


def downgrade() -> None:
    op.drop_index("ix_subscriptions_user_status_end", table_name="subscriptions")
    op.drop_table("subscriptions")
    op.drop_index("ix_products_seller_status", table_name="products")
    op.drop_table("products")
    op.drop_table("users")
