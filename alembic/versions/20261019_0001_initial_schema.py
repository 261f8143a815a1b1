"""initial inventory schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "city",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("country", sa.String(length=8), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_city_id"), "city", ["id"], unique=False)
    op.create_index(op.f("ix_city_name"), "city", ["name"], unique=True)

    op.create_table(
        "product",
        sa.Column("sku", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("price", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("sku"),
        sqlite_autoincrement=True,
    )
    op.create_index(op.f("ix_product_sku"), "product", ["sku"], unique=False)
    op.create_index(op.f("ix_product_name"), "product", ["name"], unique=True)

    op.create_table(
        "warehouse",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("city_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["city_id"], ["city.id"]),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index(op.f("ix_warehouse_id"), "warehouse", ["id"], unique=False)
    op.create_index(op.f("ix_warehouse_name"), "warehouse", ["name"], unique=True)
    op.create_index(op.f("ix_warehouse_city_id"), "warehouse", ["city_id"], unique=False)

    op.create_table(
        "inventory",
        sa.Column("sku", sa.Integer(), nullable=False),
        sa.Column("warehouse_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
        sa.PrimaryKeyConstraint("sku", "warehouse_id"),
    )
    op.create_index(op.f("ix_inventory_warehouse_id"), "inventory", ["warehouse_id"], unique=False)

    op.create_table(
        "inventory_change",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("sku", sa.Integer(), nullable=False),
        sa.Column("warehouse_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index(op.f("ix_inventory_change_id"), "inventory_change", ["id"], unique=False)
    op.create_index(op.f("ix_inventory_change_sku"), "inventory_change", ["sku"], unique=False)
    op.create_index(
        op.f("ix_inventory_change_warehouse_id"),
        "inventory_change",
        ["warehouse_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_inventory_change_warehouse_id"), table_name="inventory_change")
    op.drop_index(op.f("ix_inventory_change_sku"), table_name="inventory_change")
    op.drop_index(op.f("ix_inventory_change_id"), table_name="inventory_change")
    op.drop_table("inventory_change")

    op.drop_index(op.f("ix_inventory_warehouse_id"), table_name="inventory")
    op.drop_table("inventory")

    op.drop_index(op.f("ix_warehouse_city_id"), table_name="warehouse")
    op.drop_index(op.f("ix_warehouse_name"), table_name="warehouse")
    op.drop_index(op.f("ix_warehouse_id"), table_name="warehouse")
    op.drop_table("warehouse")

    op.drop_index(op.f("ix_product_name"), table_name="product")
    op.drop_index(op.f("ix_product_sku"), table_name="product")
    op.drop_table("product")

    op.drop_index(op.f("ix_city_name"), table_name="city")
    op.drop_index(op.f("ix_city_id"), table_name="city")
    op.drop_table("city")
