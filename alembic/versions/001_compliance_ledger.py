"""Compliance ledger tables.

Revision ID: 001_compliance_ledger
Revises:
Create Date: 2026-10-17

Creates ship_compliance, bank_entries, bank_applications, borrow_entries,
pools, pool_members and routes.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "001_compliance_ledger"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "ship_compliance",
        sa.Column("id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), primary_key=True),
        sa.Column("ship_id", sa.String(100), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        # gCO2eq, gCO2eq/MJ, MJ
        sa.Column("cb_gco2eq", sa.Float(), nullable=False),
        sa.Column("ghgie_actual", sa.Float(), nullable=False),
        sa.Column("ghgie_target", sa.Float(), nullable=False),
        sa.Column("energy_scope_mj", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.UniqueConstraint("ship_id", "year", name="uq_ship_compliance_ship_year"),
    )

    op.create_table(
        "bank_entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("ship_id", sa.String(100), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("banked_amount_gco2eq", sa.Float(), nullable=False),
        sa.Column("amount_gco2eq", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
    )
    op.create_index("ix_bank_entries_ship_id", "bank_entries", ["ship_id"])
    op.create_index("ix_bank_entries_ship_year", "bank_entries", ["ship_id", "year"])

    op.create_table(
        "bank_applications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("ship_id", sa.String(100), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("amount_gco2eq", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
    )
    op.create_index("ix_bank_applications_ship_year", "bank_applications", ["ship_id", "year"])

    op.create_table(
        "borrow_entries",
        sa.Column("id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), primary_key=True),
        sa.Column("ship_id", sa.String(100), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("amount_gco2eq", sa.Float(), nullable=False),
        sa.Column("aggravated_amount", sa.Float(), nullable=False),
        sa.Column("repaid", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("repaid_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("ship_id", "year", name="uq_borrow_entries_ship_year"),
    )
    op.create_index("ix_borrow_entries_ship_id", "borrow_entries", ["ship_id"])

    op.create_table(
        "pools",
        sa.Column("id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), primary_key=True),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("total_cb_before", sa.Float(), nullable=False),
        sa.Column("total_cb_after", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
    )
    op.create_index("ix_pools_year", "pools", ["year"])

    op.create_table(
        "pool_members",
        sa.Column("id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), primary_key=True),
        sa.Column("pool_id", postgresql.UUID(), sa.ForeignKey("pools.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("ship_id", sa.String(100), nullable=False),
        sa.Column("cb_before", sa.Float(), nullable=False),
        sa.Column("cb_after", sa.Float(), nullable=False),
    )
    op.create_index("ix_pool_members_pool_id", "pool_members", ["pool_id"])

    op.create_table(
        "routes",
        sa.Column("id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), primary_key=True),
        sa.Column("route_id", sa.String(100), nullable=False),
        sa.Column("vessel_type", sa.String(100), nullable=False),
        sa.Column("fuel_type", sa.String(50), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("ghg_intensity", sa.Float(), nullable=False),
        sa.Column("fuel_consumption_t", sa.Float(), nullable=False),
        sa.Column("distance_km", sa.Float(), nullable=False),
        sa.Column("total_emissions_t", sa.Float(), nullable=False),
        sa.Column("is_baseline", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
    )
    op.create_index("ix_routes_route_id", "routes", ["route_id"], unique=True)
    op.create_index("ix_routes_year", "routes", ["year"])
    op.create_index("ix_routes_created_at", "routes", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_routes_created_at", table_name="routes")
    op.drop_index("ix_routes_year", table_name="routes")
    op.drop_index("ix_routes_route_id", table_name="routes")
    op.drop_table("routes")
    op.drop_index("ix_pool_members_pool_id", table_name="pool_members")
    op.drop_table("pool_members")
    op.drop_index("ix_pools_year", table_name="pools")
    op.drop_table("pools")
    op.drop_index("ix_borrow_entries_ship_id", table_name="borrow_entries")
    op.drop_table("borrow_entries")
    op.drop_index("ix_bank_applications_ship_year", table_name="bank_applications")
    op.drop_table("bank_applications")
    op.drop_index("ix_bank_entries_ship_year", table_name="bank_entries")
    op.drop_index("ix_bank_entries_ship_id", table_name="bank_entries")
    op.drop_table("bank_entries")
    op.drop_table("ship_compliance")
