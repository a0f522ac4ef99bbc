"""create transport pricing configs table

Revision ID: 3b7e91c4d2a0
Revises:
Create Date: 2025-11-12 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b7e91c4d2a0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'transport_pricing_configs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('client_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('config_type', sa.String(length=32), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('version', sa.String(length=32), nullable=False),
        sa.Column('active', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('base_rates', sa.JSON(), nullable=False),
        sa.Column('distance_rates', sa.JSON(), nullable=False),
        sa.Column('weight_rates', sa.JSON(), nullable=False),
        sa.Column('special_handling_rates', sa.JSON(), nullable=False),
        sa.Column('surcharges', sa.JSON(), nullable=False),
        sa.Column('additional_costs', sa.JSON(), nullable=False),
        sa.Column('holidays', sa.JSON(), nullable=False),
        sa.Column('currency_code', sa.String(length=10), nullable=False),
        sa.Column('currency_symbol', sa.String(length=10), nullable=False),
        sa.Column('decimal_places', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('decimal_places >= 0 AND decimal_places <= 4', name=op.f('ck_transport_pricing_configs_decimal_places')),
        sa.CheckConstraint("config_type IN ('default','custom','premium','economy')", name=op.f('ck_transport_pricing_configs_config_type')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_transport_pricing_configs')),
    )
    op.create_index(op.f('ix_transport_pricing_configs_client_id'), 'transport_pricing_configs', ['client_id'], unique=False)
    op.create_index(
        'ix_transport_pricing_configs_client_active',
        'transport_pricing_configs',
        ['client_id', 'config_type', 'active'],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index('ix_transport_pricing_configs_client_active', table_name='transport_pricing_configs')
    op.drop_index(op.f('ix_transport_pricing_configs_client_id'), table_name='transport_pricing_configs')
    op.drop_table('transport_pricing_configs')
