"""initial

Revision ID: 0001_initial
Revises: 
Create Date: 2026-10-17 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('buses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('registration_number', sa.String(length=64), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('seat_type', sa.String(length=32), nullable=False, server_default='seater'),
        sa.Column('model', sa.String(length=128), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('registration_number', name='buses_registration_number_key'),
    )
    op.create_index('ix_buses_registration_number', 'buses', ['registration_number'], unique=False)
    op.create_index('ix_buses_seat_type', 'buses', ['seat_type'], unique=False)

    op.create_table('seatmaps',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('bus_id', sa.Integer(), nullable=False),
        sa.Column('layout', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['bus_id'], ['buses.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('bus_id', name='seatmaps_bus_id_key'),
    )
    op.create_index('ix_seatmaps_bus_id', 'seatmaps', ['bus_id'], unique=False)


def downgrade():
    op.drop_index('ix_seatmaps_bus_id', table_name='seatmaps')
    op.drop_table('seatmaps')
    op.drop_index('ix_buses_seat_type', table_name='buses')
    op.drop_index('ix_buses_registration_number', table_name='buses')
    op.drop_table('buses')
