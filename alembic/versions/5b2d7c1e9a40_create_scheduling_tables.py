"""create scheduling tables

Revision ID: 5b2d7c1e9a40
Revises:
Create Date: 2025-10-21 09:12:44.501218

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '5b2d7c1e9a40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # 1. professionals
    op.create_table('professionals',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('owner', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('skills', sa.JSON(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('capacity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('capacity >= 1', name='ck_professionals_capacity'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_professionals_owner'), 'professionals', ['owner'], unique=False)

    # 2. services
    op.create_table('services',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('owner', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('duration_min', sa.Integer(), nullable=False),
        sa.Column('buffer_before_min', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('buffer_after_min', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('required_skills', sa.JSON(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=True, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('duration_min >= 5', name='ck_services_duration'),
        sa.CheckConstraint('buffer_before_min >= 0', name='ck_services_buffer_before'),
        sa.CheckConstraint('buffer_after_min >= 0', name='ck_services_buffer_after'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_services_owner'), 'services', ['owner'], unique=False)
    op.create_index(op.f('ix_services_active'), 'services', ['active'], unique=False)

    # 3. availability_templates
    op.create_table('availability_templates',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('owner', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('timezone', sa.String(length=64), nullable=False),
        sa.Column('windows', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_availability_templates_owner'), 'availability_templates', ['owner'], unique=False)

    # 4. assignments
    op.create_table('assignments',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('owner', sa.String(length=100), nullable=False),
        sa.Column('professional_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('template_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['professional_id'], ['professionals.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['template_id'], ['availability_templates.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_assignments_owner'), 'assignments', ['owner'], unique=False)
    op.create_index(op.f('ix_assignments_professional_id'), 'assignments', ['professional_id'], unique=False)
    op.create_index(op.f('ix_assignments_template_id'), 'assignments', ['template_id'], unique=False)

    # 5. time_off
    op.create_table('time_off',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('owner', sa.String(length=100), nullable=False),
        sa.Column('professional_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_min', sa.Integer(), nullable=True),
        sa.Column('end_min', sa.Integer(), nullable=True),
        sa.Column('reason', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('start_min IS NULL OR end_min IS NULL OR start_min < end_min', name='ck_time_off_range'),
        sa.ForeignKeyConstraint(['professional_id'], ['professionals.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_time_off_owner'), 'time_off', ['owner'], unique=False)
    op.create_index(op.f('ix_time_off_professional_id'), 'time_off', ['professional_id'], unique=False)
    op.create_index(op.f('ix_time_off_date'), 'time_off', ['date'], unique=False)

    # 6. appointments
    op.create_table('appointments',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('owner', sa.String(length=100), nullable=False),
        sa.Column('client_id', sa.String(), nullable=False),
        sa.Column('client_name', sa.String(), nullable=False),
        sa.Column('professional_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('service_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('start', sa.DateTime(timezone=True), nullable=False),
        sa.Column('duration_min', sa.Integer(), nullable=False),
        sa.Column('buffer_before_min', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('buffer_after_min', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(), nullable=False, server_default='confirmed'),
        sa.Column('created_by', sa.String(), nullable=False, server_default='human'),
        sa.Column('idempotency_key', sa.String(length=128), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancellation_reason', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['professional_id'], ['professionals.id']),
        sa.ForeignKeyConstraint(['service_id'], ['services.id']),
        sa.UniqueConstraint('owner', 'idempotency_key', name='uq_appointments_owner_idempotency_key'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_appointments_owner'), 'appointments', ['owner'], unique=False)
    op.create_index('ix_appointments_owner_professional_start', 'appointments',
                    ['owner', 'professional_id', 'start'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""

    # Drop tables in reverse order (due to foreign keys)
    op.drop_index('ix_appointments_owner_professional_start', 'appointments')
    op.drop_index(op.f('ix_appointments_owner'), 'appointments')
    op.drop_table('appointments')

    op.drop_index(op.f('ix_time_off_date'), 'time_off')
    op.drop_index(op.f('ix_time_off_professional_id'), 'time_off')
    op.drop_index(op.f('ix_time_off_owner'), 'time_off')
    op.drop_table('time_off')

    op.drop_index(op.f('ix_assignments_template_id'), 'assignments')
    op.drop_index(op.f('ix_assignments_professional_id'), 'assignments')
    op.drop_index(op.f('ix_assignments_owner'), 'assignments')
    op.drop_table('assignments')

    op.drop_index(op.f('ix_availability_templates_owner'), 'availability_templates')
    op.drop_table('availability_templates')

    op.drop_index(op.f('ix_services_active'), 'services')
    op.drop_index(op.f('ix_services_owner'), 'services')
    op.drop_table('services')

    op.drop_index(op.f('ix_professionals_owner'), 'professionals')
    op.drop_table('professionals')
