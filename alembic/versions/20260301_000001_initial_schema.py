"""Initial Renta schema

Revision ID: 20260301_000001
Revises: None
Create Date: 2026-03-01

Creates every table of the property-management domain: users, properties,
manager assignments, units, tenants, payments, maintenance tickets, the agent
commission tables, documents, notifications, audit logs and reminder logs.

Enums are stored as VARCHAR with a CHECK constraint (native_enum=False) so the
same migration runs on SQL Server and SQLite.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20260301_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _enum(name: str, *values: str) -> sa.Enum:
    return sa.Enum(*values, name=name, native_enum=False, create_constraint=True)


def _timestamps(updated: bool = True) -> list:
    columns = [sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False)]
    if updated:
        columns.append(sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False))
    return columns


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('national_id', sa.String(50), nullable=True),
        sa.Column(
            'role',
            _enum('user_role', 'super_admin', 'agency', 'owner', 'manager', 'tenant', 'maintenance', 'agent'),
            nullable=False,
        ),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('permissions', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'properties',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('agency_id', sa.Integer(), nullable=True),
        sa.Column('performed_by_agent_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', _enum('property_type', 'apartment', 'house', 'commercial', 'other'), nullable=False),
        sa.Column('address', sa.String(500), nullable=False),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.Column('deleted_by', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_properties_user_id', ondelete='CASCADE'),
        # SQL Server rejects a second cascading path to users; these stay NO ACTION
        sa.ForeignKeyConstraint(['agency_id'], ['users.id'], name='fk_properties_agency_id'),
        sa.ForeignKeyConstraint(['performed_by_agent_id'], ['users.id'], name='fk_properties_agent_id'),
        sa.ForeignKeyConstraint(['deleted_by'], ['users.id'], name='fk_properties_deleted_by'),
    )
    op.create_index('ix_properties_user_id', 'properties', ['user_id'])
    op.create_index('ix_properties_agency_id', 'properties', ['agency_id'])
    op.create_index('ix_properties_is_deleted', 'properties', ['is_deleted'])

    op.create_table(
        'property_managers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('manager_id', sa.Integer(), nullable=False),
        sa.Column('invited_by', sa.Integer(), nullable=False),
        sa.Column('permissions', sa.JSON(), nullable=False),
        sa.Column('status', _enum('manager_status', 'pending', 'active', 'revoked'), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('property_id', 'manager_id', name='property_manager_unique'),
        sa.ForeignKeyConstraint(
            ['property_id'], ['properties.id'], name='fk_property_managers_property_id', ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(['manager_id'], ['users.id'], name='fk_property_managers_manager_id'),
        sa.ForeignKeyConstraint(['invited_by'], ['users.id'], name='fk_property_managers_invited_by'),
    )
    op.create_index('ix_property_managers_manager_id', 'property_managers', ['manager_id'])

    op.create_table(
        'units',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('unit_number', sa.String(50), nullable=False),
        sa.Column('floor', sa.Integer(), nullable=True),
        sa.Column('bedrooms', sa.Integer(), nullable=False),
        sa.Column('bathrooms', sa.Integer(), nullable=False),
        sa.Column('monthly_rent', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('payment_due_day', sa.Integer(), nullable=False),
        sa.Column('status', _enum('unit_status', 'vacant', 'occupied', 'maintenance'), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], name='fk_units_property_id', ondelete='CASCADE'),
    )
    op.create_index('ix_units_property_id', 'units', ['property_id'])
    op.create_index('ix_units_status', 'units', ['status'])

    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('unit_id', sa.Integer(), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('user_account_id', sa.Integer(), nullable=True),
        sa.Column('performed_by_agent_id', sa.Integer(), nullable=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('national_id', sa.String(50), nullable=True),
        sa.Column('emergency_contact', sa.String(200), nullable=True),
        sa.Column('emergency_phone', sa.String(50), nullable=True),
        sa.Column('status', _enum('tenant_status', 'active', 'late', 'exited'), nullable=False),
        sa.Column('lease_start_date', sa.Date(), nullable=True),
        sa.Column('lease_end_date', sa.Date(), nullable=True),
        sa.Column('rent_due_day', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['unit_id'], ['units.id'], name='fk_tenants_unit_id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_tenants_user_id'),
        sa.ForeignKeyConstraint(['user_account_id'], ['users.id'], name='fk_tenants_user_account_id'),
        sa.ForeignKeyConstraint(['performed_by_agent_id'], ['users.id'], name='fk_tenants_agent_id'),
    )
    op.create_index('ix_tenants_unit_id', 'tenants', ['unit_id'])
    op.create_index('ix_tenants_user_id', 'tenants', ['user_id'])
    op.create_index('ix_tenants_status', 'tenants', ['status'])
    # Unique only among non-null values (filtered index on SQL Server)
    op.create_index(
        'ux_tenants_user_account_id',
        'tenants',
        ['user_account_id'],
        unique=True,
        mssql_where=sa.text('user_account_id IS NOT NULL'),
        sqlite_where=sa.text('user_account_id IS NOT NULL'),
    )

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('unit_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('payment_method', _enum('payment_method', 'cash', 'momo', 'bank'), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('period_month', sa.Integer(), nullable=False),
        sa.Column('period_year', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('received_by', sa.Integer(), nullable=True),
        sa.Column('performed_by_agent_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('period_month >= 1 AND period_month <= 12', name='ck_payments_period_month'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], name='fk_payments_tenant_id'),
        sa.ForeignKeyConstraint(['unit_id'], ['units.id'], name='fk_payments_unit_id', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['received_by'], ['users.id'], name='fk_payments_received_by'),
        sa.ForeignKeyConstraint(['performed_by_agent_id'], ['users.id'], name='fk_payments_agent_id'),
    )
    op.create_index('ix_payments_tenant_id', 'payments', ['tenant_id'])
    op.create_index('ix_payments_unit_id', 'payments', ['unit_id'])
    op.create_index('ix_payments_period', 'payments', ['period_year', 'period_month'])

    op.create_table(
        'maintenance_tickets',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('unit_id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=True),
        sa.Column('assigned_to', sa.Integer(), nullable=True),
        sa.Column(
            'category',
            _enum('ticket_category', 'plumbing', 'electrical', 'structural', 'appliance', 'other'),
            nullable=False,
        ),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('priority', _enum('ticket_priority', 'low', 'medium', 'high', 'urgent'), nullable=False),
        sa.Column(
            'status',
            _enum('ticket_status', 'pending', 'in_progress', 'completed', 'cancelled'),
            nullable=False,
        ),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('attachments', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['unit_id'], ['units.id'], name='fk_maintenance_tickets_unit_id', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], name='fk_maintenance_tickets_tenant_id'),
        sa.ForeignKeyConstraint(['assigned_to'], ['users.id'], name='fk_maintenance_tickets_assigned_to'),
    )
    op.create_index('ix_maintenance_tickets_unit_id', 'maintenance_tickets', ['unit_id'])
    op.create_index('ix_maintenance_tickets_assigned_to', 'maintenance_tickets', ['assigned_to'])
    op.create_index('ix_maintenance_tickets_status', 'maintenance_tickets', ['status'])

    op.create_table(
        'agent_applications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('national_id', sa.String(50), nullable=True),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('motivation', sa.Text(), nullable=True),
        sa.Column('experience', sa.Text(), nullable=True),
        sa.Column('status', _enum('application_status', 'pending', 'approved', 'rejected'), nullable=False),
        sa.Column('reviewed_by', sa.Integer(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['reviewed_by'], ['users.id'], name='fk_agent_applications_reviewed_by'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_agent_applications_user_id'),
    )
    op.create_index('ix_agent_applications_email', 'agent_applications', ['email'])
    op.create_index('ix_agent_applications_status', 'agent_applications', ['status'])

    op.create_table(
        'commission_rules',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('action_type', sa.String(50), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('commission_type', _enum('commission_type', 'percentage', 'fixed'), nullable=False),
        sa.Column('commission_value', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('min_amount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('max_amount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_by', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('action_type', name='uq_commission_rules_action_type'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], name='fk_commission_rules_created_by'),
    )

    op.create_table(
        'agent_transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('agent_id', sa.Integer(), nullable=False),
        sa.Column('action_type', sa.String(50), nullable=False),
        sa.Column('target_user_type', _enum('target_user_type', 'owner', 'tenant'), nullable=False),
        sa.Column('target_user_id', sa.Integer(), nullable=True),
        sa.Column('target_tenant_id', sa.Integer(), nullable=True),
        sa.Column('related_entity_type', sa.String(50), nullable=True),
        sa.Column('related_entity_id', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('transaction_amount', sa.Numeric(precision=12, scale=2), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['agent_id'], ['users.id'], name='fk_agent_transactions_agent_id', ondelete='CASCADE'),
    )
    op.create_index('ix_agent_transactions_agent_id', 'agent_transactions', ['agent_id'])
    op.create_index('ix_agent_transactions_action_type', 'agent_transactions', ['action_type'])
    op.create_index('ix_agent_transactions_created_at', 'agent_transactions', ['created_at'])

    op.create_table(
        'agent_commissions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('agent_id', sa.Integer(), nullable=False),
        sa.Column('transaction_id', sa.Integer(), nullable=False),
        sa.Column('commission_rule_id', sa.Integer(), nullable=True),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('status', _enum('commission_status', 'pending', 'paid', 'cancelled'), nullable=False),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('paid_by', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('transaction_id', name='uq_agent_commissions_transaction_id'),
        sa.ForeignKeyConstraint(['agent_id'], ['users.id'], name='fk_agent_commissions_agent_id', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(
            ['transaction_id'], ['agent_transactions.id'], name='fk_agent_commissions_transaction_id'
        ),
        sa.ForeignKeyConstraint(
            ['commission_rule_id'], ['commission_rules.id'], name='fk_agent_commissions_rule_id', ondelete='SET NULL'
        ),
        sa.ForeignKeyConstraint(['paid_by'], ['users.id'], name='fk_agent_commissions_paid_by'),
    )
    op.create_index('ix_agent_commissions_agent_id', 'agent_commissions', ['agent_id'])
    op.create_index('ix_agent_commissions_status', 'agent_commissions', ['status'])

    op.create_table(
        'documents',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('entity_type', _enum('document_entity_type', 'tenant', 'property', 'unit', 'payment'), nullable=False),
        sa.Column('entity_id', sa.Integer(), nullable=False),
        sa.Column(
            'document_type',
            _enum(
                'document_type',
                'lease_agreement', 'id_copy', 'proof_of_income', 'reference_letter', 'property_deed',
                'insurance', 'inspection_report', 'receipt', 'other',
            ),
            nullable=False,
        ),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('mime_type', sa.String(100), nullable=False),
        sa.Column('size', sa.Integer(), nullable=False),
        sa.Column('url', sa.String(500), nullable=False),
        sa.Column('public_id', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column(
            'status',
            _enum('document_status', 'draft', 'pending_signature', 'signed', 'rejected'),
            nullable=False,
        ),
        sa.Column('signed_by', sa.Integer(), nullable=True),
        sa.Column('signed_at', sa.DateTime(), nullable=True),
        sa.Column('requested_signature_at', sa.DateTime(), nullable=True),
        sa.Column('signature_method', _enum('signature_method', 'typed', 'uploaded', 'physical'), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_documents_user_id', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['signed_by'], ['users.id'], name='fk_documents_signed_by'),
    )
    op.create_index('ix_documents_user_id', 'documents', ['user_id'])
    op.create_index('ix_documents_entity', 'documents', ['entity_type', 'entity_id'])
    op.create_index('ix_documents_document_type', 'documents', ['document_type'])

    entity_types = ('user', 'property', 'unit', 'tenant', 'payment', 'maintenance', 'document', 'manager', 'report', 'system')

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column(
            'type',
            _enum(
                'notification_type',
                'payment_reminder', 'payment_received', 'payment_overdue', 'lease_expiry',
                'maintenance_update', 'maintenance_new', 'tenant_added', 'tenant_removed',
                'property_update', 'system', 'announcement', 'message',
            ),
            nullable=False,
        ),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('priority', _enum('notification_priority', 'low', 'normal', 'high', 'urgent'), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.Column('entity_type', _enum('notification_entity_type', *entity_types), nullable=True),
        sa.Column('entity_id', sa.Integer(), nullable=True),
        sa.Column('action_url', sa.String(500), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_notifications_user_id', ondelete='CASCADE'),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_is_read', 'notifications', ['is_read'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('action', sa.String(100), nullable=False),
        sa.Column('entity_type', _enum('audit_entity_type', *entity_types), nullable=False),
        sa.Column('entity_id', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('ip_address', sa.String(64), nullable=True),
        sa.Column('user_agent', sa.String(500), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_audit_logs_user_id', ondelete='SET NULL'),
    )
    op.create_index('ix_audit_logs_user_id', 'audit_logs', ['user_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])

    op.create_table(
        'reminder_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('type', _enum('reminder_channel', 'sms', 'email'), nullable=False),
        sa.Column('trigger_type', _enum('reminder_trigger', 'before_due', 'on_due', 'after_due'), nullable=False),
        sa.Column('status', _enum('reminder_status', 'sent', 'failed'), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('sent_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], name='fk_reminder_logs_tenant_id', ondelete='CASCADE'),
    )
    op.create_index('ix_reminder_logs_tenant_id', 'reminder_logs', ['tenant_id'])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    for table in (
        'reminder_logs',
        'audit_logs',
        'notifications',
        'documents',
        'agent_commissions',
        'agent_transactions',
        'commission_rules',
        'agent_applications',
        'maintenance_tickets',
        'payments',
        'tenants',
        'units',
        'property_managers',
        'properties',
        'users',
    ):
        op.drop_table(table)
