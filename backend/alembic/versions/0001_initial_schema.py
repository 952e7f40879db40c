"""initial schema: vouchers, activity log and mini atm bookkeeping

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
    ]


account_key = sa.Enum('BRI', 'MANDIRI', 'DANA', 'SAVE_PLUS', 'CASH', name='accountkey')
transaction_flow = sa.Enum('CASH_OUT', 'CASH_IN', name='transactionflow')
activity_type = sa.Enum('SALE', 'EDIT', 'DELETE_VOUCHER', 'DELETE_PROVIDER', 'IMPORT', 'ADD_STOCK', name='activitytype')


def upgrade() -> None:
    op.create_table(
        'app_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('value', sa.String(length=255), nullable=False),
        sa.Column('tenant_id', sa.String(), nullable=True),
        *_audit_columns(),
        sa.UniqueConstraint('name', 'tenant_id', name='_app_config_name_tenant_uc'),
    )
    op.create_index('ix_app_config_name', 'app_config', ['name'])
    op.create_index('ix_app_config_tenant_id', 'app_config', ['tenant_id'])

    op.create_table(
        'providers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('logo_url', sa.String(), nullable=True),
        sa.Column('original_id', sa.Integer(), nullable=False),
        *_audit_columns(),
        sa.UniqueConstraint('original_id', 'tenant_id', name='_providers_original_id_tenant_uc'),
    )
    op.create_index('ix_providers_tenant_id', 'providers', ['tenant_id'])

    op.create_table(
        'vouchers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.String(), nullable=True),
        sa.Column('provider_id', sa.Integer(), sa.ForeignKey('providers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('total_stock', sa.Integer(), nullable=False),
        sa.Column('remaining_stock', sa.Integer(), nullable=False),
        sa.Column('planned_stock', sa.Integer(), nullable=False),
        sa.Column('cost_price', sa.Numeric(14, 2), nullable=False),
        sa.Column('sell_price', sa.Numeric(14, 2), nullable=False),
        *_audit_columns(),
        sa.UniqueConstraint('provider_id', 'name', name='_vouchers_provider_name_uc'),
    )
    op.create_index('ix_vouchers_tenant_id', 'vouchers', ['tenant_id'])
    op.create_index('ix_vouchers_provider_id', 'vouchers', ['provider_id'])

    op.create_table(
        'activity_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.String(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('type', activity_type, nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
    )
    op.create_index('ix_activity_logs_tenant_id', 'activity_logs', ['tenant_id'])
    op.create_index('ix_activity_logs_timestamp', 'activity_logs', ['timestamp'])

    op.create_table(
        'atm_ledgers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('initial_balance', sa.JSON(), nullable=False),
        sa.Column('current_balance', sa.JSON(), nullable=False),
        *_audit_columns(),
    )
    op.create_index('ix_atm_ledgers_tenant_id', 'atm_ledgers', ['tenant_id'])
    op.create_index('ix_atm_ledgers_date', 'atm_ledgers', ['date'])

    op.create_table(
        'atm_transaction_types',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('flow', transaction_flow, nullable=False),
        *_audit_columns(),
    )
    op.create_index('ix_atm_transaction_types_tenant_id', 'atm_transaction_types', ['tenant_id'])

    op.create_table(
        'atm_transaction_rules',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.String(), nullable=True),
        sa.Column('transaction_type_id', sa.Integer(), sa.ForeignKey('atm_transaction_types.id', ondelete='CASCADE'), nullable=False),
        sa.Column('min_amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('max_amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('bank_admin', sa.Numeric(14, 2), nullable=False),
        sa.Column('agent_admin', sa.Numeric(14, 2), nullable=False),
        *_audit_columns(),
    )
    op.create_index('ix_atm_transaction_rules_tenant_id', 'atm_transaction_rules', ['tenant_id'])
    op.create_index('ix_atm_transaction_rules_transaction_type_id', 'atm_transaction_rules', ['transaction_type_id'])

    op.create_table(
        'atm_transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.String(), nullable=True),
        sa.Column('ledger_id', sa.Integer(), sa.ForeignKey('atm_ledgers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('type_id', sa.Integer(), nullable=False),
        sa.Column('type_name', sa.String(), nullable=False),
        sa.Column('amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('bank_admin', sa.Numeric(14, 2), nullable=False),
        sa.Column('agent_admin', sa.Numeric(14, 2), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('source_account', account_key, nullable=False),
        sa.Column('destination_account', account_key, nullable=False),
        sa.Column('profit_destination', account_key, nullable=False),
        *_audit_columns(),
    )
    op.create_index('ix_atm_transactions_tenant_id', 'atm_transactions', ['tenant_id'])
    op.create_index('ix_atm_transactions_ledger_id', 'atm_transactions', ['ledger_id'])
    op.create_index('ix_atm_transactions_timestamp', 'atm_transactions', ['timestamp'])


def downgrade() -> None:
    op.drop_table('atm_transactions')
    op.drop_table('atm_transaction_rules')
    op.drop_table('atm_transaction_types')
    op.drop_table('atm_ledgers')
    op.drop_table('activity_logs')
    op.drop_table('vouchers')
    op.drop_table('providers')
    op.drop_table('app_config')

    bind = op.get_bind()
    for enum_type in (account_key, transaction_flow, activity_type):
        enum_type.drop(bind, checkfirst=True)
