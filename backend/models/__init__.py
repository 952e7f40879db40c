from models.app_config import AppConfig
from models.providers import Provider
from models.vouchers import Voucher
from models.activity_logs import ActivityLog, ActivityType
from models.atm_ledgers import AtmLedger, AccountKey
from models.atm_transaction_types import AtmTransactionType, TransactionFlow
from models.atm_transaction_rules import AtmTransactionRule
from models.atm_transactions import AtmTransaction

__all__ = ['AccountKey', 'ActivityLog', 'ActivityType', 'AppConfig', 'AtmLedger', 'AtmTransaction', 'AtmTransactionRule', 'AtmTransactionType', 'Provider', 'TransactionFlow', 'Voucher',]
