"""Collections that can be mirrored and streamed, keyed by their URL name."""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Type

from pydantic import BaseModel

from models.activity_logs import ActivityLog as ActivityLogModel
from models.atm_ledgers import AtmLedger as AtmLedgerModel
from models.atm_transaction_rules import AtmTransactionRule as AtmTransactionRuleModel
from models.atm_transaction_types import AtmTransactionType as AtmTransactionTypeModel
from models.atm_transactions import AtmTransaction as AtmTransactionModel
from models.providers import Provider as ProviderModel
from models.vouchers import Voucher as VoucherModel
from schemas.activity_logs import ActivityLog
from schemas.atm_ledgers import AtmLedger
from schemas.atm_transaction_rules import AtmTransactionRule
from schemas.atm_transaction_types import AtmTransactionType
from schemas.atm_transactions import AtmTransaction
from schemas.providers import Provider
from schemas.vouchers import Voucher


@dataclass(frozen=True)
class CollectionSpec:
    model: type
    schema: Type[BaseModel]
    order_by: Callable[[], List] = field(default=lambda: [])
    # Query parameters the stream requires, mapped onto model columns
    required_filters: Dict[str, str] = field(default_factory=dict)

    def serialize(self, row) -> dict:
        return self.schema.model_validate(row).model_dump(mode="json")


COLLECTIONS: Dict[str, CollectionSpec] = {
    "providers": CollectionSpec(
        ProviderModel, Provider,
        lambda: [ProviderModel.original_id.asc(), ProviderModel.id.asc()],
    ),
    "vouchers": CollectionSpec(
        VoucherModel, Voucher,
        lambda: [VoucherModel.provider_id.asc(), VoucherModel.id.asc()],
    ),
    "activity-logs": CollectionSpec(
        ActivityLogModel, ActivityLog,
        lambda: [ActivityLogModel.timestamp.desc(), ActivityLogModel.id.desc()],
    ),
    "ledgers": CollectionSpec(
        AtmLedgerModel, AtmLedger,
        lambda: [AtmLedgerModel.date.desc(), AtmLedgerModel.id.desc()],
    ),
    "transactions": CollectionSpec(
        AtmTransactionModel, AtmTransaction,
        lambda: [AtmTransactionModel.timestamp.asc(), AtmTransactionModel.id.asc()],
        required_filters={"ledger_id": "ledger_id"},
    ),
    "transaction-types": CollectionSpec(
        AtmTransactionTypeModel, AtmTransactionType,
        lambda: [AtmTransactionTypeModel.id.asc()],
    ),
    "transaction-rules": CollectionSpec(
        AtmTransactionRuleModel, AtmTransactionRule,
        lambda: [
            AtmTransactionRuleModel.transaction_type_id.asc(),
            AtmTransactionRuleModel.min_amount.asc(),
            AtmTransactionRuleModel.id.asc(),
        ],
    ),
}


def get_collection(name: str) -> Optional[CollectionSpec]:
    return COLLECTIONS.get(name)
