from decimal import Decimal
from typing import Optional
import logging

from sqlalchemy.orm import Session
from models.atm_ledgers import AccountKey
from models.atm_transactions import AtmTransaction
from models.atm_transaction_types import TransactionFlow
from schemas.atm_transactions import AtmTransactionCreate, AtmTransactionUpdate
from crud.atm_ledgers import get_ledger, recalculate_ledger_balance
from crud.atm_transaction_rules import lookup_admin_fee
from crud.atm_transaction_types import account_defaults, get_transaction_type
from utils import local_now

logger = logging.getLogger(__name__)

def get_transaction(db: Session, transaction_id: int, ledger_id: int, tenant_id: str):
    return db.query(AtmTransaction).filter(
        AtmTransaction.id == transaction_id,
        AtmTransaction.ledger_id == ledger_id,
        AtmTransaction.tenant_id == tenant_id,
    ).first()

def _apply_flow(data: dict, flow: TransactionFlow, fallback: Optional[AccountKey] = None):
    """
    Pin the flow's fixed side to the cash drawer. The other side must be a
    non-cash account; when it is missing it becomes ``fallback`` or BRI.
    """
    defaults = account_defaults(flow)
    data[defaults.fixed_field] = defaults.fixed_account
    chosen = data.get(defaults.editable_field)
    if chosen is None:
        chosen = fallback if fallback in defaults.editable_accounts else defaults.editable_accounts[0]
    if chosen not in defaults.editable_accounts:
        raise ValueError(f"{defaults.editable_field} must be a non-cash account for a {flow.value} transaction")
    data[defaults.editable_field] = chosen

def _resolve_type(db: Session, type_id: int, tenant_id: str):
    transaction_type = get_transaction_type(db, type_id, tenant_id)
    if transaction_type is None:
        raise ValueError("Invalid transaction type")
    return transaction_type

def add_transaction(db: Session, ledger_id: int, transaction: AtmTransactionCreate, tenant_id: str, user_id: str):
    """
    Record a transaction in a ledger and replay the ledger balance.

    Returns None when the ledger does not exist; raises ValueError for an unknown type.
    """
    if get_ledger(db, ledger_id, tenant_id) is None:
        return None
    transaction_type = _resolve_type(db, transaction.type_id, tenant_id)

    data = transaction.model_dump()
    _apply_flow(data, transaction_type.flow)
    if data["bank_admin"] is None or data["agent_admin"] is None:
        data["bank_admin"], data["agent_admin"], _ = lookup_admin_fee(db, tenant_id, transaction_type.id, data["amount"])
    data["notes"] = data["notes"] or ""

    db_transaction = AtmTransaction(
        **data,
        ledger_id=ledger_id,
        type_name=transaction_type.name,
        timestamp=local_now(),
        tenant_id=tenant_id,
        created_by=user_id,
    )
    db.add(db_transaction)
    db.commit()
    db.refresh(db_transaction)
    recalculate_ledger_balance(db, ledger_id, tenant_id)
    return db_transaction

def update_transaction(db: Session, ledger_id: int, transaction_id: int, transaction: AtmTransactionUpdate, tenant_id: str, user_id: str):
    db_transaction = get_transaction(db, transaction_id, ledger_id, tenant_id)
    if db_transaction is None:
        return None

    update_data = {k: v for k, v in transaction.model_dump(exclude_unset=True).items() if v is not None}
    type_changed = "type_id" in update_data and update_data["type_id"] != db_transaction.type_id
    amount_changed = "amount" in update_data and Decimal(update_data["amount"]) != Decimal(db_transaction.amount)
    fees_given = "bank_admin" in update_data and "agent_admin" in update_data

    transaction_type = None
    if type_changed:
        transaction_type = _resolve_type(db, update_data["type_id"], tenant_id)
        update_data["type_name"] = transaction_type.name
    else:
        # The type may have been deleted since; then the stored accounts are left alone
        transaction_type = get_transaction_type(db, db_transaction.type_id, tenant_id)

    if transaction_type is not None:
        accounts = {
            "source_account": update_data.get("source_account", db_transaction.source_account),
            "destination_account": update_data.get("destination_account", db_transaction.destination_account),
        }
        editable_field = account_defaults(transaction_type.flow).editable_field
        fallback = None
        if editable_field not in update_data and accounts[editable_field] == AccountKey.CASH:
            # Switching the flow leaves cash on the editable side; the account from the other side takes its place
            fallback = accounts["destination_account" if editable_field == "source_account" else "source_account"]
            accounts[editable_field] = None
        _apply_flow(accounts, transaction_type.flow, fallback=fallback)
        update_data.update(accounts)

    for key, value in update_data.items():
        setattr(db_transaction, key, value)

    if (type_changed or amount_changed) and not fees_given:
        bank_admin, agent_admin, _ = lookup_admin_fee(db, tenant_id, db_transaction.type_id, db_transaction.amount)
        db_transaction.bank_admin = bank_admin
        db_transaction.agent_admin = agent_admin

    db_transaction.updated_at = local_now()
    db_transaction.updated_by = user_id
    db.commit()
    db.refresh(db_transaction)
    recalculate_ledger_balance(db, ledger_id, tenant_id)
    return db_transaction

def delete_transaction(db: Session, ledger_id: int, transaction_id: int, tenant_id: str) -> bool:
    db_transaction = get_transaction(db, transaction_id, ledger_id, tenant_id)
    if db_transaction is None:
        return False
    db.delete(db_transaction)
    db.commit()
    recalculate_ledger_balance(db, ledger_id, tenant_id)
    return True
