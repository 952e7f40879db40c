from typing import List
from sqlalchemy.orm import Session
from models.atm_ledgers import AccountKey
from models.atm_transaction_types import AtmTransactionType, TransactionFlow
from schemas.atm_transaction_types import AccountDefaults, AtmTransactionTypeCreate

def get_transaction_type(db: Session, type_id: int, tenant_id: str):
    return db.query(AtmTransactionType).filter(AtmTransactionType.id == type_id, AtmTransactionType.tenant_id == tenant_id).first()

def get_transaction_types(db: Session, tenant_id: str) -> List[AtmTransactionType]:
    return db.query(AtmTransactionType).filter(AtmTransactionType.tenant_id == tenant_id).order_by(AtmTransactionType.id).all()

def create_transaction_type(db: Session, transaction_type: AtmTransactionTypeCreate, tenant_id: str, user_id: str):
    db_type = AtmTransactionType(**transaction_type.model_dump(), tenant_id=tenant_id, created_by=user_id)
    db.add(db_type)
    db.commit()
    db.refresh(db_type)
    return db_type

def delete_transaction_type(db: Session, type_id: int, tenant_id: str) -> bool:
    """Delete the type and every fee rule attached to it. Past transactions keep their copied type name."""
    db_type = get_transaction_type(db, type_id, tenant_id)
    if db_type is None:
        return False
    db.delete(db_type)
    db.commit()
    return True

def account_defaults(flow: TransactionFlow) -> AccountDefaults:
    """
    Cash-out pins the source to cash and lets the operator pick where the
    money lands; cash-in pins the destination to cash and lets the operator
    pick the paying account.
    """
    non_cash = [account for account in AccountKey if account is not AccountKey.CASH]
    if flow == TransactionFlow.CASH_OUT:
        return AccountDefaults(
            flow=flow,
            fixed_field="source_account",
            fixed_account=AccountKey.CASH,
            editable_field="destination_account",
            editable_accounts=non_cash,
        )
    return AccountDefaults(
        flow=flow,
        fixed_field="destination_account",
        fixed_account=AccountKey.CASH,
        editable_field="source_account",
        editable_accounts=non_cash,
    )
