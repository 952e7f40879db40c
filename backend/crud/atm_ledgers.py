from decimal import Decimal
from typing import Dict, List, Optional
import logging

from sqlalchemy.orm import Session
from models.atm_ledgers import AtmLedger
from models.atm_transactions import AtmTransaction
from schemas.atm_ledgers import AtmLedgerCreate, AtmLedgerSummary, AtmLedgerUpdate, Balance
from utils import local_now
from utils.balance import balance_to_json, balance_total, replay_transactions, to_decimal

logger = logging.getLogger(__name__)

def default_ledger_name() -> str:
    return f"Pembukuan {local_now().strftime('%Y-%m-%d')}"

def get_ledger(db: Session, ledger_id: int, tenant_id: str):
    return db.query(AtmLedger).filter(AtmLedger.id == ledger_id, AtmLedger.tenant_id == tenant_id).first()

def get_ledgers(db: Session, tenant_id: str, skip: int = 0, limit: int = 100) -> List[AtmLedger]:
    return db.query(AtmLedger).filter(AtmLedger.tenant_id == tenant_id).order_by(AtmLedger.date.desc(), AtmLedger.id.desc()).offset(skip).limit(limit).all()

def get_ledger_transactions(db: Session, ledger_id: int, tenant_id: str) -> List[AtmTransaction]:
    return db.query(AtmTransaction).filter(
        AtmTransaction.ledger_id == ledger_id,
        AtmTransaction.tenant_id == tenant_id,
    ).order_by(AtmTransaction.timestamp.asc(), AtmTransaction.id.asc()).all()

def create_ledger(db: Session, ledger: AtmLedgerCreate, tenant_id: str, user_id: str):
    name = (ledger.name or "").strip() or default_ledger_name()
    opening = balance_to_json(ledger.initial_balance.model_dump())
    db_ledger = AtmLedger(
        name=name,
        date=local_now(),
        initial_balance=opening,
        current_balance=dict(opening),
        tenant_id=tenant_id,
        created_by=user_id,
    )
    db.add(db_ledger)
    db.commit()
    db.refresh(db_ledger)
    return db_ledger

def update_ledger(db: Session, ledger_id: int, ledger: AtmLedgerUpdate, tenant_id: str, user_id: str):
    db_ledger = get_ledger(db, ledger_id, tenant_id)
    if db_ledger is None:
        return None
    if ledger.name is not None:
        db_ledger.name = ledger.name.strip()
    db_ledger.updated_at = local_now()
    db_ledger.updated_by = user_id
    db.commit()
    db.refresh(db_ledger)
    return db_ledger

def delete_ledger(db: Session, ledger_id: int, tenant_id: str):
    """Delete a ledger and all of its transactions."""
    db_ledger = get_ledger(db, ledger_id, tenant_id)
    if db_ledger is None:
        return None
    name = db_ledger.name
    db.delete(db_ledger)
    db.commit()
    return name

def recalculate_ledger_balance(db: Session, ledger_id: int, tenant_id: str) -> Optional[Dict[str, float]]:
    """
    Rebuild current_balance from initial_balance by replaying every
    transaction of the ledger in timestamp order.

    Returns the new balance, or None when the ledger does not exist.
    """
    db_ledger = get_ledger(db, ledger_id, tenant_id)
    if db_ledger is None:
        return None
    transactions = get_ledger_transactions(db, ledger_id, tenant_id)
    new_balance = replay_transactions(db_ledger.initial_balance, transactions)
    # Assign a fresh dict so the JSON column is flagged as modified
    db_ledger.current_balance = new_balance
    db.commit()
    logger.debug(f"Ledger {ledger_id} (tenant {tenant_id}) replayed {len(transactions)} transactions -> {new_balance}")
    return new_balance

def update_initial_balance(db: Session, ledger_id: int, balance: Balance, tenant_id: str, user_id: str):
    db_ledger = get_ledger(db, ledger_id, tenant_id)
    if db_ledger is None:
        return None
    db_ledger.initial_balance = balance_to_json(balance.model_dump())
    db_ledger.updated_at = local_now()
    db_ledger.updated_by = user_id
    db.commit()
    recalculate_ledger_balance(db, ledger_id, tenant_id)
    db.refresh(db_ledger)
    return db_ledger

def get_ledger_summary(db: Session, ledger_id: int, tenant_id: str) -> Optional[AtmLedgerSummary]:
    db_ledger = get_ledger(db, ledger_id, tenant_id)
    if db_ledger is None:
        return None
    transactions = get_ledger_transactions(db, ledger_id, tenant_id)
    return AtmLedgerSummary(
        ledger_id=db_ledger.id,
        initial_total=balance_total(db_ledger.initial_balance),
        current_total=balance_total(db_ledger.current_balance),
        transaction_count=len(transactions),
        total_amount=sum((to_decimal(tx.amount) for tx in transactions), Decimal(0)),
        total_bank_admin=sum((to_decimal(tx.bank_admin) for tx in transactions), Decimal(0)),
        total_agent_admin=sum((to_decimal(tx.agent_admin) for tx in transactions), Decimal(0)),
    )
