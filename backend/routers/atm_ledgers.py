from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
from schemas.atm_ledgers import AtmLedger, AtmLedgerCreate, AtmLedgerSummary, AtmLedgerUpdate, Balance, InitialBalanceUpdate
from schemas.atm_transactions import AtmTransaction, AtmTransactionCreate, AtmTransactionUpdate
from crud import atm_ledgers as crud_ledgers
from crud import atm_transactions as crud_transactions
from crud.app_config import get_report_config
from utils.auth_utils import get_current_user, get_user_identifier
from utils.pdf_utils import generate_ledger_pdf, ledger_pdf_disposition
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/atm-ledgers", tags=["Mini ATM Ledgers"])
logger = logging.getLogger("atm_ledgers")

def _get_ledger_or_404(db: Session, ledger_id: int, tenant_id: str):
    db_ledger = crud_ledgers.get_ledger(db, ledger_id, tenant_id)
    if db_ledger is None:
        raise HTTPException(status_code=404, detail="Ledger not found")
    return db_ledger

@router.get("/", response_model=List[AtmLedger])
def read_ledgers(skip: int = 0, limit: int = 100, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    """Newest ledger first."""
    return crud_ledgers.get_ledgers(db, tenant_id, skip=skip, limit=limit)

@router.post("/", response_model=AtmLedger, status_code=status.HTTP_201_CREATED)
def create_ledger(
    ledger: AtmLedgerCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    db_ledger = crud_ledgers.create_ledger(db, ledger, tenant_id, user_id=get_user_identifier(user))
    logger.info(f"Ledger '{db_ledger.name}' created by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_ledger

@router.get("/{ledger_id}", response_model=AtmLedger)
def read_ledger(ledger_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return _get_ledger_or_404(db, ledger_id, tenant_id)

@router.patch("/{ledger_id}", response_model=AtmLedger)
def update_ledger(
    ledger_id: int,
    ledger: AtmLedgerUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    db_ledger = crud_ledgers.update_ledger(db, ledger_id, ledger, tenant_id, user_id=get_user_identifier(user))
    if db_ledger is None:
        raise HTTPException(status_code=404, detail="Ledger not found")
    return db_ledger

@router.delete("/{ledger_id}")
def delete_ledger(
    ledger_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    """Delete a ledger together with all of its transactions."""
    name = crud_ledgers.delete_ledger(db, ledger_id, tenant_id)
    if name is None:
        raise HTTPException(status_code=404, detail="Ledger not found")
    logger.info(f"Ledger '{name}' (ID {ledger_id}) deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
    return {"message": f'Ledger "{name}" deleted successfully'}

@router.put("/{ledger_id}/initial-balance", response_model=AtmLedger)
def update_initial_balance(
    ledger_id: int,
    request: InitialBalanceUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    """Replace the opening balance; the current balance is replayed from it."""
    db_ledger = crud_ledgers.update_initial_balance(db, ledger_id, request.initial_balance, tenant_id, user_id=get_user_identifier(user))
    if db_ledger is None:
        raise HTTPException(status_code=404, detail="Ledger not found")
    logger.info(f"Initial balance of ledger ID {ledger_id} updated by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_ledger

@router.post("/{ledger_id}/recalculate", response_model=Balance)
def recalculate_ledger(
    ledger_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    balance = crud_ledgers.recalculate_ledger_balance(db, ledger_id, tenant_id)
    if balance is None:
        raise HTTPException(status_code=404, detail="Ledger not found")
    return balance

@router.get("/{ledger_id}/summary", response_model=AtmLedgerSummary)
def read_ledger_summary(ledger_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    summary = crud_ledgers.get_ledger_summary(db, ledger_id, tenant_id)
    if summary is None:
        raise HTTPException(status_code=404, detail="Ledger not found")
    return summary

@router.get("/{ledger_id}/pdf")
def download_ledger_pdf(ledger_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    db_ledger = _get_ledger_or_404(db, ledger_id, tenant_id)
    transactions = crud_ledgers.get_ledger_transactions(db, ledger_id, tenant_id)
    report_config = get_report_config(db, tenant_id)
    pdf_bytes = generate_ledger_pdf(db_ledger, transactions, report_config.business_name)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": ledger_pdf_disposition(db_ledger)},
    )

# --- Transactions of a ledger ---

@router.get("/{ledger_id}/transactions", response_model=List[AtmTransaction])
def read_transactions(ledger_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    """Transactions in the order they are replayed (oldest first)."""
    _get_ledger_or_404(db, ledger_id, tenant_id)
    return crud_ledgers.get_ledger_transactions(db, ledger_id, tenant_id)

@router.post("/{ledger_id}/transactions", response_model=AtmTransaction, status_code=status.HTTP_201_CREATED)
def create_transaction(
    ledger_id: int,
    transaction: AtmTransactionCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    try:
        db_transaction = crud_transactions.add_transaction(db, ledger_id, transaction, tenant_id, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if db_transaction is None:
        raise HTTPException(status_code=404, detail="Ledger not found")
    logger.info(f"Transaction '{db_transaction.type_name}' of {db_transaction.amount} added to ledger ID {ledger_id} by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_transaction

@router.patch("/{ledger_id}/transactions/{transaction_id}", response_model=AtmTransaction)
def update_transaction(
    ledger_id: int,
    transaction_id: int,
    transaction: AtmTransactionUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    try:
        db_transaction = crud_transactions.update_transaction(db, ledger_id, transaction_id, transaction, tenant_id, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if db_transaction is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    logger.info(f"Transaction ID {transaction_id} of ledger ID {ledger_id} updated by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_transaction

@router.delete("/{ledger_id}/transactions/{transaction_id}")
def delete_transaction(
    ledger_id: int,
    transaction_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    if not crud_transactions.delete_transaction(db, ledger_id, transaction_id, tenant_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
    logger.info(f"Transaction ID {transaction_id} of ledger ID {ledger_id} deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
    return {"message": "Transaction deleted successfully"}
