from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from decimal import Decimal
from typing import List, Optional
import logging

from database import get_db
from models.atm_transaction_types import TransactionFlow
from schemas.atm_transaction_types import AccountDefaults, AtmTransactionType, AtmTransactionTypeCreate
from schemas.atm_transaction_rules import AdminFee, AtmTransactionRule, AtmTransactionRuleCreate, AtmTransactionRuleUpdate
from crud import atm_transaction_types as crud_types
from crud import atm_transaction_rules as crud_rules
from utils.auth_utils import get_current_user, get_user_identifier
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/atm-settings", tags=["Mini ATM Settings"])
logger = logging.getLogger("atm_settings")

# --- Transaction types ---

@router.get("/transaction-types", response_model=List[AtmTransactionType])
def read_transaction_types(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return crud_types.get_transaction_types(db, tenant_id)

@router.post("/transaction-types", response_model=AtmTransactionType, status_code=status.HTTP_201_CREATED)
def create_transaction_type(
    transaction_type: AtmTransactionTypeCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    db_type = crud_types.create_transaction_type(db, transaction_type, tenant_id, user_id=get_user_identifier(user))
    logger.info(f"Transaction type '{db_type.name}' ({db_type.flow.value}) created by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_type

@router.delete("/transaction-types/{type_id}")
def delete_transaction_type(
    type_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    """Delete a transaction type and all of its fee rules."""
    if not crud_types.delete_transaction_type(db, type_id, tenant_id):
        raise HTTPException(status_code=404, detail="Transaction type not found")
    logger.info(f"Transaction type ID {type_id} deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
    return {"message": "Transaction type deleted successfully"}

@router.get("/account-defaults/{flow}", response_model=AccountDefaults)
def read_account_defaults(flow: TransactionFlow):
    """Which account a flow pins to cash and which accounts the operator may choose."""
    return crud_types.account_defaults(flow)

# --- Fee rules ---

@router.get("/transaction-rules", response_model=List[AtmTransactionRule])
def read_transaction_rules(transaction_type_id: Optional[int] = None, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return crud_rules.get_transaction_rules(db, tenant_id, transaction_type_id=transaction_type_id)

@router.post("/transaction-rules", response_model=AtmTransactionRule, status_code=status.HTTP_201_CREATED)
def create_transaction_rule(
    rule: AtmTransactionRuleCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    try:
        db_rule = crud_rules.create_transaction_rule(db, rule, tenant_id, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info(f"Fee rule {db_rule.min_amount}-{db_rule.max_amount} for type ID {db_rule.transaction_type_id} created by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_rule

@router.patch("/transaction-rules/{rule_id}", response_model=AtmTransactionRule)
def update_transaction_rule(
    rule_id: int,
    rule: AtmTransactionRuleUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    try:
        db_rule = crud_rules.update_transaction_rule(db, rule_id, rule, tenant_id, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if db_rule is None:
        raise HTTPException(status_code=404, detail="Transaction rule not found")
    logger.info(f"Fee rule ID {rule_id} updated by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_rule

@router.delete("/transaction-rules/{rule_id}")
def delete_transaction_rule(
    rule_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    if not crud_rules.delete_transaction_rule(db, rule_id, tenant_id):
        raise HTTPException(status_code=404, detail="Transaction rule not found")
    logger.info(f"Fee rule ID {rule_id} deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
    return {"message": "Transaction rule deleted successfully"}

@router.get("/admin-fee", response_model=AdminFee)
def read_admin_fee(transaction_type_id: int, amount: Decimal, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    """Fee pair the rules give for an amount; (0, 0) when no rule matches."""
    bank_admin, agent_admin, rule = crud_rules.lookup_admin_fee(db, tenant_id, transaction_type_id, amount)
    return AdminFee(
        transaction_type_id=transaction_type_id,
        amount=amount,
        bank_admin=bank_admin,
        agent_admin=agent_admin,
        rule_id=rule.id if rule is not None else None,
    )
