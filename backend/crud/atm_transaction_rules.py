from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from models.atm_transaction_rules import AtmTransactionRule
from schemas.atm_transaction_rules import AtmTransactionRuleCreate, AtmTransactionRuleUpdate
from crud.atm_transaction_types import get_transaction_type
from utils import local_now
from utils.fees import find_applicable_rule

def get_transaction_rule(db: Session, rule_id: int, tenant_id: str):
    return db.query(AtmTransactionRule).filter(AtmTransactionRule.id == rule_id, AtmTransactionRule.tenant_id == tenant_id).first()

def get_transaction_rules(db: Session, tenant_id: str, transaction_type_id: Optional[int] = None) -> List[AtmTransactionRule]:
    query = db.query(AtmTransactionRule).filter(AtmTransactionRule.tenant_id == tenant_id)
    if transaction_type_id is not None:
        query = query.filter(AtmTransactionRule.transaction_type_id == transaction_type_id)
    return query.order_by(AtmTransactionRule.transaction_type_id, AtmTransactionRule.min_amount, AtmTransactionRule.id).all()

def create_transaction_rule(db: Session, rule: AtmTransactionRuleCreate, tenant_id: str, user_id: str):
    if get_transaction_type(db, rule.transaction_type_id, tenant_id) is None:
        raise ValueError(f"Transaction type with ID {rule.transaction_type_id} not found")
    db_rule = AtmTransactionRule(**rule.model_dump(), tenant_id=tenant_id, created_by=user_id)
    db.add(db_rule)
    db.commit()
    db.refresh(db_rule)
    return db_rule

def update_transaction_rule(db: Session, rule_id: int, rule: AtmTransactionRuleUpdate, tenant_id: str, user_id: str):
    db_rule = get_transaction_rule(db, rule_id, tenant_id)
    if db_rule is None:
        return None

    update_data = {k: v for k, v in rule.model_dump(exclude_unset=True).items() if v is not None}
    type_id = update_data.get("transaction_type_id", db_rule.transaction_type_id)
    if get_transaction_type(db, type_id, tenant_id) is None:
        raise ValueError(f"Transaction type with ID {type_id} not found")
    min_amount = update_data.get("min_amount", db_rule.min_amount)
    max_amount = update_data.get("max_amount", db_rule.max_amount)
    if Decimal(min_amount) > Decimal(max_amount):
        raise ValueError("min_amount cannot be greater than max_amount")

    for key, value in update_data.items():
        setattr(db_rule, key, value)
    db_rule.updated_at = local_now()
    db_rule.updated_by = user_id
    db.commit()
    db.refresh(db_rule)
    return db_rule

def delete_transaction_rule(db: Session, rule_id: int, tenant_id: str) -> bool:
    db_rule = get_transaction_rule(db, rule_id, tenant_id)
    if db_rule is None:
        return False
    db.delete(db_rule)
    db.commit()
    return True

def lookup_admin_fee(db: Session, tenant_id: str, transaction_type_id: Optional[int], amount) -> Tuple[Decimal, Decimal, Optional[AtmTransactionRule]]:
    """Fee pair for an amount of the given type, plus the rule that produced it (None when no rule matched)."""
    if not transaction_type_id:
        return Decimal(0), Decimal(0), None
    rules = get_transaction_rules(db, tenant_id, transaction_type_id)
    rule = find_applicable_rule(rules, transaction_type_id, amount)
    if rule is None:
        return Decimal(0), Decimal(0), None
    return Decimal(rule.bank_admin), Decimal(rule.agent_admin), rule
