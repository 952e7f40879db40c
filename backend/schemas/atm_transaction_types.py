from pydantic import BaseModel, Field
from typing import List, Optional
from models.atm_transaction_types import TransactionFlow
from models.atm_ledgers import AccountKey

class AtmTransactionTypeCreate(BaseModel):
    name: str = Field(..., min_length=1)
    flow: TransactionFlow = TransactionFlow.CASH_IN

class AtmTransactionType(AtmTransactionTypeCreate):
    id: int
    tenant_id: Optional[str] = None

    class Config:
        from_attributes = True

class AccountDefaults(BaseModel):
    """Which account a flow pins to cash and which one the operator picks."""
    flow: TransactionFlow
    fixed_field: str
    fixed_account: AccountKey
    editable_field: str
    editable_accounts: List[AccountKey]
