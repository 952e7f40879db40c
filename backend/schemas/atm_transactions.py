from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal
from datetime import datetime
from models.atm_ledgers import AccountKey

class AtmTransactionCreate(BaseModel):
    type_id: int
    amount: Decimal = Field(..., gt=0)
    notes: Optional[str] = ""
    # The flow pins one side to cash; the other defaults to BRI and may not be cash
    source_account: Optional[AccountKey] = None
    destination_account: Optional[AccountKey] = None
    profit_destination: AccountKey = AccountKey.CASH
    # Looked up from the fee rules unless both are given
    bank_admin: Optional[Decimal] = Field(None, ge=0)
    agent_admin: Optional[Decimal] = Field(None, ge=0)

class AtmTransactionUpdate(BaseModel):
    type_id: Optional[int] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    notes: Optional[str] = None
    source_account: Optional[AccountKey] = None
    destination_account: Optional[AccountKey] = None
    profit_destination: Optional[AccountKey] = None
    bank_admin: Optional[Decimal] = Field(None, ge=0)
    agent_admin: Optional[Decimal] = Field(None, ge=0)

class AtmTransaction(BaseModel):
    id: int
    ledger_id: int
    timestamp: datetime
    type_id: int
    type_name: str
    amount: Decimal
    bank_admin: Decimal
    agent_admin: Decimal
    notes: Optional[str] = None
    source_account: AccountKey
    destination_account: AccountKey
    profit_destination: AccountKey
    tenant_id: Optional[str] = None

    class Config:
        from_attributes = True
