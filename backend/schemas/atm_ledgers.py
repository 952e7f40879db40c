from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

class Balance(BaseModel):
    bri: float = 0
    mandiri: float = 0
    dana: float = 0
    save_plus: float = 0
    cash: float = 0

class AtmLedgerCreate(BaseModel):
    # Blank names become "Pembukuan YYYY-MM-DD"
    name: Optional[str] = None
    initial_balance: Balance = Field(default_factory=Balance)

class AtmLedgerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)

class InitialBalanceUpdate(BaseModel):
    initial_balance: Balance

class AtmLedger(BaseModel):
    id: int
    name: str
    date: datetime
    initial_balance: Balance
    current_balance: Balance
    tenant_id: Optional[str] = None

    class Config:
        from_attributes = True

class AtmLedgerSummary(BaseModel):
    ledger_id: int
    initial_total: float
    current_total: float
    transaction_count: int
    total_amount: Decimal
    total_bank_admin: Decimal
    total_agent_admin: Decimal
