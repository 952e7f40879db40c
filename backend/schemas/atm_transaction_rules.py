from pydantic import BaseModel, Field, model_validator
from typing import Optional
from decimal import Decimal

class AtmTransactionRuleBase(BaseModel):
    transaction_type_id: int
    min_amount: Decimal = Field(..., ge=0)
    max_amount: Decimal = Field(..., ge=0)
    bank_admin: Decimal = Field(Decimal(0), ge=0)
    agent_admin: Decimal = Field(Decimal(0), ge=0)

class AtmTransactionRuleCreate(AtmTransactionRuleBase):
    @model_validator(mode="after")
    def check_range(self):
        if self.min_amount > self.max_amount:
            raise ValueError("min_amount cannot be greater than max_amount")
        return self

class AtmTransactionRuleUpdate(BaseModel):
    transaction_type_id: Optional[int] = None
    min_amount: Optional[Decimal] = Field(None, ge=0)
    max_amount: Optional[Decimal] = Field(None, ge=0)
    bank_admin: Optional[Decimal] = Field(None, ge=0)
    agent_admin: Optional[Decimal] = Field(None, ge=0)

class AtmTransactionRule(AtmTransactionRuleBase):
    id: int
    tenant_id: Optional[str] = None

    class Config:
        from_attributes = True

class AdminFee(BaseModel):
    transaction_type_id: int
    amount: Decimal
    bank_admin: Decimal
    agent_admin: Decimal
    rule_id: Optional[int] = None
