from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal

class AppConfigBase(BaseModel):
    name: str = Field(..., max_length=100)
    value: str = Field(..., max_length=255)

class AppConfigCreate(AppConfigBase):
    pass

class AppConfigUpdate(BaseModel):
    value: Optional[str] = Field(None, max_length=255)

class AppConfigOut(AppConfigBase):
    id: int
    tenant_id: Optional[str] = None

    class Config:
        from_attributes = True

class VoucherPricingConfig(BaseModel):
    """Settings behind the automatic sell price of a voucher."""
    voucher_markup: Decimal
    voucher_price_rounding: Decimal

class ReportConfig(BaseModel):
    business_name: str
    report_signature: str
