from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from decimal import Decimal
from datetime import datetime

class VoucherBase(BaseModel):
    provider_id: int
    name: str = Field(..., min_length=1)
    total_stock: int = Field(0, ge=0)
    remaining_stock: int = Field(0, ge=0)
    planned_stock: int = Field(0, ge=0)
    cost_price: Decimal = Field(Decimal(0), ge=0)

class VoucherUpsert(VoucherBase):
    # Derived from cost_price with the configured markup when omitted
    sell_price: Optional[Decimal] = Field(None, ge=0)

class VoucherUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    total_stock: Optional[int] = Field(None, ge=0)
    remaining_stock: Optional[int] = Field(None, ge=0)
    planned_stock: Optional[int] = Field(None, ge=0)
    cost_price: Optional[Decimal] = Field(None, ge=0)
    sell_price: Optional[Decimal] = Field(None, ge=0)

class Voucher(VoucherBase):
    id: int
    sell_price: Decimal
    tenant_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AddStockRequest(BaseModel):
    quantity: int = Field(..., gt=0)

class SaleRequest(BaseModel):
    # voucher id -> quantity
    cart: Dict[int, int] = Field(..., min_length=1)

class SaleLine(BaseModel):
    voucher_id: int
    name: Optional[str] = None
    quantity: int
    line_total: Decimal = Decimal(0)
    reason: Optional[str] = None

class SaleResult(BaseModel):
    sold: List[SaleLine]
    skipped: List[SaleLine]
    total: Decimal
    message: str

class ImportResult(BaseModel):
    imported: int
    skipped_rows: List[int]
