from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class ProviderBase(BaseModel):
    name: str = Field(..., min_length=1)
    logo_url: Optional[str] = None

class ProviderCreate(ProviderBase):
    # Assigned as max(original_id) + 1 when omitted
    original_id: Optional[int] = Field(None, ge=1)

class ProviderUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    logo_url: Optional[str] = None

class Provider(ProviderBase):
    id: int
    original_id: int
    tenant_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
