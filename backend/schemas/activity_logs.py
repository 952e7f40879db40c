from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from models.activity_logs import ActivityType

class ActivityLogCreate(BaseModel):
    type: ActivityType
    message: str

class ActivityLog(ActivityLogCreate):
    id: int
    timestamp: datetime
    tenant_id: Optional[str] = None

    class Config:
        from_attributes = True
