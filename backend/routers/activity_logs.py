from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from database import get_db
from models.activity_logs import ActivityType
from schemas.activity_logs import ActivityLog
from crud import activity_logs as crud_activity_logs
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/activity-logs", tags=["Activity Logs"])

@router.get("/", response_model=List[ActivityLog])
def read_activity_logs(
    type: Optional[ActivityType] = None,
    skip: int = 0,
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Newest entries first."""
    return crud_activity_logs.get_logs(db, tenant_id, type=type, skip=skip, limit=limit)
