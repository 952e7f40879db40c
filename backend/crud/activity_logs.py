from typing import Optional
from sqlalchemy.orm import Session
from models.activity_logs import ActivityLog, ActivityType

def add_log(db: Session, tenant_id: str, type: ActivityType, message: str, commit: bool = True):
    db_log = ActivityLog(tenant_id=tenant_id, type=type, message=message)
    db.add(db_log)
    if commit:
        db.commit()
        db.refresh(db_log)
    return db_log

def get_logs(db: Session, tenant_id: str, type: Optional[ActivityType] = None, skip: int = 0, limit: int = 100):
    query = db.query(ActivityLog).filter(ActivityLog.tenant_id == tenant_id)
    if type is not None:
        query = query.filter(ActivityLog.type == type)
    return query.order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc()).offset(skip).limit(limit).all()
