from sqlalchemy import Column, DateTime, Enum, Integer, String, Text
from database import Base
from utils import local_now
import enum

class ActivityType(enum.Enum):
    SALE = "SALE"
    EDIT = "EDIT"
    DELETE_VOUCHER = "DELETE_VOUCHER"
    DELETE_PROVIDER = "DELETE_PROVIDER"
    IMPORT = "IMPORT"
    ADD_STOCK = "ADD_STOCK"

class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    timestamp = Column(DateTime(timezone=True), default=local_now, nullable=False, index=True)
    type = Column(Enum(ActivityType), nullable=False)
    message = Column(Text, nullable=False)
