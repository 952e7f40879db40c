from sqlalchemy import Column, DateTime, Integer, String, JSON
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin
from utils import local_now
import enum

class AccountKey(str, enum.Enum):
    BRI = "bri"
    MANDIRI = "mandiri"
    DANA = "dana"
    SAVE_PLUS = "save_plus"
    CASH = "cash"

class AtmLedger(Base, TimestampMixin):
    """One Mini ATM bookkeeping session."""
    __tablename__ = "atm_ledgers"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    name = Column(String, nullable=False)
    date = Column(DateTime(timezone=True), default=local_now, nullable=False, index=True)
    # Both snapshots are {account_key: amount} for the five AccountKey values
    initial_balance = Column(JSON, nullable=False)
    current_balance = Column(JSON, nullable=False) # derived, rewritten by recalculation

    transactions = relationship("AtmTransaction", back_populates="ledger", cascade="all, delete-orphan")
