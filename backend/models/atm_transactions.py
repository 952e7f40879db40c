from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Numeric, Text
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin
from models.atm_ledgers import AccountKey
from utils import local_now

class AtmTransaction(Base, TimestampMixin):
    __tablename__ = "atm_transactions"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    ledger_id = Column(Integer, ForeignKey("atm_ledgers.id", ondelete="CASCADE"), nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), default=local_now, nullable=False, index=True)
    # type_id is kept without a foreign key so history survives deleting the type
    type_id = Column(Integer, nullable=False)
    type_name = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    bank_admin = Column(Numeric(14, 2), default=0, nullable=False)
    agent_admin = Column(Numeric(14, 2), default=0, nullable=False)
    notes = Column(Text, nullable=True)
    source_account = Column(Enum(AccountKey), nullable=False)
    destination_account = Column(Enum(AccountKey), nullable=False)
    profit_destination = Column(Enum(AccountKey), nullable=False)

    ledger = relationship("AtmLedger", back_populates="transactions")
