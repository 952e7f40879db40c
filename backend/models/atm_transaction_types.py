from sqlalchemy import Column, Enum, Integer, String
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin
import enum

class TransactionFlow(str, enum.Enum):
    # Customer takes cash, a bank/e-wallet balance goes up (e.g. Tarik Tunai)
    CASH_OUT = "CASH_OUT"
    # Customer hands over cash, a bank/e-wallet balance goes down (e.g. Transfer, Bayar)
    CASH_IN = "CASH_IN"

class AtmTransactionType(Base, TimestampMixin):
    __tablename__ = "atm_transaction_types"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    name = Column(String, nullable=False)
    flow = Column(Enum(TransactionFlow), nullable=False)

    rules = relationship("AtmTransactionRule", back_populates="transaction_type", cascade="all, delete-orphan")
