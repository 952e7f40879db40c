from sqlalchemy import Column, ForeignKey, Integer, String, Numeric
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class AtmTransactionRule(Base, TimestampMixin):
    """Admin fee applied to amounts within [min_amount, max_amount] for one transaction type."""
    __tablename__ = "atm_transaction_rules"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    transaction_type_id = Column(Integer, ForeignKey("atm_transaction_types.id", ondelete="CASCADE"), nullable=False, index=True)
    min_amount = Column(Numeric(14, 2), nullable=False)
    max_amount = Column(Numeric(14, 2), nullable=False)
    bank_admin = Column(Numeric(14, 2), default=0, nullable=False)
    agent_admin = Column(Numeric(14, 2), default=0, nullable=False)

    transaction_type = relationship("AtmTransactionType", back_populates="rules")
