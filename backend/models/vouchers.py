from sqlalchemy import Column, ForeignKey, Integer, String, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class Voucher(Base, TimestampMixin):
    __tablename__ = "vouchers"
    __table_args__ = (UniqueConstraint('provider_id', 'name', name='_vouchers_provider_name_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    provider_id = Column(Integer, ForeignKey("providers.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False) # e.g. "5GB / 30 Hari"
    total_stock = Column(Integer, default=0, nullable=False)
    remaining_stock = Column(Integer, default=0, nullable=False)
    planned_stock = Column(Integer, default=0, nullable=False) # planned restock quantity
    cost_price = Column(Numeric(14, 2), default=0, nullable=False)
    sell_price = Column(Numeric(14, 2), default=0, nullable=False)

    provider = relationship("Provider", back_populates="vouchers")
