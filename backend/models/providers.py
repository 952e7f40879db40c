from sqlalchemy import Column, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class Provider(Base, TimestampMixin):
    __tablename__ = "providers"
    __table_args__ = (UniqueConstraint('original_id', 'tenant_id', name='_providers_original_id_tenant_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    name = Column(String, nullable=False)
    logo_url = Column(String, nullable=True)
    original_id = Column(Integer, nullable=False) # stable ordering key, also used by spreadsheet imports

    vouchers = relationship("Voucher", back_populates="provider", cascade="all, delete-orphan")
