from decimal import Decimal, InvalidOperation
from typing import List
import logging

from sqlalchemy.orm import Session
from models.app_config import AppConfig
from schemas.app_config import AppConfigCreate, AppConfigUpdate, ReportConfig, VoucherPricingConfig
from utils import local_now
from utils.pricing import DEFAULT_MARKUP, DEFAULT_ROUNDING

logger = logging.getLogger(__name__)

DEFAULT_CONFIGS = [
    {"name": "voucher_markup", "value": str(DEFAULT_MARKUP)},
    {"name": "voucher_price_rounding", "value": str(DEFAULT_ROUNDING)},
    {"name": "business_name", "value": "UNI BRILINK"},
    {"name": "report_signature", "value": "Admin Konter"},
]
DEFAULT_VALUES = {c["name"]: c["value"] for c in DEFAULT_CONFIGS}


# Create a new config entry
def create_config(db: Session, config: AppConfigCreate, tenant_id: str, user_id: str):
    db_config = AppConfig(name=config.name, value=config.value, tenant_id=tenant_id, created_by=user_id)
    db.add(db_config)
    db.commit()
    db.refresh(db_config)
    return db_config


# Get config by name (or all configs)
def get_config(db: Session, tenant_id: str, name: str = None):
    if name:
        return db.query(AppConfig).filter(AppConfig.name == name, AppConfig.tenant_id == tenant_id).first()
    return db.query(AppConfig).filter(AppConfig.tenant_id == tenant_id).order_by(AppConfig.name).all()


# Update config by name
def update_config_by_name(db: Session, name: str, config: AppConfigUpdate, tenant_id: str, user_id: str):
    db_config = db.query(AppConfig).filter(AppConfig.name == name, AppConfig.tenant_id == tenant_id).first()
    if not db_config:
        return None

    for field, value in config.model_dump(exclude_unset=True).items():
        setattr(db_config, field, value)
    db_config.updated_at = local_now()
    db_config.updated_by = user_id
    db.commit()
    db.refresh(db_config)
    return db_config


def initialize_default_configs(db: Session, tenant_id: str, user_id: str) -> List[str]:
    """Create the default settings a tenant is missing. Existing values are never overwritten."""
    existing_config_names = {name for (name,) in db.query(AppConfig.name).filter(AppConfig.tenant_id == tenant_id)}
    created = []
    for config_data in DEFAULT_CONFIGS:
        if config_data["name"] not in existing_config_names:
            db.add(AppConfig(name=config_data["name"], value=config_data["value"], tenant_id=tenant_id, created_by=user_id))
            created.append(config_data["name"])
    if created:
        db.commit()
    return created


def _config_values(db: Session, tenant_id: str) -> dict:
    configs = db.query(AppConfig).filter(AppConfig.tenant_id == tenant_id).all()
    values = dict(DEFAULT_VALUES)
    values.update({c.name: c.value for c in configs})
    return values


def _decimal_setting(values: dict, name: str) -> Decimal:
    try:
        return Decimal(values[name])
    except (InvalidOperation, TypeError, ValueError):
        logger.warning(f"Invalid value {values[name]!r} for setting '{name}', using default")
        return Decimal(DEFAULT_VALUES[name])


def get_voucher_pricing_config(db: Session, tenant_id: str) -> VoucherPricingConfig:
    values = _config_values(db, tenant_id)
    return VoucherPricingConfig(
        voucher_markup=_decimal_setting(values, "voucher_markup"),
        voucher_price_rounding=_decimal_setting(values, "voucher_price_rounding"),
    )


def get_report_config(db: Session, tenant_id: str) -> ReportConfig:
    values = _config_values(db, tenant_id)
    return ReportConfig(business_name=values["business_name"], report_signature=values["report_signature"])
