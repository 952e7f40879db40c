from typing import List
from sqlalchemy import func
from sqlalchemy.orm import Session
from models.providers import Provider
from models.activity_logs import ActivityType
from schemas.providers import ProviderCreate, ProviderUpdate
from crud.activity_logs import add_log
from utils import local_now

DEFAULT_PROVIDERS = [
    {"original_id": 1, "name": "Telkomsel", "logo_url": "https://upload.wikimedia.org/wikipedia/commons/b/bc/Telkomsel_2021_icon.svg"},
    {"original_id": 2, "name": "IM3", "logo_url": "https://im3-img.indosatooredoo.com/indosatassets/images/icons/icon-512x512.png"},
    {"original_id": 3, "name": "Three", "logo_url": "https://iconape.com/wp-content/png_logo_vector/3-logo-2.png"},
    {"original_id": 4, "name": "XL", "logo_url": "https://static.vecteezy.com/system/resources/previews/071/673/737/non_2x/xl-axiata-logo-glossy-square-xl-axiata-telecom-symbol-free-png.png"},
    {"original_id": 5, "name": "Axis", "logo_url": "https://upload.wikimedia.org/wikipedia/commons/thumb/8/83/Axis_logo_2015.svg/1200px-Axis_logo_2015.svg.png"},
    {"original_id": 6, "name": "Smartfren", "logo_url": "https://images.seeklogo.com/logo-png/20/2/smartfren-logo-png_seeklogo-202951.png"},
    {"original_id": 7, "name": "By.U", "logo_url": "https://bigrit.com/wp-content/uploads/2020/11/byu.png"},
]

def get_provider(db: Session, provider_id: int, tenant_id: str):
    return db.query(Provider).filter(Provider.id == provider_id, Provider.tenant_id == tenant_id).first()

def get_providers(db: Session, tenant_id: str) -> List[Provider]:
    return db.query(Provider).filter(Provider.tenant_id == tenant_id).order_by(Provider.original_id.asc()).all()

def find_provider_by_original_id(db: Session, original_id: int, tenant_id: str):
    return db.query(Provider).filter(Provider.original_id == original_id, Provider.tenant_id == tenant_id).first()

def next_original_id(db: Session, tenant_id: str) -> int:
    current_max = db.query(func.max(Provider.original_id)).filter(Provider.tenant_id == tenant_id).scalar()
    return (current_max or 0) + 1

def seed_default_providers(db: Session, tenant_id: str, user_id: str = "system") -> List[Provider]:
    """Give a new tenant the default provider list. Does nothing once any provider exists."""
    if db.query(Provider.id).filter(Provider.tenant_id == tenant_id).first():
        return []
    providers = [Provider(**data, tenant_id=tenant_id, created_by=user_id) for data in DEFAULT_PROVIDERS]
    db.add_all(providers)
    db.commit()
    return get_providers(db, tenant_id)

def create_provider(db: Session, provider: ProviderCreate, tenant_id: str, user_id: str):
    original_id = provider.original_id
    if original_id is None:
        original_id = next_original_id(db, tenant_id)
    elif find_provider_by_original_id(db, original_id, tenant_id):
        raise ValueError(f"Provider with original id {original_id} already exists")

    db_provider = Provider(
        name=provider.name,
        logo_url=provider.logo_url or None,
        original_id=original_id,
        tenant_id=tenant_id,
        created_by=user_id,
        updated_by=user_id,
    )
    db.add(db_provider)
    db.commit()
    db.refresh(db_provider)
    return db_provider

def update_provider(db: Session, provider_id: int, provider: ProviderUpdate, tenant_id: str, user_id: str):
    db_provider = get_provider(db, provider_id, tenant_id)
    if db_provider is None:
        return None
    for key, value in provider.model_dump(exclude_unset=True).items():
        setattr(db_provider, key, value)
    db_provider.updated_at = local_now()
    db_provider.updated_by = user_id
    db.commit()
    db.refresh(db_provider)
    return db_provider

def delete_provider(db: Session, provider_id: int, tenant_id: str):
    """Delete a provider together with all of its vouchers."""
    db_provider = get_provider(db, provider_id, tenant_id)
    if db_provider is None:
        return None
    name = db_provider.name
    db.delete(db_provider)
    add_log(db, tenant_id, ActivityType.DELETE_PROVIDER, f'Provider "{name}" dihapus.', commit=False)
    db.commit()
    return name
