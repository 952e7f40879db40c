from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
from schemas.providers import Provider, ProviderCreate, ProviderUpdate
from crud import providers as crud_providers
from utils.auth_utils import get_current_user, get_user_identifier
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/providers", tags=["Providers"])
logger = logging.getLogger("providers")

@router.get("/", response_model=List[Provider])
def read_providers(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    """List providers ordered by their original id."""
    return crud_providers.get_providers(db, tenant_id)

@router.post("/seed-defaults", response_model=List[Provider])
def seed_default_providers(
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    """Insert the default provider list for a tenant that has none yet."""
    seeded = crud_providers.seed_default_providers(db, tenant_id, user_id=get_user_identifier(user))
    if seeded:
        logger.info(f"Seeded {len(seeded)} default providers for tenant {tenant_id} by user {get_user_identifier(user)}")
    return crud_providers.get_providers(db, tenant_id)

@router.get("/{provider_id}", response_model=Provider)
def read_provider(provider_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    db_provider = crud_providers.get_provider(db, provider_id, tenant_id)
    if db_provider is None:
        raise HTTPException(status_code=404, detail="Provider not found")
    return db_provider

@router.post("/", response_model=Provider, status_code=status.HTTP_201_CREATED)
def create_provider(
    provider: ProviderCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    try:
        db_provider = crud_providers.create_provider(db, provider, tenant_id, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info(f"Provider '{db_provider.name}' created by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_provider

@router.patch("/{provider_id}", response_model=Provider)
def update_provider(
    provider_id: int,
    provider: ProviderUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    db_provider = crud_providers.update_provider(db, provider_id, provider, tenant_id, user_id=get_user_identifier(user))
    if db_provider is None:
        raise HTTPException(status_code=404, detail="Provider not found")
    logger.info(f"Provider ID {provider_id} updated by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_provider

@router.delete("/{provider_id}")
def delete_provider(
    provider_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    """Delete a provider and all of its vouchers."""
    name = crud_providers.delete_provider(db, provider_id, tenant_id)
    if name is None:
        raise HTTPException(status_code=404, detail="Provider not found")
    logger.info(f"Provider '{name}' (ID {provider_id}) deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
    return {"message": f'Provider "{name}" deleted successfully'}
