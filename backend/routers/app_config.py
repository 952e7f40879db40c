from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from schemas.app_config import AppConfigCreate, AppConfigUpdate, AppConfigOut
from crud import app_config as crud_app_config
from models.app_config import AppConfig as AppConfigModel
from utils.auth_utils import get_current_user, get_user_identifier
from utils.tenancy import get_tenant_id

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/configurations/", response_model=AppConfigOut)
def create_config(config: AppConfigCreate, db: Session = Depends(get_db), user: dict = Depends(get_current_user), tenant_id: str = Depends(get_tenant_id)):
    if crud_app_config.get_config(db, tenant_id, name=config.name):
        raise HTTPException(status_code=400, detail=f"Configuration '{config.name}' already exists")
    return crud_app_config.create_config(db, config, tenant_id, user_id=get_user_identifier(user))


@router.get("/configurations/", response_model=List[AppConfigOut])
def get_configs(name: Optional[str] = None, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    configs = crud_app_config.get_config(db, tenant_id, name=name)
    # Always return a list, even if empty
    if name:
        return [configs] if configs else []
    return configs

@router.patch("/configurations/{name}/", response_model=AppConfigOut)
def update_config(name: str, config: AppConfigUpdate, db: Session = Depends(get_db), user: dict = Depends(get_current_user), tenant_id: str = Depends(get_tenant_id)):
    updated = crud_app_config.update_config_by_name(db, name, config, tenant_id, user_id=get_user_identifier(user))
    if not updated:
        raise HTTPException(status_code=404, detail="Configuration not found")
    logger.info(f"Configuration '{name}' updated by user {get_user_identifier(user)} for tenant {tenant_id}")
    return updated


@router.get("/tenants/configs-initialized", tags=["Tenants"])
def are_tenant_configurations_initialized(
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """
    Checks if the default application configurations are initialized for a tenant.
    """
    default_config_names = {config["name"] for config in crud_app_config.DEFAULT_CONFIGS}
    existing_config_names = {
        name for (name,) in db.query(AppConfigModel.name).filter(
            AppConfigModel.tenant_id == tenant_id,
            AppConfigModel.name.in_(default_config_names)
        )
    }
    return {"configs_initialized": default_config_names.issubset(existing_config_names)}


@router.post("/tenants/initialize-configs", status_code=status.HTTP_201_CREATED, tags=["Tenants"])
def initialize_tenant_configurations(
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    """
    Initializes the tenant with the default set of application configurations.
    This is idempotent; it will not overwrite existing configurations for the tenant.
    """
    new_configs_created = crud_app_config.initialize_default_configs(db, tenant_id, user_id=get_user_identifier(user))
    if not new_configs_created:
        return {"message": f"All default configurations already exist for tenant '{tenant_id}'.", "new_configs": []}

    logger.info(f"Initialized default configs for tenant '{tenant_id}' by user {get_user_identifier(user)}. New configs: {new_configs_created}")
    return {"message": f"Successfully initialized default configurations for tenant '{tenant_id}'.", "new_configs": new_configs_created}
