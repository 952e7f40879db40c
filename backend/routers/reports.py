from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from database import get_db
from crud import providers as crud_providers
from crud import vouchers as crud_vouchers
from crud.app_config import get_report_config
from utils.report_utils import generate_complete_report, generate_short_report
from utils.tenancy import get_tenant_id

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
)

def _report_inputs(db: Session, tenant_id: str):
    providers = crud_providers.get_providers(db, tenant_id)
    vouchers = crud_vouchers.get_vouchers(db, tenant_id)
    signature = get_report_config(db, tenant_id).report_signature
    return providers, vouchers, signature

@router.get("/vouchers/complete", response_class=PlainTextResponse)
def complete_voucher_report(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    """Stock, sales and profit per voucher with provider subtotals."""
    return generate_complete_report(*_report_inputs(db, tenant_id))

@router.get("/vouchers/short", response_class=PlainTextResponse)
def short_voucher_report(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    """Remaining stock and the cost of the planned restock."""
    return generate_short_report(*_report_inputs(db, tenant_id))
