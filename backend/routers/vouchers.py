from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from decimal import Decimal
from typing import List, Optional
import logging

from database import get_db
from schemas.vouchers import AddStockRequest, ImportResult, SaleRequest, SaleResult, Voucher, VoucherUpdate, VoucherUpsert
from crud import vouchers as crud_vouchers
from crud import providers as crud_providers
from utils import local_now
from utils.auth_utils import get_current_user, get_user_identifier
from utils.pricing import voucher_name_suggestions
from utils.spreadsheet import XLSX_MEDIA_TYPE, read_voucher_rows, write_vouchers_excel
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/vouchers", tags=["Vouchers"])
logger = logging.getLogger("vouchers")

@router.get("/", response_model=List[Voucher])
def read_vouchers(provider_id: Optional[int] = None, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return crud_vouchers.get_vouchers(db, tenant_id, provider_id=provider_id)

@router.get("/name-suggestions", response_model=List[str])
def get_name_suggestions(q: str = "", limit: int = Query(5, ge=1, le=20)):
    """Package names like "5GB / 30 Hari" containing the query."""
    return voucher_name_suggestions(q, limit=limit)

@router.get("/auto-price")
def get_auto_sell_price(cost_price: Decimal, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return {"cost_price": cost_price, "sell_price": crud_vouchers.auto_sell_price(db, tenant_id, cost_price)}

@router.get("/export")
def export_vouchers(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    """Download the voucher inventory as an Excel file in the import layout."""
    providers = crud_providers.get_providers(db, tenant_id)
    order = {provider.id: provider.original_id for provider in providers}
    vouchers = sorted(crud_vouchers.get_vouchers(db, tenant_id), key=lambda v: (order.get(v.provider_id, 0), v.id))
    excel_file = write_vouchers_excel(providers, vouchers)
    filename = f"Voucher_{local_now().strftime('%Y-%m-%d')}.xlsx"
    return StreamingResponse(
        excel_file,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )

@router.post("/import", response_model=ImportResult)
def import_vouchers(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    """
    Upsert vouchers from an .xlsx file. The first sheet is read and its first
    row is treated as the header.
    """
    contents = file.file.read()
    try:
        rows = read_voucher_rows(contents)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = crud_vouchers.import_vouchers(db, rows, tenant_id, user_id=get_user_identifier(user))
    logger.info(f"Imported {result.imported} vouchers from '{file.filename}' by user {get_user_identifier(user)} for tenant {tenant_id}, skipped rows: {result.skipped_rows}")
    return result

@router.post("/sale", response_model=SaleResult)
def complete_sale(
    sale: SaleRequest,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    try:
        result = crud_vouchers.complete_sale(db, sale.cart, tenant_id, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info(f"Sale completed by user {get_user_identifier(user)} for tenant {tenant_id}: {result.message}")
    return result

@router.post("/", response_model=Voucher)
def upsert_voucher(
    voucher: VoucherUpsert,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    """Create a voucher, or update the one with the same provider and name."""
    try:
        db_voucher, created = crud_vouchers.upsert_voucher(db, voucher, tenant_id, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info(f"Voucher '{db_voucher.name}' {'created' if created else 'updated'} by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_voucher

@router.get("/{voucher_id}", response_model=Voucher)
def read_voucher(voucher_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    db_voucher = crud_vouchers.get_voucher(db, voucher_id, tenant_id)
    if db_voucher is None:
        raise HTTPException(status_code=404, detail="Voucher not found")
    return db_voucher

@router.patch("/{voucher_id}", response_model=Voucher)
def update_voucher(
    voucher_id: int,
    voucher: VoucherUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    try:
        db_voucher = crud_vouchers.update_voucher(db, voucher_id, voucher, tenant_id, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if db_voucher is None:
        raise HTTPException(status_code=404, detail="Voucher not found")
    logger.info(f"Voucher ID {voucher_id} updated by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_voucher

@router.delete("/{voucher_id}")
def delete_voucher(
    voucher_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    name = crud_vouchers.delete_voucher(db, voucher_id, tenant_id)
    if name is None:
        raise HTTPException(status_code=404, detail="Voucher not found")
    logger.info(f"Voucher '{name}' (ID {voucher_id}) deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
    return {"message": f'Voucher "{name}" deleted successfully'}

@router.post("/{voucher_id}/add-stock", response_model=Voucher)
def add_stock(
    voucher_id: int,
    request: AddStockRequest,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    try:
        db_voucher = crud_vouchers.add_stock(db, voucher_id, request.quantity, tenant_id, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if db_voucher is None:
        raise HTTPException(status_code=404, detail="Voucher not found")
    logger.info(f"Added {request.quantity} stock to voucher ID {voucher_id} by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_voucher
