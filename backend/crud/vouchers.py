from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from pydantic import ValidationError
from sqlalchemy.orm import Session
from models.vouchers import Voucher
from models.providers import Provider
from models.activity_logs import ActivityType
from schemas.vouchers import ImportResult, SaleLine, SaleResult, VoucherUpdate, VoucherUpsert
from crud.activity_logs import add_log
from crud.app_config import get_voucher_pricing_config
from crud.providers import find_provider_by_original_id
from utils import local_now
from utils.balance import to_decimal
from utils.formatting import format_rupiah, parse_formatted_number
from utils.pricing import calculate_auto_sell_price

logger = logging.getLogger(__name__)

def get_voucher(db: Session, voucher_id: int, tenant_id: str):
    return db.query(Voucher).filter(Voucher.id == voucher_id, Voucher.tenant_id == tenant_id).first()

def get_vouchers(db: Session, tenant_id: str, provider_id: Optional[int] = None) -> List[Voucher]:
    query = db.query(Voucher).filter(Voucher.tenant_id == tenant_id)
    if provider_id is not None:
        query = query.filter(Voucher.provider_id == provider_id)
    return query.order_by(Voucher.provider_id, Voucher.id).all()

def find_voucher(db: Session, tenant_id: str, provider_id: int, name: str):
    return db.query(Voucher).filter(
        Voucher.tenant_id == tenant_id,
        Voucher.provider_id == provider_id,
        Voucher.name == name,
    ).first()

def auto_sell_price(db: Session, tenant_id: str, cost_price) -> Decimal:
    pricing = get_voucher_pricing_config(db, tenant_id)
    return calculate_auto_sell_price(cost_price, pricing.voucher_markup, pricing.voucher_price_rounding)

def upsert_voucher(db: Session, voucher: VoucherUpsert, tenant_id: str, user_id: str, log: bool = True) -> Tuple[Voucher, bool]:
    """
    Create the voucher, or update the one with the same provider and name.

    Returns (voucher, created).
    """
    provider = db.query(Provider).filter(Provider.id == voucher.provider_id, Provider.tenant_id == tenant_id).first()
    if provider is None:
        raise ValueError(f"Provider with ID {voucher.provider_id} not found")

    data = voucher.model_dump()
    if data["sell_price"] is None:
        data["sell_price"] = auto_sell_price(db, tenant_id, data["cost_price"])

    db_voucher = find_voucher(db, tenant_id, voucher.provider_id, voucher.name)
    created = db_voucher is None
    if created:
        db_voucher = Voucher(**data, tenant_id=tenant_id, created_by=user_id, updated_by=user_id)
        db.add(db_voucher)
    else:
        for key, value in data.items():
            setattr(db_voucher, key, value)
        db_voucher.updated_at = local_now()
        db_voucher.updated_by = user_id

    if log:
        verb = "ditambahkan" if created else "diperbarui"
        add_log(db, tenant_id, ActivityType.EDIT, f'Voucher "{voucher.name}" {verb}.', commit=False)
    db.commit()
    db.refresh(db_voucher)
    return db_voucher, created

def update_voucher(db: Session, voucher_id: int, voucher: VoucherUpdate, tenant_id: str, user_id: str):
    db_voucher = get_voucher(db, voucher_id, tenant_id)
    if db_voucher is None:
        return None

    update_data = voucher.model_dump(exclude_unset=True)
    new_name = update_data.get("name")
    if new_name is not None and new_name != db_voucher.name:
        if find_voucher(db, tenant_id, db_voucher.provider_id, new_name):
            raise ValueError(f'Voucher "{new_name}" already exists for this provider')

    for key, value in update_data.items():
        if value is not None:
            setattr(db_voucher, key, value)
    db_voucher.updated_at = local_now()
    db_voucher.updated_by = user_id
    add_log(db, tenant_id, ActivityType.EDIT, f'Voucher "{db_voucher.name}" diperbarui.', commit=False)
    db.commit()
    db.refresh(db_voucher)
    return db_voucher

def delete_voucher(db: Session, voucher_id: int, tenant_id: str):
    db_voucher = get_voucher(db, voucher_id, tenant_id)
    if db_voucher is None:
        return None
    name = db_voucher.name
    db.delete(db_voucher)
    add_log(db, tenant_id, ActivityType.DELETE_VOUCHER, f'Voucher "{name}" dihapus.', commit=False)
    db.commit()
    return name

def add_stock(db: Session, voucher_id: int, quantity: int, tenant_id: str, user_id: str):
    """Receive new stock: planned restock shrinks by what arrived, never below zero."""
    if quantity is None or quantity <= 0:
        raise ValueError("Quantity must be a positive number")
    db_voucher = get_voucher(db, voucher_id, tenant_id)
    if db_voucher is None:
        return None

    db_voucher.total_stock += quantity
    db_voucher.remaining_stock += quantity
    db_voucher.planned_stock = max(0, db_voucher.planned_stock - quantity)
    db_voucher.updated_at = local_now()
    db_voucher.updated_by = user_id
    add_log(db, tenant_id, ActivityType.ADD_STOCK, f'{quantity} stok ditambahkan ke "{db_voucher.name}".', commit=False)
    db.commit()
    db.refresh(db_voucher)
    return db_voucher

def complete_sale(db: Session, cart: Dict[int, int], tenant_id: str, user_id: str) -> SaleResult:
    """
    Sell the cart (voucher id -> quantity).

    Lines with an unknown voucher, a non-positive quantity or not enough
    remaining stock are skipped. Raises ValueError when no line could be sold.
    """
    sold: List[SaleLine] = []
    skipped: List[SaleLine] = []
    total = Decimal(0)

    for voucher_id, quantity in cart.items():
        db_voucher = get_voucher(db, voucher_id, tenant_id)
        if db_voucher is None:
            skipped.append(SaleLine(voucher_id=voucher_id, quantity=quantity, reason="Voucher not found"))
            continue
        if quantity <= 0:
            skipped.append(SaleLine(voucher_id=voucher_id, name=db_voucher.name, quantity=quantity, reason="Quantity must be positive"))
            continue
        if db_voucher.remaining_stock < quantity:
            skipped.append(SaleLine(
                voucher_id=voucher_id,
                name=db_voucher.name,
                quantity=quantity,
                reason=f"Insufficient stock. Available: {db_voucher.remaining_stock}, Requested: {quantity}",
            ))
            continue

        db_voucher.remaining_stock -= quantity
        db_voucher.updated_at = local_now()
        db_voucher.updated_by = user_id
        line_total = to_decimal(db_voucher.sell_price) * quantity
        total += line_total
        sold.append(SaleLine(voucher_id=voucher_id, name=db_voucher.name, quantity=quantity, line_total=line_total))

    if not sold:
        db.rollback()
        raise ValueError("Gagal memproses penjualan: no item in the cart could be sold")

    details = ", ".join(f"{line.quantity}x {line.name}" for line in sold)
    message = f"Penjualan: {details} | Total: {format_rupiah(total)}."
    add_log(db, tenant_id, ActivityType.SALE, message, commit=False)
    db.commit()
    return SaleResult(sold=sold, skipped=skipped, total=total, message=message)

def _int_cell(value, default: int = 0) -> int:
    if value is None or value == "":
        return default
    return int(to_decimal(value))

def _sell_price_cell(value) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    if isinstance(value, str) and not any(ch.isdigit() for ch in value):
        return None
    price = parse_formatted_number(value)
    return price if price.is_finite() else None

def import_vouchers(db: Session, rows: Iterable[Tuple[int, Sequence]], tenant_id: str, user_id: str) -> ImportResult:
    """
    Upsert vouchers from spreadsheet rows (row number, cell values).

    Columns: provider original id, name, total stock, remaining stock,
    cost price, sell price, planned stock. Unknown provider ids get a
    placeholder provider "Provider <id>".
    """
    imported = 0
    skipped_rows: List[int] = []

    for row_number, row in rows:
        cells = list(row or [])
        if not any(cell not in (None, "") for cell in cells):
            continue
        cells = (cells + [None] * 7)[:7]
        provider_ref, name, total_stock, remaining_stock, cost_price, sell_price, planned_stock = cells
        if provider_ref in (None, "") or name in (None, ""):
            skipped_rows.append(row_number)
            continue

        try:
            original_id = int(to_decimal(provider_ref))
            total = _int_cell(total_stock)
            voucher_data = dict(
                name=str(name).strip(),
                total_stock=total,
                remaining_stock=_int_cell(remaining_stock, default=total),
                planned_stock=_int_cell(planned_stock),
                cost_price=to_decimal(parse_formatted_number(cost_price)),
                sell_price=_sell_price_cell(sell_price),
            )
        except (ArithmeticError, ValueError):
            logger.warning(f"Skipping spreadsheet row {row_number} for tenant {tenant_id}: unreadable numbers")
            skipped_rows.append(row_number)
            continue
        if original_id < 1 or not voucher_data["name"]:
            skipped_rows.append(row_number)
            continue

        try:
            voucher = VoucherUpsert(provider_id=0, **voucher_data)
        except ValidationError as e:
            logger.warning(f"Skipping spreadsheet row {row_number} for tenant {tenant_id}: {e.errors()}")
            skipped_rows.append(row_number)
            continue

        provider = find_provider_by_original_id(db, original_id, tenant_id)
        if provider is None:
            provider = Provider(name=f"Provider {original_id}", original_id=original_id, tenant_id=tenant_id, created_by=user_id)
            db.add(provider)
            db.commit()
            db.refresh(provider)
        voucher.provider_id = provider.id

        upsert_voucher(db, voucher, tenant_id, user_id, log=False)
        imported += 1

    if imported > 0:
        add_log(db, tenant_id, ActivityType.IMPORT, f"Mengimpor {imported} voucher dari Excel.")
    return ImportResult(imported=imported, skipped_rows=skipped_rows)
