from io import BytesIO
from typing import Iterable, List, Sequence, Tuple
from zipfile import BadZipFile
import logging

import pandas as pd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

logger = logging.getLogger(__name__)

VOUCHER_COLUMNS = ["Provider ID", "Nama Voucher", "Total Stok", "Sisa Stok", "Harga Modal", "Harga Jual", "Rencana Stok"]
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def read_voucher_rows(content: bytes) -> List[Tuple[int, Sequence]]:
    """
    Read the first sheet of an .xlsx upload.

    The first row is a header and is skipped. Returns (row number, values)
    pairs so callers can report which rows they rejected.
    """
    try:
        wb = load_workbook(BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, OSError) as e:
        logger.warning(f"Unreadable spreadsheet upload: {e}")
        raise ValueError("Gagal memproses file Excel.")

    try:
        ws = wb.worksheets[0]
        rows = []
        for row_number, values in enumerate(ws.iter_rows(min_row=2, values_only=True), start=2):
            rows.append((row_number, tuple(values)))
        return rows
    finally:
        wb.close()


def write_vouchers_excel(providers: Iterable, vouchers: Iterable) -> BytesIO:
    """Voucher inventory in the same column layout the importer reads."""
    original_ids = {provider.id: provider.original_id for provider in providers}
    records = []
    for voucher in vouchers:
        records.append([
            original_ids.get(voucher.provider_id),
            voucher.name,
            voucher.total_stock,
            voucher.remaining_stock,
            float(voucher.cost_price),
            float(voucher.sell_price),
            voucher.planned_stock,
        ])
    df = pd.DataFrame(records, columns=VOUCHER_COLUMNS)

    excel_file = BytesIO()
    df.to_excel(excel_file, index=False, sheet_name='Voucher')
    excel_file.seek(0)
    return excel_file
