from decimal import Decimal
from io import BytesIO
from types import SimpleNamespace

import pytest
from openpyxl import Workbook

from utils.spreadsheet import VOUCHER_COLUMNS, read_voucher_rows, write_vouchers_excel


def workbook_bytes(rows):
    wb = Workbook()
    ws = wb.active
    ws.append(VOUCHER_COLUMNS)
    for row in rows:
        ws.append(row)
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def test_read_skips_header_and_numbers_rows():
    content = workbook_bytes([
        [1, "5GB / 30 Hari", 10, 8, 10000, 12000, 2],
        [3, "1GB / 1 Hari", 5, None, 3000, None, None],
    ])

    rows = read_voucher_rows(content)

    assert rows[0] == (2, (1, "5GB / 30 Hari", 10, 8, 10000, 12000, 2))
    assert rows[1][0] == 3
    assert rows[1][1][:2] == (3, "1GB / 1 Hari")


def test_unreadable_file_raises_value_error():
    with pytest.raises(ValueError):
        read_voucher_rows(b"definitely not a spreadsheet")


def test_export_uses_import_layout():
    providers = [SimpleNamespace(id=10, original_id=4)]
    vouchers = [SimpleNamespace(provider_id=10, name="2GB / 7 Hari", total_stock=6, remaining_stock=1, planned_stock=3,
                                cost_price=Decimal("8000"), sell_price=Decimal("10000"))]

    exported = write_vouchers_excel(providers, vouchers)
    rows = read_voucher_rows(exported.getvalue())

    assert len(rows) == 1
    row_number, values = rows[0]
    assert row_number == 2
    assert values[0] == 4
    assert values[1] == "2GB / 7 Hari"
    assert values[4] == 8000
    assert values[6] == 3
