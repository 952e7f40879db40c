from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

from utils.pdf_utils import format_date_id, generate_ledger_pdf, ledger_pdf_disposition, ledger_pdf_filename
from utils.report_utils import generate_complete_report, generate_short_report

PROVIDERS = [
    SimpleNamespace(id=1, name="Telkomsel"),
    SimpleNamespace(id=2, name="IM3"),  # no vouchers, left out of the reports
]
VOUCHERS = [
    SimpleNamespace(provider_id=1, name="5GB / 30 Hari", total_stock=10, remaining_stock=4, planned_stock=5,
                    cost_price=Decimal("10000"), sell_price=Decimal("12000")),
    SimpleNamespace(provider_id=1, name="1GB / 1 Hari", total_stock=3, remaining_stock=3, planned_stock=0,
                    cost_price=Decimal("3000"), sell_price=Decimal("5000")),
]


def test_complete_report_totals():
    report = generate_complete_report(PROVIDERS, VOUCHERS, "Admin Konter")

    assert report.startswith("LAPORAN LENGKAP VOUCHER INTERNET")
    assert "===== TELKOMSEL =====" in report
    assert "IM3" not in report
    assert "Terjual     : 6 pcs" in report
    assert "Total Penjualan       : Rp 72.000" in report
    assert "Keuntungan            : Rp 12.000" in report
    assert "Total Seluruh Penjualan : Rp 72.000" in report
    assert "Total Seluruh Keuntungan: Rp 12.000" in report
    assert report.endswith("Created by : Admin Konter")


def test_short_report_lists_planned_restock_cost():
    report = generate_short_report(PROVIDERS, VOUCHERS, "Budi")

    assert "Sisa Stok : 4 pcs" in report
    assert "*Rencana Tambah Stok : 5 Pcs x Rp 10.000 = Rp 50.000*" in report
    # Vouchers without a planned restock only show their remaining stock
    assert report.count("Rencana Tambah Stok :") == 1
    assert "Total Harga Tambah Stok    : Rp 50.000" in report
    assert report.endswith("Dilaporkan Oleh : Budi")


def test_reports_for_empty_inventory():
    report = generate_short_report([], [], "Budi")
    assert "Total Harga Tambah Stok    : Rp 0" in report


def test_ledger_pdf_is_rendered():
    ledger = SimpleNamespace(
        id=1,
        name="Pembukuan 2026-10-17",
        date=datetime(2026, 10, 17, 8, 30),
        initial_balance={"bri": 1_000_000, "cash": 500_000},
        current_balance={"bri": 1_100_000, "cash": 405_000},
    )
    transactions = [
        SimpleNamespace(timestamp=datetime(2026, 10, 17, 9, 15), type_name="Tarik Tunai",
                        amount=Decimal("100000"), agent_admin=Decimal("5000"), notes="Pak Joko"),
        SimpleNamespace(timestamp=datetime(2026, 10, 17, 9, 45), type_name="Transfer → BCA",
                        amount=Decimal("50000"), agent_admin=Decimal("0"), notes=None),
    ]

    pdf_bytes = generate_ledger_pdf(ledger, transactions, "UNI BRILINK")

    assert isinstance(pdf_bytes, bytes)
    assert pdf_bytes.startswith(b"%PDF")
    assert ledger_pdf_filename(ledger) == "Laporan_Pembukuan_2026-10-17_2026-10-17.pdf"


def test_format_date_id():
    assert format_date_id(datetime(2026, 10, 17)) == "17 Oktober 2026"


def test_ledger_pdf_disposition_keeps_header_ascii():
    ledger = SimpleNamespace(name="Pembukuan – Senin", date=datetime(2026, 10, 19))

    disposition = ledger_pdf_disposition(ledger)

    disposition.encode("latin-1")
    assert 'filename="Laporan_Pembukuan_Senin_2026-10-19.pdf"' in disposition
    assert "filename*=UTF-8''Laporan_Pembukuan_%E2%80%93_Senin_2026-10-19.pdf" in disposition
