from fpdf import FPDF
from fpdf.enums import XPos, YPos
from typing import Iterable
from urllib.parse import quote
import logging
import re
import unicodedata

from utils.balance import ACCOUNT_KEYS, ACCOUNT_LABELS, balance_total
from utils.formatting import format_rupiah

logger = logging.getLogger(__name__)

MONTHS_ID = ["Januari", "Februari", "Maret", "April", "Mei", "Juni", "Juli",
             "Agustus", "September", "Oktober", "November", "Desember"]


def _latin1(text) -> str:
    # Core PDF fonts only cover latin-1
    return str(text if text is not None else "").encode("latin-1", "replace").decode("latin-1")


def format_date_id(value) -> str:
    return f"{value.day:02d} {MONTHS_ID[value.month - 1]} {value.year}"


class LedgerPDF(FPDF):
    def __init__(self, business_name: str):
        super().__init__()
        self.business_name = business_name

    def header(self):
        self.set_font('Helvetica', 'B', 16)
        self.cell(0, 10, 'Laporan Pembukuan Mini ATM', border=0, align='C', new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def footer(self):
        self.set_y(-15)
        self.set_font('Helvetica', 'I', 8)
        self.cell(0, 10, _latin1(f'{self.business_name} - Halaman {self.page_no()} dari {{nb}}'), border=0, align='C')


def _balance_table(pdf: LedgerPDF, title: str, balance: dict):
    pdf.set_font('Helvetica', 'B', 11)
    pdf.cell(120, 8, title, border=1, align='L')
    pdf.cell(60, 8, 'Jumlah', border=1, align='C', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font('Helvetica', '', 11)
    for key in ACCOUNT_KEYS:
        pdf.cell(120, 8, ACCOUNT_LABELS[key], border=1, align='L')
        pdf.cell(60, 8, format_rupiah((balance or {}).get(key, 0)), border=1, align='R', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font('Helvetica', 'B', 11)
    pdf.cell(120, 8, 'TOTAL', border=1, align='L')
    pdf.cell(60, 8, format_rupiah(balance_total(balance)), border=1, align='R', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(4)


def generate_ledger_pdf(ledger, transactions: Iterable, business_name: str) -> bytes:
    """
    Render a ledger report: opening and closing balances followed by every
    transaction (time, type, amount, agent admin, notes).
    """
    pdf = LedgerPDF(business_name)
    pdf.alias_nb_pages()
    pdf.add_page()

    pdf.set_font('Helvetica', '', 12)
    pdf.cell(0, 7, _latin1(ledger.name), border=0, align='C', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font('Helvetica', '', 10)
    pdf.cell(0, 7, f'Tanggal: {format_date_id(ledger.date)}', border=0, align='C', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(6)

    _balance_table(pdf, 'Saldo Awal', ledger.initial_balance)
    _balance_table(pdf, 'Saldo Akhir', ledger.current_balance)

    pdf.set_font('Helvetica', 'B', 14)
    pdf.cell(0, 10, 'Rincian Transaksi', border=0, align='L', new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    widths = [20, 50, 35, 30, 45]
    headers = ['Waktu', 'Jenis Transaksi', 'Nominal', 'Admin Agen', 'Catatan']
    pdf.set_font('Helvetica', 'B', 10)
    for width, title in zip(widths, headers):
        pdf.cell(width, 8, title, border=1, align='C')
    pdf.ln()

    pdf.set_font('Helvetica', '', 9)
    count = 0
    for tx in transactions:
        pdf.cell(widths[0], 7, tx.timestamp.strftime('%H:%M'), border=1, align='C')
        pdf.cell(widths[1], 7, _latin1(tx.type_name)[:28], border=1, align='L')
        pdf.cell(widths[2], 7, format_rupiah(tx.amount), border=1, align='R')
        pdf.cell(widths[3], 7, format_rupiah(tx.agent_admin), border=1, align='R')
        pdf.cell(widths[4], 7, _latin1(tx.notes)[:26], border=1, align='L')
        pdf.ln()
        count += 1

    logger.debug(f"Rendered ledger {ledger.id} PDF with {count} transactions")
    return bytes(pdf.output())


def ledger_pdf_filename(ledger) -> str:
    return f"Laporan_{ledger.name.replace(' ', '_')}_{ledger.date.strftime('%Y-%m-%d')}.pdf"


def ledger_pdf_disposition(ledger) -> str:
    """
    Content-Disposition for the ledger PDF. Ledger names are free text, so the
    plain filename is reduced to ASCII and the full name goes in filename*.
    """
    filename = ledger_pdf_filename(ledger)
    ascii_name = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    ascii_name = re.sub(r"[^A-Za-z0-9.-]+", "_", ascii_name)
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"
