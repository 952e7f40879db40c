"""Plain-text voucher reports, ready to paste into a chat message."""

from decimal import Decimal
from typing import Dict, Iterable, List

from utils.balance import to_decimal
from utils.formatting import format_rupiah


def _group_by_provider(providers: Iterable, vouchers: Iterable) -> List[tuple]:
    by_provider: Dict[int, list] = {}
    for voucher in vouchers:
        by_provider.setdefault(voucher.provider_id, []).append(voucher)
    return [(provider, by_provider[provider.id]) for provider in providers if by_provider.get(provider.id)]


def generate_complete_report(providers: Iterable, vouchers: Iterable, signature: str) -> str:
    lines = ["LAPORAN LENGKAP VOUCHER INTERNET", ""]
    grand_total_sales = Decimal(0)
    grand_total_profit = Decimal(0)

    for provider, provider_vouchers in _group_by_provider(providers, vouchers):
        lines += [f"===== {provider.name.upper()} =====", ""]
        sub_total_sales = Decimal(0)
        sub_total_profit = Decimal(0)
        for v in provider_vouchers:
            sold = v.total_stock - v.remaining_stock
            total_sales = sold * to_decimal(v.sell_price)
            cost_of_sold = sold * to_decimal(v.cost_price)
            profit = total_sales - cost_of_sold
            sub_total_sales += total_sales
            sub_total_profit += profit
            lines += [
                f"- {v.name}",
                "=================",
                f"Harga Modal : {format_rupiah(v.cost_price)}",
                f"Harga Jual  : {format_rupiah(v.sell_price)}",
                "--- Rincian Stok ---",
                f"Total Stok  : {v.total_stock} pcs",
                f"Terjual     : {sold} pcs",
                f"Sisa        : {v.remaining_stock} pcs",
                "--- Rincian Keuangan ---",
                f"Total Penjualan       : {format_rupiah(total_sales)}",
                f"Total Modal (Terjual) : {format_rupiah(cost_of_sold)}",
                f"Keuntungan            : {format_rupiah(profit)}",
                "",
            ]
        grand_total_sales += sub_total_sales
        grand_total_profit += sub_total_profit
        lines += [
            f"--- Sub-Total {provider.name} ---",
            f"Total Penjualan : {format_rupiah(sub_total_sales)}",
            f"Total Keuntungan: {format_rupiah(sub_total_profit)}",
            "------------------------",
            "",
        ]

    lines += [
        "===== TOTAL KESELURUHAN =====",
        f"Total Seluruh Penjualan : {format_rupiah(grand_total_sales)}",
        f"Total Seluruh Keuntungan: {format_rupiah(grand_total_profit)}",
        "",
        f"Created by : {signature}",
    ]
    return "\n".join(lines)


def generate_short_report(providers: Iterable, vouchers: Iterable, signature: str) -> str:
    """Remaining stock plus the cost of the planned restock."""
    lines = ["LAPORAN SISA & RENCANA TAMBAH STOK VOUCHER", ""]
    grand_total_planned_cost = Decimal(0)

    for provider, provider_vouchers in _group_by_provider(providers, vouchers):
        lines += [f"===== {provider.name.upper()} =====", ""]
        sub_total_planned_cost = Decimal(0)
        for v in provider_vouchers:
            lines += [f"- {v.name}", f"Sisa Stok : {v.remaining_stock} pcs"]
            if v.planned_stock > 0:
                estimated_cost = v.planned_stock * to_decimal(v.cost_price)
                sub_total_planned_cost += estimated_cost
                lines.append(
                    f"*Rencana Tambah Stok : {v.planned_stock} Pcs x {format_rupiah(v.cost_price)} = {format_rupiah(estimated_cost)}*"
                )
            lines.append("")
        grand_total_planned_cost += sub_total_planned_cost
        lines += [
            f"--- *Sub-Total Modal {provider.name}* ---",
            f"Total Rencana Tambah Stok    : {format_rupiah(sub_total_planned_cost)}",
            "---------------------------",
            "",
        ]

    lines += [
        " *TOTAL KESELURUHAN MODAL*",
        f"Total Harga Tambah Stok    : {format_rupiah(grand_total_planned_cost)}",
        "",
        f"Dilaporkan Oleh : {signature}",
    ]
    return "\n".join(lines)
