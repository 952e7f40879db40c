from decimal import Decimal

import pytest

from utils.formatting import format_number_with_separators, format_rupiah, parse_formatted_number
from utils.pricing import ALL_VOUCHER_NAMES, calculate_auto_sell_price, voucher_name_suggestions


@pytest.mark.parametrize("cost, expected", [
    (10_000, Decimal("12000")),
    (10_100, Decimal("12500")),
    (10_499, Decimal("12500")),
    (10_500, Decimal("12500")),
    (0, Decimal("0")),
    (-5, Decimal("0")),
])
def test_auto_sell_price_rounds_up_to_step(cost, expected):
    assert calculate_auto_sell_price(cost) == expected


def test_auto_sell_price_uses_configured_markup_and_rounding():
    assert calculate_auto_sell_price(10_000, markup=1_500, rounding=1_000) == Decimal("12000")
    assert calculate_auto_sell_price(10_000, markup=1_500, rounding=0) == Decimal("11500")


def test_voucher_name_catalogue():
    assert ALL_VOUCHER_NAMES[0] == "1GB / 1 Hari"
    assert ALL_VOUCHER_NAMES[-1] == "15GB / 30 Hari"
    assert "1.5GB / 7 Hari" in ALL_VOUCHER_NAMES
    assert len(ALL_VOUCHER_NAMES) == 29 * 8


def test_name_suggestions_are_case_insensitive_and_limited():
    suggestions = voucher_name_suggestions("5gb / 30")
    assert "5GB / 30 Hari" in suggestions
    assert len(suggestions) == 5
    assert all("5gb / 30" in name.lower() for name in suggestions)
    assert len(voucher_name_suggestions("hari")) == 5
    assert voucher_name_suggestions("   ") == []


def test_rupiah_formatting():
    assert format_number_with_separators(1_500_000) == "1.500.000"
    assert format_rupiah(Decimal("12500.00")) == "Rp 12.500"
    assert format_rupiah(-2_000) == "Rp -2.000"
    assert format_rupiah(None) == "Rp 0"


def test_parse_formatted_number():
    assert parse_formatted_number("Rp 1.500.000") == Decimal("1500000")
    assert parse_formatted_number("") == Decimal(0)
    assert parse_formatted_number(2500) == Decimal(2500)
