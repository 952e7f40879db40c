from decimal import Decimal, ROUND_CEILING
from typing import List

from utils.balance import to_decimal

DEFAULT_MARKUP = Decimal("2000")
DEFAULT_ROUNDING = Decimal("500")

SUGGESTION_DAYS = [1, 2, 3, 5, 7, 10, 14, 30]


def calculate_auto_sell_price(cost_price, markup=DEFAULT_MARKUP, rounding=DEFAULT_ROUNDING) -> Decimal:
    """
    Sell price suggested for a voucher: cost plus markup, rounded up to the
    next multiple of ``rounding``. A non-positive cost gives 0.
    """
    cost = to_decimal(cost_price)
    if cost <= 0:
        return Decimal(0)
    price = cost + to_decimal(markup)
    step = to_decimal(rounding)
    if step > 0:
        price = (price / step).to_integral_value(rounding=ROUND_CEILING) * step
    return price.quantize(Decimal("0.01"))


def _all_voucher_names() -> List[str]:
    names = []
    gb = Decimal("1")
    while gb <= 15:
        label = f"{int(gb)}GB" if gb == gb.to_integral_value() else f"{gb}GB"
        for days in SUGGESTION_DAYS:
            names.append(f"{label} / {days} Hari")
        gb += Decimal("0.5")
    return names


ALL_VOUCHER_NAMES = _all_voucher_names()


def voucher_name_suggestions(query: str, limit: int = 5) -> List[str]:
    """Up to ``limit`` package names containing ``query``, case-insensitive."""
    query = (query or "").strip().lower()
    if not query:
        return []
    return [name for name in ALL_VOUCHER_NAMES if query in name.lower()][:limit]
