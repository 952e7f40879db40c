from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

def format_number_with_separators(amount) -> str:
    """Whole rupiah with dot thousand separators: 1500000 -> '1.500.000'."""
    if amount is None:
        return "0"
    amount = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    digits = f"{abs(int(amount)):,}".replace(",", ".")
    return f"{sign}{digits}"

def format_rupiah(amount) -> str:
    if amount is None:
        return "Rp 0"
    return f"Rp {format_number_with_separators(amount)}"

def parse_formatted_number(value) -> Decimal:
    """Read operator input such as 'Rp 1.500.000' back into a number; junk reads as 0."""
    if value is None:
        return Decimal(0)
    if isinstance(value, (int, float, Decimal)):
        return Decimal(str(value))
    cleaned = re.sub(r"[^0-9,-]", "", str(value)).replace(",", ".")
    if not cleaned or cleaned == "-":
        return Decimal(0)
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return Decimal(0)
