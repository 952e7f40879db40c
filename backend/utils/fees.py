"""Admin fee lookup against the min/max rules of a transaction type."""

from typing import Iterable, Optional

from utils.balance import to_decimal


def find_applicable_rule(rules: Iterable, transaction_type_id: Optional[int], amount) -> Optional[object]:
    """
    Return the first rule of ``transaction_type_id`` whose inclusive
    [min_amount, max_amount] range contains ``amount``.

    Rules are scanned in the order given; callers pass them sorted by
    min_amount so overlapping ranges resolve to the lowest one.
    """
    amount = to_decimal(amount)
    if not transaction_type_id or amount <= 0:
        return None
    for rule in rules:
        if rule.transaction_type_id != transaction_type_id:
            continue
        if to_decimal(rule.min_amount) <= amount <= to_decimal(rule.max_amount):
            return rule
    return None

