"""
Ledger balance replay.

A ledger stores its opening snapshot and a derived current snapshot. The
current snapshot is never adjusted in place: it is rebuilt from the opening
snapshot by replaying every transaction of the ledger.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Mapping, Optional

from models.atm_ledgers import AccountKey

ACCOUNT_KEYS = [account.value for account in AccountKey]

ACCOUNT_LABELS = {
    "bri": "BRI",
    "mandiri": "Mandiri",
    "dana": "DANA",
    "save_plus": "SavePlus",
    "cash": "Tunai (CASH)",
}


def to_decimal(value: Any) -> Decimal:
    """Coerce stored numbers to Decimal; anything unusable counts as zero."""
    if value is None or isinstance(value, bool):
        return Decimal(0)
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal(0)
    return number if number.is_finite() else Decimal(0)


def _account(value: Any) -> str:
    return value.value if isinstance(value, AccountKey) else str(value)


def _field(transaction: Any, name: str):
    if isinstance(transaction, Mapping):
        return transaction.get(name)
    return getattr(transaction, name, None)


def normalize_balance(balance: Optional[Mapping[str, Any]]) -> Dict[str, Decimal]:
    balance = balance or {}
    return {key: to_decimal(balance.get(key)) for key in ACCOUNT_KEYS}


def balance_to_json(balance: Mapping[str, Any]) -> Dict[str, float]:
    """Shape a snapshot for the JSON columns: every account present, plain floats."""
    normalized = normalize_balance(balance)
    return {key: float(amount) for key, amount in normalized.items()}


def replay_transactions(initial_balance: Optional[Mapping[str, Any]], transactions: Iterable[Any]) -> Dict[str, float]:
    """
    Derive the current balance from the opening balance and the transaction log.

    Transactions are applied in the order given, which callers keep as
    timestamp order. Each one debits its source account, credits its
    destination account and credits the agent admin fee to the profit
    destination account. Accepts ORM rows or plain dicts.
    """
    balance = normalize_balance(initial_balance)
    for transaction in transactions:
        amount = to_decimal(_field(transaction, "amount"))
        agent_admin = to_decimal(_field(transaction, "agent_admin"))
        source = _account(_field(transaction, "source_account"))
        destination = _account(_field(transaction, "destination_account"))
        profit_destination = _account(_field(transaction, "profit_destination"))

        balance[source] = balance.get(source, Decimal(0)) - amount
        balance[destination] = balance.get(destination, Decimal(0)) + amount
        balance[profit_destination] = balance.get(profit_destination, Decimal(0)) + agent_admin
    return {key: float(amount) for key, amount in balance.items()}


def balance_total(balance: Optional[Mapping[str, Any]]) -> float:
    return float(sum(normalize_balance(balance).values(), Decimal(0)))
