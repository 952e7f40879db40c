from decimal import Decimal
from types import SimpleNamespace

import pytest

from models.atm_ledgers import AccountKey
from utils.balance import balance_to_json, balance_total, replay_transactions, to_decimal

OPENING = {"bri": 1_000_000, "mandiri": 500_000, "dana": 0, "save_plus": 0, "cash": 2_000_000}


def test_replay_moves_amount_and_credits_agent_admin():
    transactions = [
        # Tarik tunai: cash leaves the drawer, BRI balance goes up
        {"amount": 100_000, "agent_admin": 5_000, "source_account": "cash", "destination_account": "bri", "profit_destination": "cash"},
        # Transfer: customer pays cash, Mandiri balance goes down
        {"amount": 250_000, "agent_admin": 7_000, "source_account": "mandiri", "destination_account": "cash", "profit_destination": "cash"},
    ]

    balance = replay_transactions(OPENING, transactions)

    assert balance == {
        "bri": 1_100_000.0,
        "mandiri": 250_000.0,
        "dana": 0.0,
        "save_plus": 0.0,
        "cash": 2_000_000 - 100_000 + 5_000 + 250_000 + 7_000,
    }


def test_replay_accepts_orm_like_rows_and_enum_accounts():
    row = SimpleNamespace(
        amount=Decimal("50000.00"),
        agent_admin=Decimal("2500.00"),
        source_account=AccountKey.CASH,
        destination_account=AccountKey.DANA,
        profit_destination=AccountKey.DANA,
    )

    balance = replay_transactions(OPENING, [row])

    assert balance["cash"] == 1_950_000.0
    assert balance["dana"] == 52_500.0


def test_replay_without_transactions_returns_opening_balance():
    assert replay_transactions(OPENING, []) == balance_to_json(OPENING)


def test_missing_and_junk_values_count_as_zero():
    balance = replay_transactions(
        {"bri": "abc", "cash": None},
        [{"amount": "oops", "agent_admin": None, "source_account": "bri", "destination_account": "cash", "profit_destination": "cash"}],
    )

    assert balance == {"bri": 0.0, "mandiri": 0.0, "dana": 0.0, "save_plus": 0.0, "cash": 0.0}


def test_replay_is_exact_for_decimal_amounts():
    transactions = [
        {"amount": "0.1", "agent_admin": "0", "source_account": "bri", "destination_account": "cash", "profit_destination": "cash"}
        for _ in range(3)
    ]

    balance = replay_transactions({"bri": 0, "cash": 0}, transactions)

    assert balance["cash"] == 0.3
    assert balance["bri"] == -0.3


def test_balance_total_sums_all_accounts():
    assert balance_total(OPENING) == 3_500_000.0
    assert balance_total(None) == 0.0


@pytest.mark.parametrize("value, expected", [
    (None, Decimal(0)),
    (True, Decimal(0)),
    ("12.5", Decimal("12.5")),
    (float("nan"), Decimal(0)),
    ("not a number", Decimal(0)),
    (3, Decimal(3)),
])
def test_to_decimal(value, expected):
    assert to_decimal(value) == expected
