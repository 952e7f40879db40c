from decimal import Decimal
from types import SimpleNamespace

from utils.fees import find_applicable_rule


def rule(rule_id, type_id, min_amount, max_amount, bank_admin=0, agent_admin=0):
    return SimpleNamespace(
        id=rule_id,
        transaction_type_id=type_id,
        min_amount=Decimal(min_amount),
        max_amount=Decimal(max_amount),
        bank_admin=Decimal(bank_admin),
        agent_admin=Decimal(agent_admin),
    )


RULES = [
    rule(1, 1, 1, 100_000, 0, 3_000),
    rule(2, 1, 100_001, 1_000_000, 0, 5_000),
    rule(3, 2, 1, 1_000_000, 2_500, 7_000),
]


def test_bounds_are_inclusive():
    assert find_applicable_rule(RULES, 1, 100_000).id == 1
    assert find_applicable_rule(RULES, 1, 100_001).id == 2
    assert find_applicable_rule(RULES, 1, 1_000_000).id == 2


def test_rules_of_other_types_are_ignored():
    assert find_applicable_rule(RULES, 2, 50_000).id == 3


def test_no_match_returns_none():
    assert find_applicable_rule(RULES, 1, 2_000_000) is None
    assert find_applicable_rule(RULES, 99, 50_000) is None


def test_missing_type_or_non_positive_amount_returns_none():
    assert find_applicable_rule(RULES, None, 50_000) is None
    assert find_applicable_rule(RULES, 1, 0) is None
    assert find_applicable_rule(RULES, 1, -10) is None


def test_first_rule_wins_when_ranges_overlap():
    overlapping = [rule(4, 1, 0, 500_000, agent_admin=4_000), rule(5, 1, 0, 1_000_000, agent_admin=9_000)]
    assert find_applicable_rule(overlapping, 1, 200_000).id == 4
