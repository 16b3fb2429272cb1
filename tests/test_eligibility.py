"""Test hold eligibility evaluation."""
from datetime import date

import pytest
from core.eligibility.engine import HoldEligibilityEngine
from core.models.holdings import Campus, PatronClassification, ResolvedHolding
from patterns.domain_config import EligibilityConfig
from patterns.item_states import ItemState

T, F, S = Campus.TOOWOOMBA, Campus.FRASER_COAST, Campus.SPRINGFIELD


def _holding(item_id, campus, due_date=None, status_code=None):
    return ResolvedHolding(
        bib_id="vtls000123",
        item_id=item_id,
        campus=campus,
        due_date=due_date,
        status_code=status_code,
        available=due_date is None and status_code is None,
    )


def _ids(holdings):
    return [h.item_id for h in holdings]


def test_classify_patron_types():
    engine = HoldEligibilityEngine()
    assert engine.classify("AU").home_campus == T
    assert engine.classify("US").home_campus == S
    assert engine.classify("UF").home_campus == F

    external = engine.classify("AX")
    assert external.is_external and not external.is_super_user
    assert external.home_campus is None

    super_user = engine.classify("LP")
    assert super_user.is_super_user and not super_user.is_external

    unknown = engine.classify("ZZ")
    assert unknown.home_campus is None
    assert not unknown.is_external and not unknown.is_super_user


def test_externals_never_request_and_keep_order():
    engine = HoldEligibilityEngine()
    holdings = [_holding("B", F), _holding("A", T), _holding("C", S, due_date=date(2024, 1, 1))]
    result = engine.evaluate(engine.classify("AX"), holdings)
    assert _ids(result) == ["B", "A", "C"]
    assert all(h.request_allowed is False for h in result)


def test_super_users_request_anything():
    engine = HoldEligibilityEngine()
    holdings = [
        _holding("A", F),
        _holding("B", T, status_code="4700"),
        _holding("C", S, due_date=date(2024, 1, 1), status_code="2101"),
    ]
    result = engine.evaluate(engine.classify("OC"), holdings)
    assert _ids(result) == ["A", "B", "C"]
    assert all(h.request_allowed is True for h in result)


@pytest.mark.parametrize(
    "patron_type, holding, expected",
    [
        # On loan: Toowoomba items open to all campuses, Springfield to Springfield
        ("AU", _holding("x", T, due_date=date(2024, 1, 1)), True),
        ("UF", _holding("x", T, due_date=date(2024, 1, 1)), True),
        ("US", _holding("x", S, due_date=date(2024, 1, 1)), True),
        ("AU", _holding("x", S, due_date=date(2024, 1, 1)), False),
        ("UF", _holding("x", F, due_date=date(2024, 1, 1)), False),
        # On loan with a requestable status
        ("AU", _holding("x", T, due_date=date(2024, 1, 1), status_code="5700"), True),
        # On loan with a status that blocks requests
        ("AU", _holding("x", T, due_date=date(2024, 1, 1), status_code="4700"), False),
        # On the shelf with a requestable status
        ("AU", _holding("x", T, status_code="4401"), True),
        ("US", _holding("x", S, status_code="4401"), True),
        ("AU", _holding("x", S, status_code="4401"), False),
        # On the shelf, no status: only other campuses may request Toowoomba items
        ("AU", _holding("x", T), False),
        ("US", _holding("x", T), True),
        ("UF", _holding("x", T), True),
        ("US", _holding("x", S), False),
        # On the shelf with a blocking status
        ("US", _holding("x", T, status_code="4700"), False),
    ],
)
def test_campus_matrix(patron_type, holding, expected):
    engine = HoldEligibilityEngine()
    [result] = engine.evaluate(engine.classify(patron_type), [holding])
    assert result.request_allowed is expected


def test_unknown_home_campus_is_never_eligible():
    engine = HoldEligibilityEngine()
    holdings = [_holding("A", T), _holding("B", S, due_date=date(2024, 1, 1))]
    result = engine.evaluate(engine.classify("ZZ"), holdings)
    assert _ids(result) == ["A", "B"]
    assert all(h.request_allowed is False for h in result)


def test_home_campus_items_first_stable():
    engine = HoldEligibilityEngine()
    holdings = [_holding("B", T), _holding("A", S), _holding("C", S), _holding("D", F)]
    result = engine.evaluate(engine.classify("US"), holdings)
    assert _ids(result) == ["A", "C", "B", "D"]


def test_partition_without_home_campus_is_identity():
    holdings = [_holding("B", T), _holding("A", S)]
    assert _ids(HoldEligibilityEngine.partition(None, holdings)) == ["B", "A"]


def test_evaluate_does_not_mutate_input():
    engine = HoldEligibilityEngine()
    holding = _holding("A", T)
    engine.evaluate(engine.classify("US"), [holding])
    assert holding.request_allowed is None


@pytest.mark.parametrize("rows", [[], ["AU", "US"]])
def test_ambiguous_patron_lookup_returns_unchanged(rows):
    engine = HoldEligibilityEngine()
    holdings = [_holding("B", T), _holding("A", S)]
    result = engine.evaluate_lookup(rows, holdings)
    assert _ids(result) == ["B", "A"]
    assert all(h.request_allowed is None for h in result)


def test_single_patron_row_is_evaluated():
    engine = HoldEligibilityEngine()
    result = engine.evaluate_lookup(["US"], [_holding("B", T), _holding("A", S)])
    assert _ids(result) == ["A", "B"]
    assert [h.request_allowed for h in result] == [False, True]


def test_item_states():
    engine = HoldEligibilityEngine()
    assert engine.item_state(_holding("x", T, due_date=date(2024, 1, 1))) == ItemState.ON_LOAN_REQUESTABLE
    assert engine.item_state(_holding("x", T, status_code="5402")) == ItemState.STATUS_REQUESTABLE
    assert engine.item_state(_holding("x", T)) == ItemState.AVAILABLE
    assert engine.item_state(_holding("x", T, status_code="3100")) == ItemState.NOT_REQUESTABLE


def test_explain_reports_failed_rules():
    engine = HoldEligibilityEngine()
    patron = engine.classify("AU")
    result = engine.explain(patron, _holding("x", T))
    assert not result.all_passed
    assert [r.rule_name for r in result.failed] == ["campus_pair:available"]

    blocked = engine.explain(patron, _holding("x", T, status_code="4700"))
    assert "item_state" in [r.rule_name for r in blocked.failed]


def test_custom_tables():
    eligibility = EligibilityConfig(available={T: frozenset({T})})
    engine = HoldEligibilityEngine(eligibility=eligibility)
    [result] = engine.evaluate(engine.classify("AU"), [_holding("x", T)])
    assert result.request_allowed is True


def test_classification_can_be_built_directly():
    engine = HoldEligibilityEngine()
    patron = PatronClassification(patron_type="custom", home_campus=F)
    [result] = engine.evaluate(patron, [_holding("x", T)])
    assert result.request_allowed is True


def test_blank_due_date_is_treated_as_on_shelf():
    engine = HoldEligibilityEngine()
    holding = _holding("x", T, due_date="")
    assert engine.item_state(holding) == ItemState.AVAILABLE
    [result] = engine.evaluate(engine.classify("AU"), [holding])
    assert result.request_allowed is False


def test_explain_blocked_state_fails_item_rule():
    engine = HoldEligibilityEngine()
    result = engine.explain(engine.classify("US"), _holding("x", T, status_code="4700"))
    assert [r.rule_name for r in result.failed] == ["item_state", "campus_pair:blocked"]
