"""Tests for numerical consistency checks.

Tests cover:
- Stated arithmetic recomputation and tolerance
- Division by zero is ignored
- Percentage breakdowns that do not sum to 100
- Unit mismatches in arithmetic and totals
- Range violations: shares above 100% and negative counts
- Stated totals that disagree with the listed amounts
"""

import pytest

from verity_system.analyzers.logic import NumericalChecker
from verity_system.analyzers.logic.numerical_checker import evaluate
from verity_system.data_management.schemas.common_schema import Severity


# ── Fixtures ──────────────────────────────────────────────────────────────


@pytest.fixture
def checker() -> NumericalChecker:
    return NumericalChecker()


class TestEvaluate:

    @pytest.mark.parametrize(
        "a,op,b,expected",
        [
            (12, "+", 30, 42),
            (10, "-", 4, 6),
            (6, "x", 7, 42),
            (6, "×", 7, 42),
            (100, "/", 4, 25),
        ],
    )
    def test_operations(self, a, op, b, expected):
        assert evaluate(a, op, b) == expected

    def test_division_by_zero(self):
        assert evaluate(1, "/", 0) is None


class TestArithmetic:
    """Stated calculations."""

    def test_wrong_sum(self, checker):
        text = "The total is 12 + 30 = 45 units."
        issues = checker.check(text)

        assert len(issues) == 1
        issue = issues[0]
        assert issue.category == "calculation_error"
        assert issue.severity == Severity.HIGH
        assert issue.evidence == ("12 + 30 = 45",)
        assert text[issue.location.start:issue.location.end] == "12 + 30 = 45"

    def test_correct_calculations(self, checker):
        assert checker.check("We computed 100 / 4 = 25 and 6 x 7 = 42.") == []

    def test_wrong_product(self, checker):
        assert len(checker.check_arithmetic("Six rows: 6 x 7 = 40 seats.")) == 1

    def test_rounding_tolerated(self, checker):
        assert checker.check("Per share: 10 / 3 = 3.33 dollars.") == []

    def test_thousands_separators(self, checker):
        assert checker.check("Budget: 1,000 + 2,500 = 3,500 dollars.") == []

    def test_division_by_zero_ignored(self, checker):
        assert checker.check("Nonsense: 5 / 0 = 0 here.") == []


class TestPercentages:
    """Breakdown totals."""

    def test_breakdown_short_of_100(self, checker):
        text = "The budget is split 50% marketing, 30% sales and 10% support."
        issues = checker.check(text)

        assert len(issues) == 1
        assert issues[0].category == "percentage_sum_error"
        assert issues[0].severity == Severity.MEDIUM
        assert "90" in issues[0].description

    def test_percent_word(self, checker):
        text = "The budget allocation is 60 percent research and 30 percent operations."
        assert len(checker.check(text)) == 1

    def test_within_tolerance(self, checker):
        assert checker.check("The budget is split 50.5% marketing and 50% sales.") == []

    def test_without_breakdown_cue(self, checker):
        assert checker.check("Sales rose 50% and costs rose 30% this year.") == []

    def test_empty_text(self, checker):
        assert checker.check("") == []


class TestUnits:
    """Quantities of different kinds."""

    def test_mixed_units_in_arithmetic(self, checker):
        text = "The shipment weighs 5 kg + 3 hours = 8 kg."
        issues = checker.check(text)

        assert [i.category for i in issues] == ["unit_mismatch"]
        assert issues[0].severity == Severity.HIGH
        assert issues[0].evidence == ("5 kg + 3 hours = 8 kg",)

    def test_same_unit_kind_accepted(self, checker):
        assert checker.check("The dose was 5 mg + 10 mg = 15 mg.") == []

    def test_total_over_mixed_kinds(self, checker):
        text = "The order contains 4 kg of flour and 2 liters of milk, a total of 6 kg."
        issues = checker.check(text)

        assert [i.category for i in issues] == ["unit_mismatch"]
        assert issues[0].severity == Severity.MEDIUM
        assert "mass" in issues[0].description and "volume" in issues[0].description


class TestRanges:
    """Values outside their possible range."""

    def test_share_above_100(self, checker):
        text = "The trial found that 120% of patients improved."
        issues = checker.check(text)

        assert [i.category for i in issues] == ["range_violation"]
        assert text[issues[0].location.start:issues[0].location.end] == "120% of"

    def test_share_against_target_accepted(self, checker):
        assert checker.check("Sales reached 120% of target this quarter.") == []

    def test_negative_count(self, checker):
        text = "Headcount changed by -3 employees last month."
        issues = checker.check(text)

        assert [i.category for i in issues] == ["range_violation"]
        assert issues[0].evidence == ("-3 employees",)

    def test_hyphenated_identifiers_ignored(self, checker):
        assert checker.check_ranges("Patient SSN: 123-45-6789 for 12 patients.") == []


class TestSums:
    """Stated totals."""

    def test_total_disagrees_with_items(self, checker):
        text = "Q1 revenue was $100, Q2 revenue was $200 and Q3 revenue was $300, for a total of $700."
        issues = checker.check(text)

        assert [i.category for i in issues] == ["sum_mismatch"]
        issue = issues[0]
        assert issue.severity == Severity.MEDIUM
        assert "700" in issue.description and "600" in issue.description

    def test_matching_total(self, checker):
        assert checker.check("Fees were $40 and $60, a total of $100.") == []

    def test_items_in_previous_sentence(self, checker):
        text = "Claims paid: 250, 300 and 450. Total: 1,100."
        issues = checker.check(text)

        assert [i.category for i in issues] == ["sum_mismatch"]
        assert issues[0].severity == Severity.LOW
        assert issues[0].evidence == ("Claims paid: 250, 300 and 450", "Total: 1,100")

    def test_years_not_counted(self, checker):
        text = "Between 2019 and 2020 we opened 3 clinics and 4 labs, a total of 7 sites."
        assert checker.check(text) == []

    def test_percentage_total_left_to_breakdown_check(self, checker):
        assert checker.check_sums([]) == []
        assert checker.check("Marketing got 40% and sales 50%, a total of 90%.") == []
