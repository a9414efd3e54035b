"""Tests for the amortization formulas and repayment schedule projection.

Covers:
- Fixed payment formula, including the interest-free case
- Single-month interest accrual and repayment
- Payoff detection and the sub-cent floor
- Schedule projection, safety cap and running totals
"""

from __future__ import annotations

import pytest
from debtsync.services.amortization import (
    DEFAULT_MAX_MONTHS,
    PAYOFF_THRESHOLD,
    apply_monthly_update,
    calculate_amortized_payment,
    project_repayment_schedule,
    schedule_totals,
)
from tests.conftest import assert_float_equal


class TestAmortizedPayment:
    """Tests for the fixed monthly payment formula."""

    def test_standard_loan(self):
        assert_float_equal(calculate_amortized_payment(10000, 5.5, 60), 190.99)

    @pytest.mark.parametrize(
        "principal,months",
        [(5000, 24), (600, 6), (12345.67, 37), (1, 1)],
    )
    def test_zero_rate_is_simple_division(self, principal, months):
        """Interest-free loans divide the principal evenly."""
        assert calculate_amortized_payment(principal, 0, months) == principal / months

    def test_negative_rate_treated_as_interest_free(self):
        assert calculate_amortized_payment(1200, -3, 12) == 100

    @pytest.mark.parametrize("principal", [0, -500])
    def test_non_positive_principal_returns_zero(self, principal):
        assert calculate_amortized_payment(principal, 5.5, 60) == 0

    @pytest.mark.parametrize("months", [0, -12])
    def test_non_positive_term_returns_zero(self, months):
        assert calculate_amortized_payment(10000, 5.5, months) == 0

    def test_high_apr_payment_exceeds_interest(self):
        payment = calculate_amortized_payment(2000, 39.9, 12)
        first_month_interest = 2000 * 39.9 / 1200
        assert payment > first_month_interest
        assert payment > 2000 / 12


class TestApplyMonthlyUpdate:
    """Tests for a single month of accrual and repayment."""

    def test_credit_card_first_month(self):
        result = apply_monthly_update(5000, 19.9, 200)

        assert_float_equal(result.interest_charged, 82.92)
        assert_float_equal(result.principal_paid, 117.08)
        assert_float_equal(result.new_balance, 4882.92)
        assert result.is_paid_off is False

    def test_interest_free_update(self):
        result = apply_monthly_update(1000, 0, 100)

        assert result.interest_charged == 0
        assert result.principal_paid == 100
        assert result.new_balance == 900
        assert result.is_paid_off is False

    def test_final_payment_clears_balance(self):
        result = apply_monthly_update(150, 0, 200)

        assert result.new_balance == 0
        assert result.principal_paid == 150
        assert result.is_paid_off is True

    def test_final_payment_with_interest(self):
        """The whole remaining balance counts as principal on the last payment."""
        result = apply_monthly_update(100, 12, 200)

        assert result.new_balance == 0
        assert_float_equal(result.interest_charged, 1.0)
        assert result.principal_paid == 100
        assert result.is_paid_off is True

    def test_exact_payment_clears_balance(self):
        result = apply_monthly_update(100, 0, 100)

        assert result.new_balance == 0
        assert result.is_paid_off is True

    @pytest.mark.parametrize("balance", [0, -25])
    def test_non_positive_balance_is_already_paid_off(self, balance):
        result = apply_monthly_update(balance, 19.9, 200)

        assert result.new_balance == 0
        assert result.interest_charged == 0
        assert result.principal_paid == 0
        assert result.is_paid_off is True

    def test_repayment_below_interest_grows_balance(self):
        """Principal is floored at zero when the repayment does not cover interest."""
        result = apply_monthly_update(10000, 24, 100)

        assert_float_equal(result.interest_charged, 200)
        assert result.principal_paid == 0
        assert_float_equal(result.new_balance, 10100)
        assert result.is_paid_off is False

    def test_sub_cent_residue_counts_as_paid_off(self):
        result = apply_monthly_update(100.005, 0, 100)

        assert 0 < result.new_balance <= PAYOFF_THRESHOLD
        assert result.is_paid_off is True


class TestProjectRepaymentSchedule:
    """Tests for multi-month projections."""

    def test_interest_free_schedule(self):
        steps = list(project_repayment_schedule(600, 0, 100))

        assert len(steps) == 6
        assert steps[-1].balance == 0
        assert steps[-1].cumulative_interest == 0
        assert steps[-1].cumulative_principal == 600

    def test_months_are_sequential_from_one(self):
        steps = list(project_repayment_schedule(1000, 10, 100))
        assert [s.month for s in steps] == list(range(1, len(steps) + 1))

    def test_schedule_with_interest_ends_paid_off(self):
        steps = list(project_repayment_schedule(5000, 19.9, 200))

        assert 30 <= len(steps) <= 35
        assert steps[-1].balance <= PAYOFF_THRESHOLD
        assert steps[-1].cumulative_interest > 1000
        assert steps[-1].cumulative_principal + steps[-1].cumulative_interest > 5000

    def test_cumulative_totals_are_running_sums(self):
        steps = list(project_repayment_schedule(3000, 15, 250))

        interest = 0.0
        principal = 0.0
        for step in steps:
            interest += step.interest
            principal += step.principal
            assert_float_equal(step.cumulative_interest, interest)
            assert_float_equal(step.cumulative_principal, principal)

    @pytest.mark.parametrize(
        "balance,repayment",
        [(0, 100), (-10, 100), (1000, 0), (1000, -50)],
    )
    def test_empty_schedule(self, balance, repayment):
        assert list(project_repayment_schedule(balance, 5, repayment)) == []

    def test_respects_max_months_cap(self):
        """A repayment below the interest never clears the debt within the cap."""
        steps = list(project_repayment_schedule(10000, 24, 100, max_months=12))

        assert len(steps) == 12
        assert all(step.balance > 10000 for step in steps)
        assert steps[-1].balance > steps[0].balance

    def test_default_cap_bounds_non_convergent_debt(self):
        steps = list(project_repayment_schedule(10000, 24, 100))
        assert len(steps) == DEFAULT_MAX_MONTHS

    def test_schedule_is_single_use(self):
        schedule = project_repayment_schedule(600, 0, 100)

        assert len(list(schedule)) == 6
        assert list(schedule) == []

    @pytest.mark.parametrize(
        "balance,apr,repayment",
        [
            (5000, 19.9, 200),
            (250.5, 29.9, 25),
            (30000, 6.5, 150),
            (999.99, 0, 333.33),
            (10000, 24, 100),
        ],
    )
    def test_balance_never_negative(self, balance, apr, repayment):
        steps = list(project_repayment_schedule(balance, apr, repayment, max_months=120))

        assert len(steps) <= 120
        assert all(step.balance >= 0 for step in steps)
        assert all(step.interest >= 0 for step in steps)


class TestEndToEndScenarios:
    """Realistic debts projected from their amortized payment."""

    def test_student_loan_clears_within_term(self):
        payment = calculate_amortized_payment(30000, 6.5, 240)
        assert 200 < payment < 250

        steps = list(project_repayment_schedule(30000, 6.5, payment))

        assert len(steps) <= 241
        assert steps[-1].balance <= PAYOFF_THRESHOLD
        assert steps[-1].cumulative_interest > 20000

    def test_auto_loan_clears_within_term(self):
        payment = calculate_amortized_payment(15000, 3.9, 60)
        assert 260 < payment < 290

        steps = list(project_repayment_schedule(15000, 3.9, payment))

        assert len(steps) <= 61
        assert steps[-1].balance <= PAYOFF_THRESHOLD
        assert 1000 < steps[-1].cumulative_interest < 4000

    def test_schedule_totals(self):
        months, interest, principal = schedule_totals(project_repayment_schedule(600, 0, 100))

        assert months == 6
        assert interest == 0
        assert principal == 600

    def test_schedule_totals_empty(self):
        assert schedule_totals([]) == (0, 0.0, 0.0)
