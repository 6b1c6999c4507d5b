"""
Test suite for the economy module.

Tests cover:
1. Income curve shape (minimum, monotonic, concave, saturating)
2. Break-even time
3. Account schedules: spending, investing, hold
4. Investment maturation delay and future capital
5. Neutral kill rewards and HUD read-outs
"""

import math

import pytest

from celestial_command.economy import (
    CAPITAL_DELAY,
    MAX_INCOME,
    MIN_INCOME,
    NEUTRAL_KILL_REWARD,
    SHIP_COST,
    Account,
    break_even_time,
    capital_to_income,
)


def run(account: Account, ticks: int) -> int:
    return sum(account.update() for _ in range(ticks))


# =============================================================================
# INCOME CURVE
# =============================================================================

class TestCapitalToIncome:

    def test_minimum_income_without_capital(self):
        assert capital_to_income(0) == pytest.approx(MIN_INCOME)

    def test_bonus_scales_income(self):
        assert capital_to_income(0, 1.5) == pytest.approx(1.5 * MIN_INCOME)
        assert capital_to_income(250, 2.0) == pytest.approx(2 * capital_to_income(250))

    def test_diminishing_returns(self):
        gap0 = capital_to_income(2) - capital_to_income(0)
        gap5 = capital_to_income(7) - capital_to_income(5)
        assert gap5 > 0
        assert gap5 < gap0

    @pytest.mark.parametrize("capital", [0, 10, 100, 500, 1000])
    def test_strictly_increasing(self, capital):
        assert capital_to_income(capital + 1) > capital_to_income(capital)

    def test_saturation(self):
        assert capital_to_income(10) != pytest.approx(capital_to_income(11))
        assert capital_to_income(10000) == pytest.approx(capital_to_income(10001))
        assert capital_to_income(10000) == pytest.approx(MAX_INCOME)


class TestBreakEvenTime:

    def test_includes_delay(self):
        assert break_even_time(0) > CAPITAL_DELAY

    def test_grows_with_capital(self):
        assert break_even_time(500) > break_even_time(100) > break_even_time(0)

    def test_bonus_shortens_payback(self):
        assert break_even_time(100, 2.0) < break_even_time(100)

    def test_saturated_capital_never_pays_back(self):
        assert break_even_time(1e6) == math.inf


# =============================================================================
# ACCOUNT
# =============================================================================

class TestAccountSchedules:

    def test_full_spending_builds_one_ship_per_cost(self):
        account = Account()
        account.spending = 1.0
        assert run(account, 5 * SHIP_COST) == 5

    def test_simple_schedules(self):
        account = Account()
        account.spending = 1.0
        total = run(account, 5 * SHIP_COST)
        assert total == 5

        account.spending = 0.0
        total += run(account, 5 * SHIP_COST)
        assert total == 5  # everything is invested

        account.spending = 1.0
        total += run(account, 5 * SHIP_COST)
        assert total > 10  # investment raised income

    def test_spending_is_clamped(self):
        account = Account()
        account.spending = 3.0
        run(account, 4)
        assert account.production == pytest.approx(4 * MIN_INCOME)
        assert account.future_capital() == 0


class TestAccountHold:

    def test_hold_builds_nothing(self):
        account = Account()
        account.spending = 1.0
        account.hold = True
        assert run(account, 5 * SHIP_COST) == 0
        assert account.production == pytest.approx(5 * SHIP_COST)

    def test_release_flushes_balance(self):
        account = Account()
        account.spending = 1.0
        account.hold = True
        run(account, 5 * SHIP_COST)
        account.hold = False
        assert account.update() == 5


class TestAccountInvestment:

    def test_investment_matures_after_delay(self):
        account = Account()
        account.spending = 0.0
        run(account, CAPITAL_DELAY)
        assert account.capital == 0
        account.update()
        assert account.capital == pytest.approx(MIN_INCOME)

    def test_queue_length_is_bounded(self):
        account = Account()
        run(account, 3 * CAPITAL_DELAY)
        assert len(account.investments) == CAPITAL_DELAY

    def test_future_capital_counts_pending(self):
        account = Account()
        account.spending = 0.0
        run(account, 3)
        assert account.capital == 0
        assert account.future_capital() == pytest.approx(3 * MIN_INCOME)


class TestAccountRewards:

    def test_neutral_kill_full_spending(self):
        account = Account()
        account.spending = 1.0
        account.credit_neutral_kill()
        assert account.production == pytest.approx(NEUTRAL_KILL_REWARD)

    def test_neutral_kill_respects_split(self):
        account = Account()
        account.spending = 0.5
        account.credit_neutral_kill()
        assert account.production == pytest.approx(NEUTRAL_KILL_REWARD / 2)
        assert account.future_capital() == pytest.approx(NEUTRAL_KILL_REWARD / 2)

    def test_invalid_bonus(self):
        with pytest.raises(ValueError):
            Account(bonus=0)


class TestAccountReadouts:

    def test_income_uses_bonus(self):
        assert Account(bonus=2.0).income == pytest.approx(2 * MIN_INCOME)

    def test_seconds_per_ship(self):
        account = Account()
        account.spending = 1.0
        assert account.seconds_per_ship() == pytest.approx(SHIP_COST / MIN_INCOME)
        account.spending = 0.0
        assert account.seconds_per_ship() == math.inf

    def test_production_progress(self):
        account = Account()
        account.spending = 1.0
        run(account, SHIP_COST + 2)
        assert account.production_progress == pytest.approx(2 / SHIP_COST)
