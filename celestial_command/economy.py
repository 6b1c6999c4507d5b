"""
Player economy: converts time into ships.

The central resource is the jam [j]. Every second a player earns income,
which depends on their realized capital. A proportion of income (spending)
goes straight into the production balance and is turned into ships in whole
SHIP_COST units; the rest is invested. Investments take CAPITAL_DELAY
seconds to mature into capital, and income saturates as capital grows:

    income(capital) = bonus * (MIN_INCOME + (MAX_INCOME - MIN_INCOME)
                               * (1 - 2 ** (-capital / CAPITAL_SCALE)))
"""

from __future__ import annotations

import math
from collections import deque


# =============================================================================
# CONSTANTS
# =============================================================================

CAPITAL_DELAY = 10  # s
SHIP_COST = 8  # j
MIN_INCOME = 1.0  # j/s
MAX_INCOME = 4.0  # j/s
CAPITAL_SCALE = 100.0  # j (capital that closes half the income gap)
NEUTRAL_KILL_REWARD = 5.0  # j


def capital_to_income(capital: float, bonus: float = 1.0) -> float:
    """Income per second for a given realized capital."""
    return bonus * (MIN_INCOME + (MAX_INCOME - MIN_INCOME) * (1 - 2 ** (-capital / CAPITAL_SCALE)))


def break_even_time(capital: float, bonus: float = 1.0) -> float:
    """
    Seconds for one more unit of investment to pay for itself.

    Includes the CAPITAL_DELAY spent maturing. Returns math.inf once the
    marginal income of capital is numerically zero.
    """
    gain = capital_to_income(capital + 1, bonus) - capital_to_income(capital, bonus)
    if gain <= 0:
        return math.inf
    return CAPITAL_DELAY + 1 / gain


# =============================================================================
# ACCOUNT
# =============================================================================

class Account:
    """
    Economic ledger for one player.

    Controls (set by the player or AI):
        spending: Proportion of income spent on production, in [0, 1]
        hold: If true, accrue production balance without building ships

    State (do not modify outside the class):
        capital: Realized investment (j)
        production: Production balance (j)
        investments: Maturing investments, oldest first (j)
        bonus: Income multiplier
    """

    def __init__(self, bonus: float = 1.0, spending: float = 0.5) -> None:
        if bonus <= 0:
            raise ValueError(f"Income bonus must be positive, got {bonus}")
        self.spending = spending
        self.hold = False
        self.capital = 0.0
        self.production = 0.0
        self.investments: deque[float] = deque()
        self.bonus = bonus

    @property
    def income(self) -> float:
        """Current income (j/s)."""
        return capital_to_income(self.capital, self.bonus)

    @property
    def production_progress(self) -> float:
        """Fraction of the next ship already paid for."""
        ships = self.production / SHIP_COST
        return ships - math.floor(ships)

    def seconds_per_ship(self) -> float:
        """Seconds to build one ship at the current income and spending."""
        rate = self.income * min(max(self.spending, 0.0), 1.0)
        if rate <= 0:
            return math.inf
        return SHIP_COST / rate

    def future_capital(self) -> float:
        """Capital once every pending investment has matured."""
        return self.capital + sum(self.investments)

    def add_income(self, amount: float) -> None:
        """Split amount between production and the newest investment."""
        spending = min(max(self.spending, 0.0), 1.0)
        if not self.investments:
            self.investments.append(0.0)
        self.production += spending * amount
        self.investments[-1] += (1 - spending) * amount

    def credit_neutral_kill(self) -> None:
        """Reward for destroying a neutral ship."""
        self.add_income(NEUTRAL_KILL_REWARD)

    def update(self) -> int:
        """
        Advance the economy by one second.

        Returns:
            Number of ships completed (always 0 while on hold)
        """
        if len(self.investments) >= CAPITAL_DELAY:
            self.capital += self.investments.popleft()
        self.investments.append(0.0)
        self.add_income(self.income)

        if self.hold:
            return 0
        ships = math.floor(self.production / SHIP_COST)
        self.production -= ships * SHIP_COST
        return ships
