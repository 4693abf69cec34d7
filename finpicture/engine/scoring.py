"""Net worth, capital allocation and the four-factor financial health score.

Sub-scores (each 0-100, overall = mean):
  Portfolio:        investment allocation (60%) + return (40%)
  Budget:           emergency fund months (70%) + expense trend (30%)
  Savings:          savings rate (70%) + consistency (30%)
  Diversification:  distance of savings/investments/asset equity from targets

Denominators that stand for missing data (no expenses, no income, tiny net
worth) are clamped to 1, so every score is defined for empty inputs.

Pure functions. No I/O.
"""

import calendar
from collections.abc import Iterable
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from finpicture.config import settings
from finpicture.engine import portfolio as pf
from finpicture.models.accounts import AccountSummary
from finpicture.models.asset import Asset
from finpicture.models.results import CapitalAllocation, FinancialHealthScore, NetWorthSnapshot

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")

NO_INVESTMENTS_SCORE = Decimal("40")
TARGET_SAVINGS_RATE = Decimal("0.2")
CONSISTENT_SAVINGS_MONTHS = 4


def _clamp(value: Decimal, low: Decimal = ZERO, high: Decimal = ONE) -> Decimal:
    return max(low, min(high, value))


def _as_score(fraction: Decimal) -> Decimal:
    return _clamp(fraction * HUNDRED, ZERO, HUNDRED).quantize(TWO_PLACES, ROUND_HALF_UP)


def months_back(day: date, months: int) -> date:
    """Same day `months` calendar months earlier, clamped to month end."""
    index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


# Net worth & allocation

def net_worth(assets: Iterable[Asset], accounts: AccountSummary, as_of: date) -> Decimal:
    assets = list(assets)
    holdings = (
        pf.total_value(assets)
        + accounts.investment_value
        + accounts.savings_balance
        + accounts.cash_balance
    )
    return holdings - pf.total_debt(assets, as_of)


def capital_allocation(
    assets: Iterable[Asset], accounts: AccountSummary, as_of: date
) -> CapitalAllocation:
    assets = list(assets)
    savings = max(accounts.savings_balance, ZERO)
    investments = max(accounts.investment_value, ZERO)
    asset_value = max(pf.total_value(assets), ZERO)
    debt = max(pf.total_debt(assets, as_of), ZERO)
    cash = max(accounts.cash_balance, ZERO)
    return CapitalAllocation(
        savings=savings,
        investments=investments,
        assets=asset_value,
        debt=debt,
        cash=cash,
        total_capital=savings + investments + asset_value + cash,
    )


def record_net_worth(
    history: list[NetWorthSnapshot],
    value: Decimal,
    as_of: date,
    keep: int = 24,
) -> list[NetWorthSnapshot]:
    """New history with this month's snapshot replaced or appended, last `keep` months."""
    month = as_of.replace(day=1)
    updated = [s for s in history if s.month != month]
    updated.append(NetWorthSnapshot(month=month, value=value))
    updated.sort(key=lambda s: s.month)
    return updated[-keep:]


# Collaborator helpers

def emergency_fund_months(accounts: AccountSummary) -> Decimal:
    return accounts.savings_balance / max(accounts.monthly_expenses, ONE)


def expense_growth(recent_expenses: Decimal, prior_expenses: Decimal) -> Decimal:
    """Relative change of the recent window over the prior one; 0 without history."""
    if prior_expenses <= 0:
        return ZERO
    return (recent_expenses - prior_expenses) / prior_expenses


def count_savings_months(
    credit_dates: Iterable[date], as_of: date, window_months: int = 6
) -> int:
    """Distinct calendar months holding a savings credit within the window."""
    start = months_back(as_of, window_months)
    return len({(d.year, d.month) for d in credit_dates if start <= d <= as_of})


# Sub-scores

def portfolio_health(accounts: AccountSummary, worth: Decimal) -> Decimal:
    if accounts.investment_value <= 0:
        return NO_INVESTMENTS_SCORE
    investment_ratio = accounts.investment_value / max(worth, ONE)
    allocation_score = min(investment_ratio * 2, ONE)  # Prefer higher investment allocation
    # Normalize performance over the -10% .. +10% range
    performance_score = _clamp((accounts.investment_return_rate + Decimal("0.1")) / Decimal("0.2"))
    return _as_score(allocation_score * Decimal("0.6") + performance_score * Decimal("0.4"))


def budget_health(
    accounts: AccountSummary,
    target_months: int | None = None,
) -> Decimal:
    if target_months is None:
        target = settings.emergency_fund_target_months
    else:
        target = max(target_months, 1)
    emergency_score = min(emergency_fund_months(accounts) / target, ONE)
    growth = expense_growth(accounts.recent_expenses, accounts.prior_expenses)
    growth_score = _clamp((-growth + Decimal("0.05")) / Decimal("0.1"))  # Prefer shrinking spend
    return _as_score(emergency_score * Decimal("0.7") + growth_score * Decimal("0.3"))


def savings_health(accounts: AccountSummary) -> Decimal:
    savings_rate = accounts.total_savings_credits / max(accounts.total_income, ONE)
    savings_score = _clamp(savings_rate / TARGET_SAVINGS_RATE)
    consistent = accounts.recent_savings_months >= CONSISTENT_SAVINGS_MONTHS
    consistency_score = ONE if consistent else Decimal("0.5")
    return _as_score(savings_score * Decimal("0.7") + consistency_score * Decimal("0.3"))


def diversification_health(
    assets: Iterable[Asset],
    accounts: AccountSummary,
    as_of: date,
    targets: dict[str, Decimal] | None = None,
) -> Decimal:
    if accounts.investment_value <= 0:
        return ZERO
    targets = settings.target_allocation if targets is None else targets

    ratios = allocation_ratios(assets, accounts, as_of)
    deviations = [
        abs(ratios[bucket] - Decimal(str(targets[bucket])))
        for bucket in ("savings", "investments", "assets")
    ]
    average_deviation = sum(deviations, ZERO) / len(deviations)
    return _as_score(_clamp(1 - average_deviation * 2))


def allocation_ratios(
    assets: Iterable[Asset], accounts: AccountSummary, as_of: date
) -> dict[str, Decimal]:
    """Shares of savings, investments and asset equity in their positive total."""
    savings = accounts.savings_balance
    investments = max(accounts.investment_value, ZERO)
    equity = max(pf.total_equity(assets, as_of), ZERO)
    total = max(savings + investments + equity, ONE)
    return {
        "savings": savings / total,
        "investments": investments / total,
        "assets": equity / total,
    }


def financial_health_score(
    assets: Iterable[Asset], accounts: AccountSummary, as_of: date
) -> FinancialHealthScore:
    assets = list(assets)
    worth = net_worth(assets, accounts, as_of)
    return FinancialHealthScore(
        portfolio_health=portfolio_health(accounts, worth),
        budget_health=budget_health(accounts),
        savings_health=savings_health(accounts),
        diversification_health=diversification_health(assets, accounts, as_of),
    )
