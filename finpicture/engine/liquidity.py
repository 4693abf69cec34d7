"""Liquidity risk: emergency buffer, burn rate, savings rate and debt pressure.

Also the banded system health score, a coarser companion to the weighted
sub-score model in scoring.py:
  Savings Rate 25%, Emergency Buffer 25%, Debt Pressure 20%,
  Asset Allocation 15%, Investment Performance 15%

Pure functions. No I/O.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from finpicture.config import settings
from finpicture.engine.portfolio import total_monthly_payments
from finpicture.engine.scoring import net_worth
from finpicture.models.accounts import AccountSummary
from finpicture.models.asset import Asset
from finpicture.models.results import Priority, Recommendation, RecommendationCategory

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")

DAYS_PER_MONTH = 30
TARGET_SAVINGS_RATE_PCT = Decimal("20")
HIGH_DEBT_PRESSURE_PCT = Decimal("30")

# Floor, score pairs; the first floor the value reaches wins
SAVINGS_RATE_BANDS = ((30, 100), (20, 80), (10, 60), (5, 40))
EMERGENCY_BUFFER_BANDS = ((6, 100), (4, 80), (3, 60), (1, 40))
ALLOCATION_BANDS = ((60, 100), (40, 80), (20, 60), (10, 40))
# Ceiling, score pairs; the first ceiling the value stays under wins
DEBT_PRESSURE_BANDS = ((20, 100), (30, 80), (40, 60), (50, 40))
BAND_FLOOR_SCORE = 20
# No return history is tracked, so performance is scored as neutral
INVESTMENT_PERFORMANCE_SCORE = 70


@dataclass(frozen=True)
class LiquidityAssessment:
    buffer_months: Decimal
    daily_burn: Decimal
    priority: Priority
    title: str
    description: str


@dataclass(frozen=True)
class SystemHealthComponent:
    name: str
    score: int
    weight: Decimal


@dataclass(frozen=True)
class SystemHealthScore:
    score: int
    components: list[SystemHealthComponent] = field(default_factory=list)


def emergency_buffer_months(accounts: AccountSummary) -> Decimal:
    """Months of expenses covered by savings; 0 when expenses are unknown."""
    if accounts.monthly_expenses <= 0:
        return ZERO
    return (accounts.savings_balance / accounts.monthly_expenses).quantize(TWO_PLACES, ROUND_HALF_UP)


def daily_burn_rate(accounts: AccountSummary) -> Decimal:
    return (accounts.monthly_expenses / DAYS_PER_MONTH).quantize(TWO_PLACES, ROUND_HALF_UP)


def savings_rate_pct(accounts: AccountSummary) -> Decimal:
    """(income - expenses) / income, in percent."""
    if accounts.monthly_income <= 0:
        return ZERO
    monthly_savings = accounts.monthly_income - accounts.monthly_expenses
    return (monthly_savings / accounts.monthly_income * 100).quantize(TWO_PLACES, ROUND_HALF_UP)


def debt_pressure_index(monthly_debt_payments: Decimal, accounts: AccountSummary) -> Decimal:
    """Share of monthly income going to debt payments, in percent."""
    if accounts.monthly_income <= 0:
        return ZERO
    return (monthly_debt_payments / accounts.monthly_income * 100).quantize(TWO_PLACES, ROUND_HALF_UP)


def liquidity_assessment(accounts: AccountSummary) -> LiquidityAssessment:
    months = emergency_buffer_months(accounts)
    burn = daily_burn_rate(accounts)
    if months < settings.emergency_fund_min_months:
        return LiquidityAssessment(
            months, burn, Priority.HIGH,
            "Critical: Build Emergency Fund",
            "Increase emergency savings immediately",
        )
    if months < settings.emergency_fund_target_months:
        return LiquidityAssessment(
            months, burn, Priority.MEDIUM,
            "Strengthen Buffer",
            f"Work toward a {settings.emergency_fund_target_months}-month emergency fund",
        )
    return LiquidityAssessment(
        months, burn, Priority.LOW,
        "Strong Position",
        "Consider deploying excess capital",
    )


def daily_recommendation(assets: Iterable[Asset], accounts: AccountSummary) -> Recommendation:
    """The single most pressing action, checked in order of severity."""
    symbol = settings.currency_symbol
    months = emergency_buffer_months(accounts)
    if months < settings.emergency_fund_min_months:
        shortfall = max(
            ZERO, accounts.monthly_expenses * settings.emergency_fund_min_months - accounts.savings_balance
        )
        return Recommendation(
            title="Emergency Fund Critical",
            description=f"You only have {float(months):.1f} months of expenses saved",
            priority=Priority.HIGH,
            category=RecommendationCategory.EMERGENCY_FUND,
            action_text=f"Transfer {symbol}{float(shortfall):,.0f} to emergency fund",
        )

    rate = savings_rate_pct(accounts)
    if rate < TARGET_SAVINGS_RATE_PCT:
        gap = accounts.monthly_income * TARGET_SAVINGS_RATE_PCT / 100 - (
            accounts.monthly_income - accounts.monthly_expenses
        )
        return Recommendation(
            title="Boost Savings Rate",
            description=f"Current savings rate: {float(rate):.1f}%",
            priority=Priority.MEDIUM,
            category=RecommendationCategory.LIQUIDITY_OPTIMIZATION,
            action_text=f"Review expenses and increase savings by {symbol}{float(max(gap, ZERO)):,.0f}/month",
        )

    pressure = debt_pressure_index(total_monthly_payments(assets), accounts)
    if pressure > HIGH_DEBT_PRESSURE_PCT:
        return Recommendation(
            title="High Debt Pressure",
            description=f"{float(pressure):.1f}% of income goes to debt",
            priority=Priority.HIGH,
            category=RecommendationCategory.DEBT_OPTIMIZATION,
            action_text="Consider debt consolidation or extra payments",
        )

    return Recommendation(
        title="Deploy Idle Capital",
        description="Consider investing excess cash for growth",
        priority=Priority.LOW,
        category=RecommendationCategory.INVESTMENT_OPTIMIZATION,
        action_text="Review investment allocation",
    )


def _at_least(value: Decimal, bands: tuple[tuple[int, int], ...]) -> int:
    for floor, score in bands:
        if value >= floor:
            return score
    return BAND_FLOOR_SCORE


def _below(value: Decimal, bands: tuple[tuple[int, int], ...]) -> int:
    for ceiling, score in bands:
        if value < ceiling:
            return score
    return BAND_FLOOR_SCORE


def savings_rate_score(rate_pct: Decimal) -> int:
    return _at_least(rate_pct, SAVINGS_RATE_BANDS)


def emergency_buffer_score(months: Decimal) -> int:
    return _at_least(months, EMERGENCY_BUFFER_BANDS)


def debt_pressure_score(pressure_pct: Decimal) -> int:
    return _below(pressure_pct, DEBT_PRESSURE_BANDS)


def allocation_score(investment_pct: Decimal) -> int:
    """Scores the share of net worth held in investments."""
    return _at_least(investment_pct, ALLOCATION_BANDS)


def investment_share_pct(assets: Iterable[Asset], accounts: AccountSummary, as_of: date) -> Decimal:
    """Investments as a percent of net worth, with net worth floored at 1."""
    worth = max(net_worth(assets, accounts, as_of), Decimal("1"))
    return (accounts.investment_value / worth * 100).quantize(TWO_PLACES, ROUND_HALF_UP)


def system_health_score(
    assets: Iterable[Asset], accounts: AccountSummary, as_of: date
) -> SystemHealthScore:
    """Weighted sum of five banded component scores, truncated to a whole number."""
    assets = list(assets)
    pressure = debt_pressure_index(total_monthly_payments(assets), accounts)
    components = [
        SystemHealthComponent("Savings Rate", savings_rate_score(savings_rate_pct(accounts)), Decimal("0.25")),
        SystemHealthComponent("Emergency Buffer", emergency_buffer_score(emergency_buffer_months(accounts)), Decimal("0.25")),
        SystemHealthComponent("Debt Pressure", debt_pressure_score(pressure), Decimal("0.20")),
        SystemHealthComponent(
            "Asset Allocation", allocation_score(investment_share_pct(assets, accounts, as_of)), Decimal("0.15")
        ),
        SystemHealthComponent("Investment Performance", INVESTMENT_PERFORMANCE_SCORE, Decimal("0.15")),
    ]
    total = sum((c.score * c.weight for c in components), ZERO)
    return SystemHealthScore(int(total), components)
