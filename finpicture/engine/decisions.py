"""Decision tools: extra loan payments vs investing, and capital deployment.

Pure functions. No I/O.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum

from finpicture.config import settings
from finpicture.models.accounts import AccountSummary
from finpicture.models.asset import Asset

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")

# Annual return scenarios in percent
DEFAULT_SCENARIOS: dict[str, Decimal] = {
    "Conservative": Decimal("5"),
    "Moderate": Decimal("7"),
    "Aggressive": Decimal("10"),
}


class DecisionOption(Enum):
    PAYOFF = "PAYOFF"
    INVEST = "INVEST"


@dataclass(frozen=True)
class PayoffVsInvest:
    extra_payment: Decimal
    months_saved: int
    interest_saved: Decimal
    investment_gain: Decimal  # Growth of the same monthly amount over the saved months
    better_option: DecisionOption
    difference: Decimal


@dataclass(frozen=True)
class DeploymentScenario:
    name: str
    annual_return_pct: Decimal
    future_value: Decimal


@dataclass(frozen=True)
class CapitalDeployment:
    amount: Decimal
    years: int
    scenarios: list[DeploymentScenario]
    buffer_months_after: Decimal
    below_minimum_buffer: bool


def investment_gain(monthly_amount: Decimal, months: int, annual_return_pct: Decimal) -> Decimal:
    """Future value of a monthly contribution minus the amount contributed."""
    r = annual_return_pct / 100 / 12
    if months <= 0 or r <= 0 or monthly_amount <= 0:
        return ZERO
    future_value = monthly_amount * ((1 + r) ** months - 1) / r
    return (future_value - monthly_amount * months).quantize(TWO_PLACES, ROUND_HALF_UP)


def compare_payoff_vs_invest(
    asset: Asset,
    extra_payment: Decimal,
    as_of: date,
    annual_return_pct: Decimal | None = None,
) -> PayoffVsInvest:
    """Interest saved by extra payments vs investing the same amount instead.

    Ties favour paying off.
    """
    if annual_return_pct is None:
        annual_return_pct = settings.expected_investment_return * 100
    savings = asset.payoff_analysis(extra_payment, as_of)
    gain = investment_gain(extra_payment, savings.months_saved, annual_return_pct)
    better = DecisionOption.INVEST if gain > savings.interest_saved else DecisionOption.PAYOFF
    return PayoffVsInvest(
        extra_payment=extra_payment,
        months_saved=savings.months_saved,
        interest_saved=savings.interest_saved,
        investment_gain=gain,
        better_option=better,
        difference=abs(gain - savings.interest_saved),
    )


def future_value(amount: Decimal, years: int, annual_return_pct: Decimal) -> Decimal:
    growth = (1 + annual_return_pct / 100) ** years
    return (amount * growth).quantize(TWO_PLACES, ROUND_HALF_UP)


def capital_deployment(
    amount: Decimal,
    years: int,
    accounts: AccountSummary,
    scenarios: dict[str, Decimal] | None = None,
) -> CapitalDeployment:
    """Project moving `amount` out of savings into investments for `years`."""
    scenarios = DEFAULT_SCENARIOS if scenarios is None else scenarios
    remaining_savings = accounts.savings_balance - amount
    buffer_months = (remaining_savings / max(accounts.monthly_expenses, Decimal("1"))).quantize(
        TWO_PLACES, ROUND_HALF_UP
    )
    return CapitalDeployment(
        amount=amount,
        years=years,
        scenarios=[
            DeploymentScenario(name, rate, future_value(amount, years, rate))
            for name, rate in scenarios.items()
        ],
        buffer_months_after=buffer_months,
        below_minimum_buffer=buffer_months < settings.emergency_fund_min_months,
    )
