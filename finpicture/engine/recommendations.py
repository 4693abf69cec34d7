"""Rule-based recommendation synthesis.

Each rule is a pure function of the assets, the account summary and `as_of`.
The full rule set is re-run whenever any input changes; recommendations carry
no identity between runs.
"""

import logging
from collections.abc import Iterable
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from finpicture.config import settings
from finpicture.engine.scoring import allocation_ratios, emergency_fund_months
from finpicture.models.accounts import AccountSummary
from finpicture.models.asset import Asset
from finpicture.models.results import (
    Priority,
    RebalanceAction,
    Recommendation,
    RecommendationCategory,
    TradeDirection,
)

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")

_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


def _money(v: Decimal) -> str:
    return f"{settings.currency_symbol}{float(v):,.0f}"


def _pct(v: Decimal) -> str:
    """Format a ratio as a percentage string."""
    return f"{float(v) * 100:.1f}%"


def payoff_vs_invest(
    asset: Asset,
    accounts: AccountSummary,
    as_of: date,
    expected_return: Decimal | None = None,
) -> Recommendation | None:
    """Pay the loan down when its rate beats the expected investment return."""
    balance = asset.remaining_loan_balance(as_of)
    if balance <= 0:
        return None

    expected = settings.expected_investment_return if expected_return is None else expected_return
    loan_rate = asset.interest_rate / 100
    available_cash = max(accounts.cash_balance, ZERO)
    max_payoff = min(available_cash, balance)

    if loan_rate > expected:
        yearly_saving = (max_payoff * loan_rate).quantize(TWO_PLACES, ROUND_HALF_UP)
        return Recommendation(
            title=f"Pay Off {asset.name} Loan",
            description=(
                f"Loan rate ({_pct(loan_rate)}) > expected investment return ({_pct(expected)}). "
                f"Paying {_money(max_payoff)} early saves about {_money(yearly_saving)}/year in interest."
            ),
            priority=Priority.HIGH,
            category=RecommendationCategory.DEBT_OPTIMIZATION,
            action_text=f"Pay {_money(max_payoff)} toward loan",
        )
    return Recommendation(
        title=f"Invest Instead of Paying Off {asset.name}",
        description=(
            f"Expected investment return ({_pct(expected)}) >= loan rate ({_pct(loan_rate)}). "
            "Invest excess cash for better returns."
        ),
        priority=Priority.MEDIUM,
        category=RecommendationCategory.INVESTMENT_OPTIMIZATION,
        action_text=f"Invest {_money(available_cash)} instead of paying off loan",
    )


def idle_cash(accounts: AccountSummary) -> Recommendation | None:
    threshold = accounts.savings_balance * settings.idle_cash_savings_ratio
    if accounts.cash_balance <= threshold:
        return None
    transfer = max(ZERO, accounts.cash_balance - accounts.savings_balance * settings.idle_cash_retain_ratio)
    return Recommendation(
        title="Deploy Idle Cash",
        description=(
            f"You have {_money(accounts.cash_balance)} sitting idle. "
            "Consider moving excess to investments or savings."
        ),
        priority=Priority.MEDIUM,
        category=RecommendationCategory.LIQUIDITY_OPTIMIZATION,
        action_text=f"Transfer {_money(transfer)} to investments",
    )


def emergency_fund(accounts: AccountSummary) -> Recommendation | None:
    months = emergency_fund_months(accounts)
    if months >= settings.emergency_fund_min_months:
        return None
    target = settings.emergency_fund_target_months
    shortfall = max(ZERO, accounts.monthly_expenses * target - accounts.savings_balance)
    return Recommendation(
        title="Build Emergency Fund",
        description=f"Your emergency fund covers only {float(months):.1f} months. Target {target} months.",
        priority=Priority.HIGH,
        category=RecommendationCategory.EMERGENCY_FUND,
        action_text=f"Increase savings by {_money(shortfall)}",
    )


def rebalancing_plan(
    assets: Iterable[Asset],
    accounts: AccountSummary,
    as_of: date,
    targets: dict[str, Decimal] | None = None,
    threshold_points: Decimal | None = None,
) -> list[RebalanceAction]:
    """Buckets whose share drifts from target by more than the threshold.

    Shares are measured over savings + investments + asset equity, the same
    base the diversification score uses.
    """
    if accounts.investment_value <= 0:
        return []
    targets = settings.target_allocation if targets is None else targets
    threshold = settings.rebalance_threshold_points if threshold_points is None else threshold_points

    assets = list(assets)
    ratios = allocation_ratios(assets, accounts, as_of)
    equity = max(sum((a.equity(as_of) for a in assets), ZERO), ZERO)
    base = max(accounts.savings_balance + accounts.investment_value + equity, Decimal("1"))

    actions: list[RebalanceAction] = []
    for bucket in ("savings", "investments", "assets"):
        current_pct = ratios[bucket] * 100
        target_pct = Decimal(str(targets[bucket])) * 100
        drift = current_pct - target_pct
        if abs(drift) <= threshold:
            continue
        actions.append(RebalanceAction(
            bucket=bucket,
            direction=TradeDirection.SELL if drift > 0 else TradeDirection.BUY,
            amount=(abs(drift) / 100 * base).quantize(TWO_PLACES, ROUND_HALF_UP),
            current_pct=current_pct.quantize(TWO_PLACES, ROUND_HALF_UP),
            target_pct=target_pct.quantize(TWO_PLACES, ROUND_HALF_UP),
        ))
    return actions


def rebalancing(
    assets: Iterable[Asset], accounts: AccountSummary, as_of: date
) -> list[Recommendation]:
    return [
        Recommendation(
            title=f"Rebalance {action.bucket.title()}",
            description=(
                f"{action.bucket.title()} is {float(action.current_pct):.1f}% of capital "
                f"vs a {float(action.target_pct):.1f}% target."
            ),
            priority=Priority.LOW,
            category=RecommendationCategory.REBALANCING,
            action_text=f"{action.direction.value} {_money(action.amount)} of {action.bucket}",
        )
        for action in rebalancing_plan(assets, accounts, as_of)
    ]


def generate_recommendations(
    assets: Iterable[Asset], accounts: AccountSummary, as_of: date
) -> list[Recommendation]:
    """Run every rule; results ordered High -> Low, stable within a priority."""
    assets = list(assets)
    results: list[Recommendation] = []

    for asset in assets:
        rec = payoff_vs_invest(asset, accounts, as_of)
        if rec is not None:
            results.append(rec)

    for rec in (idle_cash(accounts), emergency_fund(accounts)):
        if rec is not None:
            results.append(rec)

    results.extend(rebalancing(assets, accounts, as_of))

    logger.debug("Generated %d recommendations as of %s", len(results), as_of.isoformat())
    return sorted(results, key=lambda r: _PRIORITY_RANK[r.priority])
