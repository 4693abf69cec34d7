"""Portfolio aggregation, health score and payoff/flip rankings.

Pure reductions over an iterable of assets evaluated at `as_of`. No I/O.
"""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from finpicture.engine.amortization import payment_split
from finpicture.models.asset import Asset, AssetCategory
from finpicture.models.loan import LoanStatus
from finpicture.models.results import PaymentBreakdown, PortfolioSummary

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")
ZERO = Decimal("0")

OPTIMAL_LTV = Decimal("0.5")
LTV_SCORE_SPAN = Decimal("0.3")  # LTV score reaches 0 at 80%


def _clamp_unit(value: Decimal) -> Decimal:
    return max(ZERO, min(Decimal("1"), value))


# Totals

def total_value(assets: Iterable[Asset]) -> Decimal:
    return sum((a.current_value for a in assets), ZERO)


def total_debt(assets: Iterable[Asset], as_of: date) -> Decimal:
    return sum((a.remaining_loan_balance(as_of) for a in assets), ZERO)


def total_equity(assets: Iterable[Asset], as_of: date) -> Decimal:
    return sum((a.equity(as_of) for a in assets), ZERO)


def total_monthly_payments(assets: Iterable[Asset]) -> Decimal:
    return sum((a.monthly_payment for a in assets if a.has_active_loan), ZERO)


def total_acquisition_price(assets: Iterable[Asset]) -> Decimal:
    return sum((a.acquisition_price for a in assets), ZERO)


def total_appreciation(assets: Iterable[Asset]) -> Decimal:
    return sum((a.total_appreciation for a in assets), ZERO)


def average_interest_rate(assets: Iterable[Asset]) -> Decimal:
    """Loan-amount-weighted mean rate (percent) over active loans; 0 if none."""
    active = [a for a in assets if a.has_active_loan]
    total_loan = sum((a.loan_amount for a in active), ZERO)
    if total_loan <= 0:
        return ZERO
    weighted = sum((a.interest_rate * a.loan_amount for a in active), ZERO)
    return (weighted / total_loan).quantize(FOUR_PLACES, ROUND_HALF_UP)


def loan_to_value_ratio(assets: Iterable[Asset], as_of: date) -> Decimal:
    assets = list(assets)
    value = total_value(assets)
    if value <= 0:
        return ZERO
    return total_debt(assets, as_of) / value


def appreciation_rate(assets: Iterable[Asset]) -> Decimal:
    assets = list(assets)
    price = total_acquisition_price(assets)
    if price <= 0:
        return ZERO
    return total_appreciation(assets) / price


def portfolio_health_score(assets: Iterable[Asset], as_of: date) -> Decimal:
    """Mean of three 0-1 sub-scores: equity positivity, LTV, appreciation.

    The LTV score is 1 up to 50% LTV and falls linearly to 0 at 80%.
    An empty portfolio scores 1.
    """
    assets = list(assets)
    if not assets:
        return Decimal("1")

    positive_equity = sum(1 for a in assets if a.equity(as_of) >= 0)
    equity_score = Decimal(positive_equity) / len(assets)

    ltv = loan_to_value_ratio(assets, as_of)
    ltv_score = _clamp_unit(1 - (ltv - OPTIMAL_LTV) / LTV_SCORE_SPAN)
    appreciation_score = _clamp_unit(1 + appreciation_rate(assets))

    return ((equity_score + ltv_score + appreciation_score) / 3).quantize(
        FOUR_PLACES, ROUND_HALF_UP
    )


# Rankings

def optimal_payoff_order(assets: Iterable[Asset]) -> list[Asset]:
    """Avalanche: active loans by interest rate, highest first."""
    return sorted(
        (a for a in assets if a.has_active_loan),
        key=lambda a: a.interest_rate,
        reverse=True,
    )


def emotional_payoff_order(assets: Iterable[Asset], as_of: date) -> list[Asset]:
    """Snowball: active loans by remaining balance, smallest first."""
    return sorted(
        (a for a in assets if a.has_active_loan),
        key=lambda a: a.remaining_loan_balance(as_of),
    )


def flip_score(asset: Asset, as_of: date) -> Decimal:
    return asset.equity(as_of) / max(asset.current_value, Decimal("1")) + asset.appreciation_rate


def flip_priority_order(assets: Iterable[Asset], as_of: date) -> list[Asset]:
    """All assets ascending by equity share + appreciation; ties keep insertion order."""
    return sorted(assets, key=lambda a: flip_score(a, as_of))


# Groupings & filters

def assets_by_type(assets: Iterable[Asset]) -> dict[str, list[Asset]]:
    grouped: dict[str, list[Asset]] = {}
    for asset in assets:
        grouped.setdefault(asset.asset_type, []).append(asset)
    return grouped


def assets_by_category(assets: Iterable[Asset]) -> dict[AssetCategory, list[Asset]]:
    grouped: dict[AssetCategory, list[Asset]] = {}
    for asset in assets:
        grouped.setdefault(asset.category, []).append(asset)
    return grouped


def assets_by_loan_status(assets: Iterable[Asset]) -> dict[LoanStatus, list[Asset]]:
    grouped: dict[LoanStatus, list[Asset]] = {}
    for asset in assets:
        grouped.setdefault(asset.loan_status, []).append(asset)
    return grouped


def assets_at_risk(assets: Iterable[Asset], as_of: date) -> list[Asset]:
    return [a for a in assets if a.is_at_risk(as_of)]


def underwater_assets(assets: Iterable[Asset], as_of: date) -> list[Asset]:
    return [a for a in assets if a.is_underwater(as_of)]


def high_performing_assets(assets: Iterable[Asset], as_of: date) -> list[Asset]:
    return [a for a in assets if a.appreciation_rate > Decimal("0.1") and a.equity(as_of) > 0]


def appreciating_assets(assets: Iterable[Asset]) -> list[Asset]:
    return [a for a in assets if a.total_appreciation > 0]


def depreciating_assets(assets: Iterable[Asset]) -> list[Asset]:
    return [a for a in assets if a.total_appreciation < 0]


def performance_split(
    assets: Iterable[Asset], as_of: date
) -> tuple[list[Asset], list[Asset]]:
    """(performing, underperforming). An asset may be in neither."""
    assets = list(assets)
    performing = [a for a in assets if a.appreciation_rate > 0 and a.equity(as_of) > 0]
    underperforming = [
        a for a in assets if a.appreciation_rate < Decimal("-0.1") or a.is_underwater(as_of)
    ]
    return performing, underperforming


# Reporting

def monthly_payment_breakdown(assets: Iterable[Asset], as_of: date) -> list[PaymentBreakdown]:
    """Interest vs principal in the next payment of each active loan."""
    rows: list[PaymentBreakdown] = []
    for asset in assets:
        if not asset.has_active_loan:
            continue
        interest, principal = payment_split(
            asset.remaining_loan_balance(as_of), asset.interest_rate, asset.monthly_payment
        )
        rows.append(PaymentBreakdown(
            asset=asset,
            payment=asset.monthly_payment,
            interest_portion=interest,
            principal_portion=principal,
        ))
    return rows


def portfolio_summary(assets: Iterable[Asset], as_of: date) -> PortfolioSummary:
    assets = list(assets)
    return PortfolioSummary(
        total_value=total_value(assets),
        total_debt=total_debt(assets, as_of),
        total_equity=total_equity(assets, as_of),
        monthly_payments=total_monthly_payments(assets),
        average_interest_rate=average_interest_rate(assets),
        loan_to_value_ratio=loan_to_value_ratio(assets, as_of).quantize(FOUR_PLACES, ROUND_HALF_UP),
        health_score=portfolio_health_score(assets, as_of),
        assets_count=len(assets),
        active_loans_count=sum(1 for a in assets if a.has_active_loan),
    )
