"""Expected income of revenue-generating assets.

Expected monthly revenue = target * generation rate; variability widens it
into a low/high band. Pure functions, no I/O.
"""

from collections.abc import Sequence
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from finpicture.models.asset import Asset, PerformanceRating, RevenueProfile

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")
ZERO = Decimal("0")


def expected_monthly_revenue(profile: RevenueProfile) -> Decimal:
    return (profile.monthly_target * profile.generation_rate).quantize(TWO_PLACES, ROUND_HALF_UP)


def revenue_range(profile: RevenueProfile) -> tuple[Decimal, Decimal]:
    """(low, high) monthly revenue at +/- variability around the expectation."""
    expected = expected_monthly_revenue(profile)
    spread = expected * profile.variability
    return (
        max(ZERO, expected - spread).quantize(TWO_PLACES, ROUND_HALF_UP),
        (expected + spread).quantize(TWO_PLACES, ROUND_HALF_UP),
    )


def expected_revenue_to_date(asset: Asset, as_of: date) -> Decimal:
    if asset.revenue is None:
        return ZERO
    return expected_monthly_revenue(asset.revenue) * asset.months_owned(as_of)


def target_achievement(profile: RevenueProfile, actual_monthly: Sequence[Decimal]) -> Decimal:
    """Average actual monthly revenue as a share of the target."""
    if not actual_monthly or profile.monthly_target <= 0:
        return ZERO
    average = sum(actual_monthly, ZERO) / len(actual_monthly)
    return (average / profile.monthly_target).quantize(FOUR_PLACES, ROUND_HALF_UP)


def revenue_performance(achievement: Decimal) -> PerformanceRating:
    if achievement >= 1:
        return PerformanceRating.EXCELLENT
    if achievement >= Decimal("0.8"):
        return PerformanceRating.GOOD
    if achievement >= Decimal("0.6"):
        return PerformanceRating.FAIR
    return PerformanceRating.POOR
