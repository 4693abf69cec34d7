from dataclasses import replace
from decimal import Decimal

import pytest

from finpicture.engine.revenue import (
    expected_monthly_revenue,
    expected_revenue_to_date,
    revenue_performance,
    revenue_range,
    target_achievement,
)
from finpicture.models.asset import PerformanceRating, RevenueProfile
from finpicture.models.errors import InvalidInputError


@pytest.fixture
def profile() -> RevenueProfile:
    return RevenueProfile(
        monthly_target=Decimal("1000"),
        generation_rate=Decimal("0.8"),
        variability=Decimal("0.25"),
    )


class TestExpectedRevenue:
    def test_expected_monthly(self, profile):
        assert expected_monthly_revenue(profile) == Decimal("800.00")

    def test_range(self, profile):
        assert revenue_range(profile) == (Decimal("600.00"), Decimal("1000.00"))

    def test_to_date(self, profile, make_asset, as_of):
        # Acquired 12 months before the evaluation date
        asset = replace(make_asset("Shop", asset_type="Business"), revenue=profile)
        assert asset.is_revenue_generating
        assert expected_revenue_to_date(asset, as_of) == Decimal("9600.00")

    def test_no_profile(self, laptop, as_of):
        assert expected_revenue_to_date(laptop, as_of) == Decimal("0")


class TestAchievement:
    def test_on_target(self, profile):
        assert target_achievement(profile, [Decimal("900"), Decimal("1100")]) == Decimal("1.0000")

    def test_no_history(self, profile):
        assert target_achievement(profile, []) == Decimal("0")

    def test_ratings(self):
        assert revenue_performance(Decimal("1.2")) is PerformanceRating.EXCELLENT
        assert revenue_performance(Decimal("0.85")) is PerformanceRating.GOOD
        assert revenue_performance(Decimal("0.6")) is PerformanceRating.FAIR
        assert revenue_performance(Decimal("0.3")) is PerformanceRating.POOR


class TestProfileValidation:
    def test_generation_rate_bounds(self):
        with pytest.raises(InvalidInputError):
            RevenueProfile(Decimal("1000"), Decimal("1.5"), Decimal("0"))

    def test_negative_target(self):
        with pytest.raises(InvalidInputError):
            RevenueProfile(Decimal("-1"), Decimal("0.5"), Decimal("0"))
