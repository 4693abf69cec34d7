from datetime import date
from decimal import Decimal

import pytest

from finpicture.models.errors import AssetNotFoundError, DuplicateAssetError
from finpicture.models.loan import LoanStatus
from finpicture.models.portfolio import Portfolio


@pytest.fixture
def portfolio(car, house, laptop) -> Portfolio:
    return Portfolio([car, house, laptop])


class TestMembership:
    def test_insertion_order(self, portfolio):
        assert [a.id for a in portfolio] == ["car", "house", "laptop"]
        assert len(portfolio) == 3
        assert "house" in portfolio

    def test_get_missing(self, portfolio):
        with pytest.raises(AssetNotFoundError):
            portfolio.get("boat")

    def test_duplicate_id(self, portfolio, car):
        with pytest.raises(DuplicateAssetError):
            portfolio.add(car)

    def test_remove(self, portfolio):
        removed = portfolio.remove("laptop")
        assert removed.name == "Laptop"
        assert "laptop" not in portfolio
        with pytest.raises(AssetNotFoundError):
            portfolio.remove("laptop")


class TestUpdates:
    def test_update_replaces_by_id(self, portfolio, car):
        portfolio.update(car.with_market_value(Decimal("20000")))
        assert portfolio.get("car").current_value == Decimal("20000")
        assert [a.id for a in portfolio] == ["car", "house", "laptop"]

    def test_update_unknown(self, portfolio, make_asset):
        with pytest.raises(AssetNotFoundError):
            portfolio.update(make_asset("Boat"))

    def test_update_market_value(self, portfolio):
        updated = portfolio.update_market_value("house", Decimal("480000"))
        assert updated.current_value == Decimal("480000")
        assert portfolio.get("house") is updated

    def test_mark_loan_paid_off(self, portfolio, as_of):
        portfolio.mark_loan_paid_off("car", as_of)
        car = portfolio.get("car")
        assert car.loan_status is LoanStatus.PAID_OFF
        assert car.loan.paid_off_date == as_of

    def test_mark_paid_off_twice_keeps_date(self, portfolio):
        portfolio.mark_loan_paid_off("car", date(2025, 1, 1))
        portfolio.mark_loan_paid_off("car", date(2025, 3, 1))
        assert portfolio.get("car").loan.paid_off_date == date(2025, 1, 1)

    def test_iteration_is_a_snapshot(self, portfolio):
        for asset in portfolio:
            portfolio.remove(asset.id)
        assert len(portfolio) == 0
