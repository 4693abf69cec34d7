"""Canonical fixtures shared by the engine, model and ingest tests.

Evaluation date: 2025-06-30.
Car: $30K bought 2024-01-15, worth $24K, $25K loan at 7.5% over 5 years.
House: $400K bought 2020-03-01, worth $460K, $320K loan at 6% over 30 years.
Laptop: $2K bought 2023-06-01, no loan, worth $1.2K.
Accounts: $8K cash, $30K savings, $60K investments, $4K/mo expenses, $10K/mo income.
"""

from datetime import date
from decimal import Decimal

import pytest

from finpicture.models.accounts import AccountSummary
from finpicture.models.asset import Asset, AssetCategory
from finpicture.models.loan import Loan

AS_OF = date(2025, 6, 30)


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def car() -> Asset:
    return Asset(
        name="Car",
        asset_type="Car",
        category=AssetCategory.TANGIBLE,
        acquisition_date=date(2024, 1, 15),
        acquisition_price=Decimal("30000"),
        current_market_value=Decimal("24000"),
        expense_category="Car Loan",
        loan=Loan(
            original_amount=Decimal("25000"),
            interest_rate=Decimal("7.5"),
            term_years=5,
            start_date=date(2024, 1, 15),
            down_payment=Decimal("5000"),
        ),
        id="car",
    )


@pytest.fixture
def house() -> Asset:
    return Asset(
        name="House",
        asset_type="Real Estate",
        category=AssetCategory.TANGIBLE,
        acquisition_date=date(2020, 3, 1),
        acquisition_price=Decimal("400000"),
        current_market_value=Decimal("460000"),
        loan=Loan(
            original_amount=Decimal("320000"),
            interest_rate=Decimal("6"),
            term_years=30,
            start_date=date(2020, 3, 1),
            down_payment=Decimal("80000"),
        ),
        id="house",
    )


@pytest.fixture
def laptop() -> Asset:
    return Asset(
        name="Laptop",
        asset_type="Computer",
        category=AssetCategory.TANGIBLE,
        acquisition_date=date(2023, 6, 1),
        acquisition_price=Decimal("2000"),
        current_market_value=Decimal("1200"),
        id="laptop",
    )


@pytest.fixture
def accounts() -> AccountSummary:
    return AccountSummary(
        cash_balance=Decimal("8000"),
        savings_balance=Decimal("30000"),
        investment_value=Decimal("60000"),
        monthly_expenses=Decimal("4000"),
        monthly_income=Decimal("10000"),
        investment_return_rate=Decimal("0.08"),
        total_savings_credits=Decimal("12000"),
        total_income=Decimal("60000"),
        recent_expenses=Decimal("24000"),
        prior_expenses=Decimal("24000"),
        recent_savings_months=5,
    )


@pytest.fixture
def empty_accounts() -> AccountSummary:
    return AccountSummary()


def _make_asset(
    name: str = "Thing",
    price: str = "10000",
    value: str | None = None,
    loan_amount: str | None = None,
    rate: str = "5",
    term_years: int = 5,
    acquired: date = date(2024, 6, 30),
    asset_type: str = "Other",
    category: AssetCategory = AssetCategory.TANGIBLE,
) -> Asset:
    """Compact asset builder for ranking and aggregation tests."""
    loan = None
    if loan_amount is not None:
        loan = Loan(
            original_amount=Decimal(loan_amount),
            interest_rate=Decimal(rate),
            term_years=term_years,
            start_date=acquired,
        )
    return Asset(
        name=name,
        asset_type=asset_type,
        category=category,
        acquisition_date=acquired,
        acquisition_price=Decimal(price),
        current_market_value=Decimal(value) if value is not None else None,
        loan=loan,
        id=name.lower(),
    )


@pytest.fixture
def make_asset():
    return _make_asset
