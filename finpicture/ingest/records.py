"""Pydantic schemas for the raw records handed in by collaborators.

Records validate field ranges; `to_*` methods build the engine value objects.
"""

import logging
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from finpicture.engine.scoring import count_savings_months
from finpicture.models.accounts import AccountSummary
from finpicture.models.asset import Asset, AssetCategory, RevenueProfile
from finpicture.models.loan import Loan, LoanStatus
from finpicture.models.portfolio import Portfolio

logger = logging.getLogger(__name__)


class LoanRecord(BaseModel):
    id: str | None = None
    original_amount: Decimal = Field(..., gt=0)
    interest_rate: Decimal = Field(..., ge=0, description="Annual rate in percent, e.g. 7.5")
    term_years: int = Field(..., gt=0)
    start_date: date | None = Field(None, description="Defaults to the asset acquisition date")
    down_payment: Decimal = Field(Decimal("0"), ge=0)
    status: LoanStatus = LoanStatus.ACTIVE
    paid_off_date: date | None = None

    @model_validator(mode="after")
    def _paid_off_date_matches_status(self) -> "LoanRecord":
        if (self.status is LoanStatus.PAID_OFF) != (self.paid_off_date is not None):
            raise ValueError("paid_off_date must be given exactly when status is 'Paid Off'")
        return self

    def to_loan(self, default_start: date) -> Loan:
        extra = {"id": self.id} if self.id else {}
        return Loan(
            original_amount=self.original_amount,
            interest_rate=self.interest_rate,
            term_years=self.term_years,
            start_date=self.start_date or default_start,
            down_payment=self.down_payment,
            status=self.status,
            paid_off_date=self.paid_off_date,
            **extra,
        )


class RevenueRecord(BaseModel):
    monthly_target: Decimal = Field(..., ge=0)
    generation_rate: Decimal = Field(..., ge=0, le=1)
    variability: Decimal = Field(Decimal("0"), ge=0, le=1)

    def to_profile(self) -> RevenueProfile:
        return RevenueProfile(
            monthly_target=self.monthly_target,
            generation_rate=self.generation_rate,
            variability=self.variability,
        )


class AssetRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str = Field(..., min_length=1)
    asset_type: str = Field(..., alias="type")
    category: AssetCategory = AssetCategory.TANGIBLE
    acquisition_date: date
    acquisition_price: Decimal = Field(..., gt=0)
    current_market_value: Decimal | None = Field(None, ge=0)
    custom_depreciation_rate: Decimal | None = Field(None, ge=-1)
    expense_category: str = ""
    loan: LoanRecord | None = None
    revenue: RevenueRecord | None = None

    def to_asset(self) -> Asset:
        extra = {"id": self.id} if self.id else {}
        return Asset(
            name=self.name,
            asset_type=self.asset_type,
            category=self.category,
            acquisition_date=self.acquisition_date,
            acquisition_price=self.acquisition_price,
            current_market_value=self.current_market_value,
            custom_depreciation_rate=self.custom_depreciation_rate,
            expense_category=self.expense_category,
            loan=self.loan.to_loan(self.acquisition_date) if self.loan else None,
            revenue=self.revenue.to_profile() if self.revenue else None,
            **extra,
        )


class AccountRecord(BaseModel):
    cash_balance: Decimal = Decimal("0")
    savings_balance: Decimal = Decimal("0")
    investment_value: Decimal = Decimal("0")
    monthly_expenses: Decimal = Field(Decimal("0"), ge=0)
    monthly_income: Decimal = Field(Decimal("0"), ge=0)
    investment_return_rate: Decimal = Decimal("0")
    total_savings_credits: Decimal = Decimal("0")
    total_income: Decimal = Field(Decimal("0"), ge=0)
    recent_expenses: Decimal = Field(Decimal("0"), ge=0)
    prior_expenses: Decimal = Field(Decimal("0"), ge=0)

    # Either the count itself or the dates of savings credits to derive it from
    recent_savings_months: int | None = Field(None, ge=0)
    savings_credit_dates: list[date] = []

    def to_summary(self, as_of: date) -> AccountSummary:
        months = self.recent_savings_months
        if months is None:
            months = count_savings_months(self.savings_credit_dates, as_of)
        return AccountSummary(
            cash_balance=self.cash_balance,
            savings_balance=self.savings_balance,
            investment_value=self.investment_value,
            monthly_expenses=self.monthly_expenses,
            monthly_income=self.monthly_income,
            investment_return_rate=self.investment_return_rate,
            total_savings_credits=self.total_savings_credits,
            total_income=self.total_income,
            recent_expenses=self.recent_expenses,
            prior_expenses=self.prior_expenses,
            recent_savings_months=months,
        )


class SnapshotRecord(BaseModel):
    """Everything the engine needs for one evaluation pass."""
    assets: list[AssetRecord] = []
    accounts: AccountRecord = Field(default_factory=AccountRecord)

    @model_validator(mode="after")
    def _unique_asset_ids(self) -> "SnapshotRecord":
        seen: set[str] = set()
        for record in self.assets:
            if record.id is None:
                continue
            if record.id in seen:
                raise ValueError(f"duplicate asset id {record.id!r}")
            seen.add(record.id)
        return self

    def to_portfolio(self) -> Portfolio:
        portfolio = Portfolio(record.to_asset() for record in self.assets)
        logger.debug("Loaded %d assets from snapshot", len(portfolio))
        return portfolio
