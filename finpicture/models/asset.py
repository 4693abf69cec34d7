import logging
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from uuid import uuid4

from finpicture.engine import amortization
from finpicture.engine.amortization import NO_SAVINGS, PayoffSavings
from finpicture.models.errors import InvalidInputError
from finpicture.models.loan import Loan, LoanStatus, months_between

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
FOUR_PLACES = Decimal("0.0001")


class AssetCategory(Enum):
    TANGIBLE = "Tangible"
    INTANGIBLE = "Intangible"


class RiskLevel(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class PerformanceRating(Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


@dataclass(frozen=True)
class RevenueProfile:
    """Expected income of a revenue-generating asset (e.g. a side business)."""
    monthly_target: Decimal
    generation_rate: Decimal  # Probability in [0, 1] of hitting the target
    variability: Decimal  # Relative spread in [0, 1]

    def __post_init__(self) -> None:
        if self.monthly_target < 0:
            raise InvalidInputError(f"monthly_target must be non-negative, got {self.monthly_target}")
        if not 0 <= self.generation_rate <= 1:
            raise InvalidInputError(f"generation_rate must be within [0, 1], got {self.generation_rate}")
        if not 0 <= self.variability <= 1:
            raise InvalidInputError(f"variability must be within [0, 1], got {self.variability}")


@dataclass(frozen=True)
class Asset:
    name: str
    asset_type: str  # Free-form, e.g. "Car", "Real Estate"; keys the valuation table
    category: AssetCategory
    acquisition_date: date
    acquisition_price: Decimal
    current_market_value: Decimal | None = None  # Supplied externally; falls back to price
    custom_depreciation_rate: Decimal | None = None  # Annual, e.g. Decimal("-0.15")
    expense_category: str = ""  # Expense ledger category carrying the loan payments
    loan: Loan | None = None
    revenue: RevenueProfile | None = None
    id: str = field(default_factory=lambda: str(uuid4()))

    def __post_init__(self) -> None:
        if self.acquisition_price <= 0:
            raise InvalidInputError(
                f"acquisition_price must be positive, got {self.acquisition_price}"
            )
        if self.current_market_value is not None and self.current_market_value < 0:
            raise InvalidInputError(
                f"current_market_value must be non-negative, got {self.current_market_value}"
            )
        if self.custom_depreciation_rate is not None and self.custom_depreciation_rate < -1:
            raise InvalidInputError(
                f"custom_depreciation_rate cannot be below -100%, got {self.custom_depreciation_rate}"
            )

    # Loan passthroughs

    @property
    def loan_status(self) -> LoanStatus:
        return self.loan.status if self.loan is not None else LoanStatus.NO_LOAN

    @property
    def has_loan(self) -> bool:
        return self.loan is not None and self.loan.status is not LoanStatus.NO_LOAN

    @property
    def has_active_loan(self) -> bool:
        return self.loan is not None and self.loan.is_active

    @property
    def interest_rate(self) -> Decimal:
        return self.loan.interest_rate if self.loan is not None else ZERO

    @property
    def loan_amount(self) -> Decimal:
        return self.loan.original_amount if self.loan is not None else ZERO

    @property
    def monthly_payment(self) -> Decimal:
        return self.loan.monthly_payment if self.loan is not None else ZERO

    def remaining_loan_balance(self, as_of: date) -> Decimal:
        return self.loan.remaining_balance(as_of) if self.loan is not None else ZERO

    @property
    def is_revenue_generating(self) -> bool:
        return self.revenue is not None

    # Valuation

    @property
    def current_value(self) -> Decimal:
        if self.current_market_value is not None:
            return self.current_market_value
        return self.acquisition_price

    @property
    def total_appreciation(self) -> Decimal:
        return self.current_value - self.acquisition_price

    @property
    def appreciation_rate(self) -> Decimal:
        if self.acquisition_price == 0:
            return ZERO
        return self.total_appreciation / self.acquisition_price

    def months_owned(self, as_of: date) -> int:
        """Whole months since acquisition, at least 1 (future dates clamp)."""
        return max(1, months_between(self.acquisition_date, as_of))

    def years_owned(self, as_of: date) -> Decimal:
        return Decimal(self.months_owned(as_of)) / 12

    def annualized_appreciation_rate(self, as_of: date) -> Decimal:
        """Compound annual rate implied by acquisition price and current value."""
        years = float(self.years_owned(as_of))
        if years <= 0 or self.acquisition_price == 0:
            return ZERO
        ratio = float(self.current_value / self.acquisition_price)
        return Decimal(str(ratio ** (1 / years) - 1)).quantize(FOUR_PLACES, ROUND_HALF_UP)

    def equity(self, as_of: date) -> Decimal:
        return self.current_value - self.remaining_loan_balance(as_of)

    def loan_to_value_ratio(self, as_of: date) -> Decimal:
        if self.current_value <= 0:
            return ZERO
        return self.remaining_loan_balance(as_of) / self.current_value

    # Risk & performance

    def is_underwater(self, as_of: date) -> bool:
        return self.has_active_loan and self.equity(as_of) < 0

    def is_at_risk(self, as_of: date) -> bool:
        if self.has_active_loan:
            return (
                self.is_underwater(as_of)
                or self.appreciation_rate < Decimal("-0.3")
                or self.loan_to_value_ratio(as_of) > Decimal("0.9")
            )
        return self.appreciation_rate < Decimal("-0.5")

    def risk_level(self, as_of: date) -> RiskLevel:
        if self.is_at_risk(as_of):
            return RiskLevel.HIGH
        if (
            self.has_active_loan and self.loan_to_value_ratio(as_of) > Decimal("0.7")
        ) or self.appreciation_rate < Decimal("-0.15"):
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def performance_rating(self, as_of: date) -> PerformanceRating:
        equity = self.equity(as_of)
        appreciation = self.appreciation_rate
        if equity > 0 and appreciation > Decimal("0.1"):
            return PerformanceRating.EXCELLENT
        if equity > 0 and appreciation > 0:
            return PerformanceRating.GOOD
        if equity > 0 or (not self.has_active_loan and appreciation > Decimal("-0.1")):
            return PerformanceRating.FAIR
        return PerformanceRating.POOR

    def payoff_analysis(self, extra_payment: Decimal, as_of: date) -> PayoffSavings:
        """Months/interest saved by adding `extra_payment` to each loan payment."""
        if not self.has_active_loan:
            return NO_SAVINGS
        balance = self.remaining_loan_balance(as_of)
        if balance <= 0:
            return NO_SAVINGS
        return amortization.payoff_savings(
            balance, self.interest_rate, self.monthly_payment, extra_payment
        )

    # Updates (new values; assets are replaced by id in the portfolio)

    def with_market_value(self, value: Decimal) -> "Asset":
        return replace(self, current_market_value=value)

    def with_loan_paid_off(self, at: date | None = None) -> "Asset":
        if self.loan is None:
            logger.debug("Asset %s has no loan to pay off", self.id)
            return self
        return replace(self, loan=self.loan.mark_paid_off(at))
