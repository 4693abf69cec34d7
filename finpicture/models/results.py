from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from finpicture.models.asset import Asset


@dataclass(frozen=True)
class PaymentBreakdown:
    asset: Asset
    payment: Decimal
    interest_portion: Decimal
    principal_portion: Decimal


@dataclass(frozen=True)
class PortfolioSummary:
    total_value: Decimal
    total_debt: Decimal
    total_equity: Decimal
    monthly_payments: Decimal
    average_interest_rate: Decimal  # Percent
    loan_to_value_ratio: Decimal
    health_score: Decimal  # 0-1
    assets_count: int
    active_loans_count: int


@dataclass(frozen=True)
class CapitalAllocation:
    """Positive capital split; debt is reported alongside, not netted."""
    savings: Decimal = Decimal("0")
    investments: Decimal = Decimal("0")
    assets: Decimal = Decimal("0")
    debt: Decimal = Decimal("0")
    cash: Decimal = Decimal("0")
    total_capital: Decimal = Decimal("0")  # savings + investments + assets + cash

    def _share(self, amount: Decimal) -> Decimal:
        return amount / max(self.total_capital, Decimal("1"))

    @property
    def savings_percentage(self) -> Decimal:
        return self._share(self.savings)

    @property
    def investments_percentage(self) -> Decimal:
        return self._share(self.investments)

    @property
    def assets_percentage(self) -> Decimal:
        return self._share(self.assets)

    @property
    def debt_percentage(self) -> Decimal:
        return self._share(self.debt)

    @property
    def cash_percentage(self) -> Decimal:
        return self._share(self.cash)


@dataclass(frozen=True)
class FinancialHealthScore:
    portfolio_health: Decimal = Decimal("0")  # Each 0-100
    budget_health: Decimal = Decimal("0")
    savings_health: Decimal = Decimal("0")
    diversification_health: Decimal = Decimal("0")

    @property
    def overall_score(self) -> Decimal:
        return (
            self.portfolio_health
            + self.budget_health
            + self.savings_health
            + self.diversification_health
        ) / 4

    @property
    def overall_grade(self) -> str:
        score = self.overall_score
        if score >= 90:
            return "A+"
        if score >= 80:
            return "A"
        if score >= 70:
            return "B"
        if score >= 60:
            return "C"
        if score >= 50:
            return "D"
        return "F"


@dataclass(frozen=True)
class NetWorthSnapshot:
    month: date  # First day of the month
    value: Decimal


class Priority(Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class RecommendationCategory(Enum):
    DEBT_OPTIMIZATION = "Debt Optimization"
    INVESTMENT_OPTIMIZATION = "Investment Optimization"
    LIQUIDITY_OPTIMIZATION = "Liquidity Optimization"
    EMERGENCY_FUND = "Emergency Fund"
    REBALANCING = "Rebalancing"


@dataclass(frozen=True)
class Recommendation:
    title: str
    description: str
    priority: Priority
    category: RecommendationCategory
    action_text: str


class TradeDirection(Enum):
    BUY = "Buy"
    SELL = "Sell"


@dataclass(frozen=True)
class RebalanceAction:
    bucket: str  # "savings", "investments" or "assets"
    direction: TradeDirection
    amount: Decimal
    current_pct: Decimal  # Percentage points
    target_pct: Decimal
