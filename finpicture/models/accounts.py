from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class AccountSummary:
    """Balances and flows supplied by the ledger and brokerage collaborators.

    Flow totals cover whatever window the collaborator uses for its account
    summary; the expense windows are trailing 6 months vs the 6 before that.
    """
    cash_balance: Decimal = Decimal("0")  # Net balance of the spending account
    savings_balance: Decimal = Decimal("0")
    investment_value: Decimal = Decimal("0")  # Net liquidation value
    monthly_expenses: Decimal = Decimal("0")
    monthly_income: Decimal = Decimal("0")

    investment_return_rate: Decimal = Decimal("0")  # e.g. Decimal("0.08") for +8%
    total_savings_credits: Decimal = Decimal("0")
    total_income: Decimal = Decimal("0")  # Credits into the spending account
    recent_expenses: Decimal = Decimal("0")  # Debits, trailing 6 months
    prior_expenses: Decimal = Decimal("0")  # Debits, the 6 months before
    recent_savings_months: int = 0  # Distinct months with a savings credit, trailing 6
