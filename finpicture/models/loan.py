"""Loan attached to an asset, with lifecycle status.

All money math delegates to engine.amortization and is zero unless the loan
is active.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from uuid import uuid4

from finpicture.engine import amortization
from finpicture.models.errors import InvalidInputError

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
FOUR_PLACES = Decimal("0.0001")


class LoanStatus(Enum):
    NO_LOAN = "No Loan"
    ACTIVE = "Active Loan"
    PAID_OFF = "Paid Off"


def months_between(start: date, end: date) -> int:
    """Whole calendar months from `start` to `end` (negative if end is earlier)."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if months > 0 and end.day < start.day:
        months -= 1
    elif months < 0 and end.day > start.day:
        months += 1
    return months


@dataclass(frozen=True)
class Loan:
    original_amount: Decimal
    interest_rate: Decimal  # Annual percent, e.g. Decimal("7.5")
    term_years: int
    start_date: date  # Usually the asset acquisition date
    down_payment: Decimal = Decimal("0")
    status: LoanStatus = LoanStatus.ACTIVE
    paid_off_date: date | None = None
    id: str = field(default_factory=lambda: str(uuid4()))

    def __post_init__(self) -> None:
        if self.original_amount <= 0:
            raise InvalidInputError(f"original_amount must be positive, got {self.original_amount}")
        if self.interest_rate < 0:
            raise InvalidInputError(f"interest_rate must be non-negative, got {self.interest_rate}")
        if self.term_years <= 0:
            raise InvalidInputError(f"term_years must be positive, got {self.term_years}")
        if self.down_payment < 0:
            raise InvalidInputError(f"down_payment must be non-negative, got {self.down_payment}")
        if (self.status is LoanStatus.PAID_OFF) != (self.paid_off_date is not None):
            raise InvalidInputError(
                f"paid_off_date must be set exactly when status is PAID_OFF "
                f"(status={self.status.value}, paid_off_date={self.paid_off_date})"
            )

    @property
    def is_active(self) -> bool:
        return self.status is LoanStatus.ACTIVE

    @property
    def total_payments(self) -> int:
        return self.term_years * 12

    def months_since_start(self, as_of: date) -> int:
        return max(0, months_between(self.start_date, as_of))

    def months_remaining(self, as_of: date) -> int:
        if not self.is_active:
            return 0
        return max(0, self.total_payments - self.months_since_start(as_of))

    def progress(self, as_of: date) -> Decimal:
        """Share of the term already elapsed; 1 once the loan is no longer active."""
        if not self.is_active:
            return Decimal("1")
        elapsed = min(self.months_since_start(as_of), self.total_payments)
        return (Decimal(elapsed) / self.total_payments).quantize(FOUR_PLACES, ROUND_HALF_UP)

    # Financial calculations

    @property
    def monthly_payment(self) -> Decimal:
        if not self.is_active:
            return ZERO
        return amortization.monthly_payment(self.original_amount, self.interest_rate, self.term_years)

    @property
    def total_interest(self) -> Decimal:
        if not self.is_active:
            return ZERO
        return amortization.total_interest(self.original_amount, self.interest_rate, self.term_years)

    def remaining_balance(self, as_of: date) -> Decimal:
        if not self.is_active:
            return ZERO
        return amortization.remaining_balance(
            self.original_amount, self.interest_rate, self.term_years, self.months_since_start(as_of)
        )

    def interest_paid_to_date(self, as_of: date) -> Decimal:
        if not self.is_active:
            return ZERO
        return amortization.interest_paid_to_date(
            self.original_amount, self.interest_rate, self.term_years, self.months_since_start(as_of)
        )

    def remaining_interest(self, as_of: date) -> Decimal:
        if not self.is_active:
            return ZERO
        return amortization.remaining_interest(
            self.original_amount, self.interest_rate, self.term_years, self.months_since_start(as_of)
        )

    # Lifecycle

    def mark_paid_off(self, at: date | None = None) -> "Loan":
        """Return this loan as paid off on `at` (today if omitted).

        Only an active loan transitions; calling this again keeps the first
        paid-off date.
        """
        if not self.is_active:
            logger.debug("Loan %s is %s, leaving unchanged", self.id, self.status.value)
            return self
        paid_on = at or date.today()
        logger.info("Loan %s marked paid off on %s", self.id, paid_on.isoformat())
        return replace(self, status=LoanStatus.PAID_OFF, paid_off_date=paid_on)
