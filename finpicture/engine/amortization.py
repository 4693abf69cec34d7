"""Loan amortization math.

Pure functions: Decimal in, Decimal out. No I/O.

Rates are annual nominal percentages (Decimal("7.5") is 7.5%). Inputs that
describe no obligation (non-positive principal or term, negative rate) yield
zero rather than an error.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP
from enum import Enum

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")

# Cent-rounded payments shift the closed-form month count by a small fraction
MONTH_TOLERANCE = Decimal("0.01")


class PayoffStatus(Enum):
    PAID_OFF = "paid_off"
    AMORTIZES = "amortizes"
    NEVER_AMORTIZES = "never_amortizes"


@dataclass(frozen=True)
class PayoffTime:
    status: PayoffStatus
    months: int | None = None  # None when the loan never amortizes

    @property
    def amortizes(self) -> bool:
        return self.status is not PayoffStatus.NEVER_AMORTIZES


@dataclass(frozen=True)
class PayoffSavings:
    """Effect of adding an extra amount to every monthly payment."""
    months_saved: int
    interest_saved: Decimal
    current: PayoffTime
    accelerated: PayoffTime


NO_SAVINGS = PayoffSavings(
    months_saved=0,
    interest_saved=ZERO,
    current=PayoffTime(PayoffStatus.PAID_OFF, 0),
    accelerated=PayoffTime(PayoffStatus.PAID_OFF, 0),
)


@dataclass(frozen=True)
class AmortizationPayment:
    period: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal


@dataclass(frozen=True)
class AmortizationSchedule:
    payments: list[AmortizationPayment]
    monthly_payment: Decimal
    total_interest: Decimal
    total_principal: Decimal


def monthly_rate(annual_rate_pct: Decimal) -> Decimal:
    """Periodic monthly rate as a ratio."""
    return annual_rate_pct / 100 / 12


def _is_flat(rate_per_month: Decimal) -> bool:
    """True when the rate is too small to register at the current precision."""
    return rate_per_month <= 0 or 1 + rate_per_month == 1


def _has_obligation(principal: Decimal, annual_rate_pct: Decimal, term_years: int) -> bool:
    return principal > 0 and annual_rate_pct >= 0 and term_years > 0


def _level_payment(principal: Decimal, annual_rate_pct: Decimal, term_years: int) -> Decimal:
    n = term_years * 12
    r = monthly_rate(annual_rate_pct)
    if _is_flat(r):
        return principal / n
    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    factor = (1 + r) ** n
    if factor == 1:
        return principal / n
    return principal * (r * factor) / (factor - 1)


def _balance(
    principal: Decimal, annual_rate_pct: Decimal, term_years: int, months_elapsed: int
) -> Decimal:
    n = term_years * 12
    elapsed = max(0, months_elapsed)
    if elapsed >= n:
        return ZERO
    r = monthly_rate(annual_rate_pct)
    remaining = n - elapsed
    growth = (1 + r) ** remaining
    if _is_flat(r) or growth == 1:
        principal_paid = principal / n * elapsed
        return max(ZERO, principal - principal_paid)

    pmt = _level_payment(principal, annual_rate_pct, term_years)
    return pmt * (growth - 1) / (r * growth)


def monthly_payment(principal: Decimal, annual_rate_pct: Decimal, term_years: int) -> Decimal:
    """Fixed monthly payment; straight-line principal/n at a zero rate."""
    if not _has_obligation(principal, annual_rate_pct, term_years):
        return ZERO
    return _level_payment(principal, annual_rate_pct, term_years).quantize(
        TWO_PLACES, ROUND_HALF_UP
    )


def remaining_balance(
    principal: Decimal,
    annual_rate_pct: Decimal,
    term_years: int,
    months_elapsed: int,
) -> Decimal:
    """Outstanding principal after `months_elapsed` scheduled payments."""
    if not _has_obligation(principal, annual_rate_pct, term_years):
        return ZERO
    return _balance(principal, annual_rate_pct, term_years, months_elapsed).quantize(
        TWO_PLACES, ROUND_HALF_UP
    )


def interest_paid_to_date(
    principal: Decimal,
    annual_rate_pct: Decimal,
    term_years: int,
    months_elapsed: int,
) -> Decimal:
    """Payments made so far minus the principal they retired."""
    if not _has_obligation(principal, annual_rate_pct, term_years):
        return ZERO
    payments_made = min(max(0, months_elapsed), term_years * 12)
    total_paid = _level_payment(principal, annual_rate_pct, term_years) * payments_made
    principal_paid = principal - _balance(principal, annual_rate_pct, term_years, months_elapsed)
    return max(ZERO, total_paid - principal_paid).quantize(TWO_PLACES, ROUND_HALF_UP)


def remaining_interest(
    principal: Decimal,
    annual_rate_pct: Decimal,
    term_years: int,
    months_elapsed: int,
) -> Decimal:
    """Interest still to be paid if the loan runs to term."""
    if not _has_obligation(principal, annual_rate_pct, term_years):
        return ZERO
    payments_left = max(0, term_years * 12 - max(0, months_elapsed))
    total_remaining = _level_payment(principal, annual_rate_pct, term_years) * payments_left
    balance = _balance(principal, annual_rate_pct, term_years, months_elapsed)
    return max(ZERO, total_remaining - balance).quantize(TWO_PLACES, ROUND_HALF_UP)


def total_interest(principal: Decimal, annual_rate_pct: Decimal, term_years: int) -> Decimal:
    """Interest over the full life of the loan (paid + remaining)."""
    if not _has_obligation(principal, annual_rate_pct, term_years):
        return ZERO
    total_paid = _level_payment(principal, annual_rate_pct, term_years) * term_years * 12
    return max(ZERO, total_paid - principal).quantize(TWO_PLACES, ROUND_HALF_UP)


def payoff_time(balance: Decimal, rate_per_month: Decimal, payment: Decimal) -> PayoffTime:
    """Whole months needed to retire `balance` at a fixed `payment`.

    Closed form: n = -ln(1 - B*r/P) / ln(1 + r), rounded up.
    A payment that does not exceed the monthly interest never retires the
    balance and is reported as PayoffStatus.NEVER_AMORTIZES.
    """
    if balance <= 0:
        return PayoffTime(PayoffStatus.PAID_OFF, 0)
    if payment <= 0:
        return PayoffTime(PayoffStatus.NEVER_AMORTIZES)

    if _is_flat(rate_per_month):
        months = (balance / payment).to_integral_value(rounding=ROUND_CEILING)
        return PayoffTime(PayoffStatus.AMORTIZES, int(months))

    interest = balance * rate_per_month
    if payment <= interest:
        logger.debug(
            "Payment %s does not cover monthly interest %s on balance %s",
            payment, interest, balance,
        )
        return PayoffTime(PayoffStatus.NEVER_AMORTIZES)

    months = -(1 - interest / payment).ln() / (1 + rate_per_month).ln()
    months = months.quantize(MONTH_TOLERANCE, ROUND_HALF_UP).to_integral_value(
        rounding=ROUND_CEILING
    )
    return PayoffTime(PayoffStatus.AMORTIZES, max(1, int(months)))


def _total_paid(balance: Decimal, rate_per_month: Decimal, payment: Decimal, months: int) -> Decimal:
    """Sum of payments over `months`, with a reduced final payment."""
    if months <= 0:
        return ZERO
    k = months - 1
    if _is_flat(rate_per_month):
        before_last = balance - payment * k
        return payment * k + max(ZERO, before_last)
    growth = (1 + rate_per_month) ** k
    before_last = balance * growth - payment * (growth - 1) / rate_per_month
    return payment * k + max(ZERO, before_last) * (1 + rate_per_month)


def payoff_savings(
    balance: Decimal,
    annual_rate_pct: Decimal,
    current_payment: Decimal,
    extra_payment: Decimal,
) -> PayoffSavings:
    """Months and interest saved by paying `extra_payment` on top each month.

    Savings are only reported when both schedules amortize; the outcomes of
    both payoff calculations are carried on the result either way.
    """
    r = monthly_rate(annual_rate_pct)
    current = payoff_time(balance, r, current_payment)
    if extra_payment <= 0 or current.status is PayoffStatus.PAID_OFF:
        return PayoffSavings(0, ZERO, current, current)

    accelerated_payment = current_payment + extra_payment
    accelerated = payoff_time(balance, r, accelerated_payment)
    if current.status is not PayoffStatus.AMORTIZES or accelerated.status is not PayoffStatus.AMORTIZES:
        return PayoffSavings(0, ZERO, current, accelerated)

    current_interest = _total_paid(balance, r, current_payment, current.months) - balance
    accelerated_interest = _total_paid(balance, r, accelerated_payment, accelerated.months) - balance

    return PayoffSavings(
        months_saved=max(0, current.months - accelerated.months),
        interest_saved=max(ZERO, current_interest - accelerated_interest).quantize(
            TWO_PLACES, ROUND_HALF_UP
        ),
        current=current,
        accelerated=accelerated,
    )


def payment_split(
    balance: Decimal, annual_rate_pct: Decimal, payment: Decimal
) -> tuple[Decimal, Decimal]:
    """(interest, principal) portions of the next payment on `balance`."""
    interest = (balance * monthly_rate(annual_rate_pct)).quantize(TWO_PLACES, ROUND_HALF_UP)
    principal = max(ZERO, payment - interest)
    return interest, principal


def amortization_schedule(
    principal: Decimal,
    annual_rate_pct: Decimal,
    term_years: int,
    months: int | None = None,
) -> AmortizationSchedule:
    """Generate full or partial amortization schedule.

    Args:
        principal: Loan amount
        annual_rate_pct: Annual interest rate in percent (e.g. 7.5)
        term_years: Loan term in years
        months: If provided, only generate this many periods
    """
    pmt = monthly_payment(principal, annual_rate_pct, term_years)
    r = monthly_rate(annual_rate_pct) if annual_rate_pct > 0 else ZERO
    n_total = term_years * 12 if term_years > 0 else 0
    n_periods = min(months, n_total) if months is not None else n_total

    payments: list[AmortizationPayment] = []
    balance = principal if pmt > 0 else ZERO
    total_interest_paid = ZERO
    total_principal = ZERO

    for period in range(1, n_periods + 1):
        if balance <= 0:
            break
        interest = (balance * r).quantize(TWO_PLACES, ROUND_HALF_UP)
        principal_paid = pmt - interest

        # Final payment adjustment
        if principal_paid > balance or period == n_total:
            principal_paid = balance
            actual_payment = interest + principal_paid
        else:
            actual_payment = pmt

        balance -= principal_paid
        total_interest_paid += interest
        total_principal += principal_paid

        payments.append(AmortizationPayment(
            period=period,
            payment=actual_payment,
            principal=principal_paid,
            interest=interest,
            balance=balance.quantize(TWO_PLACES, ROUND_HALF_UP),
        ))

    return AmortizationSchedule(
        payments=payments,
        monthly_payment=pmt,
        total_interest=total_interest_paid,
        total_principal=total_principal,
    )
