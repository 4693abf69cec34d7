"""Asset value projection from a type-keyed appreciation table.

Rate resolution order:
  1. the asset's custom_depreciation_rate
  2. the configured rate for its (normalized) type
  3. the fallback rate for its category (tangible / intangible)

Pure functions. No I/O.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from finpicture.config import settings
from finpicture.models.asset import Asset

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")

OBSERVED_RATE_CAP = Decimal("0.25")  # Realized rates beyond +/-25%/yr are clamped


@dataclass(frozen=True)
class ValuePoint:
    year: int
    value: Decimal


def normalize_type(asset_type: str) -> str:
    """'Real Estate' / 'real-estate' -> 'real_estate'."""
    return "_".join(asset_type.strip().lower().replace("-", " ").split())


def annual_rate_for(
    asset: Asset,
    rates: dict[str, Decimal] | None = None,
    fallbacks: dict[str, Decimal] | None = None,
) -> Decimal:
    """Annual appreciation (+) or depreciation (-) rate applied to the asset."""
    if asset.custom_depreciation_rate is not None:
        return asset.custom_depreciation_rate

    rates = settings.appreciation_rates if rates is None else rates
    key = normalize_type(asset.asset_type)
    if key in rates:
        return Decimal(str(rates[key]))

    fallbacks = settings.category_fallback_rates if fallbacks is None else fallbacks
    return Decimal(str(fallbacks.get(asset.category.value.lower(), Decimal("0"))))


def projected_value(
    asset: Asset,
    years: int,
    rates: dict[str, Decimal] | None = None,
    fallbacks: dict[str, Decimal] | None = None,
) -> Decimal:
    """current_value * (1 + rate)^years, floored at zero."""
    if years <= 0:
        return asset.current_value
    rate = annual_rate_for(asset, rates, fallbacks)
    growth = (1 + rate) ** years
    return max(Decimal("0"), asset.current_value * growth).quantize(TWO_PLACES, ROUND_HALF_UP)


def value_projection(
    asset: Asset,
    horizon_years: int = 10,
    rates: dict[str, Decimal] | None = None,
    fallbacks: dict[str, Decimal] | None = None,
) -> list[ValuePoint]:
    """Year-by-year projected values, year 0 = current value."""
    return [
        ValuePoint(year=year, value=projected_value(asset, year, rates, fallbacks))
        for year in range(0, horizon_years + 1)
    ]


def observed_annual_rate(asset: Asset, as_of: date) -> Decimal:
    """Straight-line annual rate realized since acquisition, capped to +/-25%."""
    years = asset.years_owned(as_of)
    rate = asset.appreciation_rate / years
    rate = max(-OBSERVED_RATE_CAP, min(OBSERVED_RATE_CAP, rate))
    return rate.quantize(FOUR_PLACES, ROUND_HALF_UP)
