from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # App
    log_level: str = "INFO"
    currency_symbol: str = "$"

    # Recommendation thresholds
    expected_investment_return: Decimal = Decimal("0.07")  # Payoff vs invest hurdle
    emergency_fund_target_months: int = 6
    emergency_fund_min_months: int = 3
    idle_cash_savings_ratio: Decimal = Decimal("0.5")  # Cash above 50% of savings is idle
    idle_cash_retain_ratio: Decimal = Decimal("0.3")
    rebalance_threshold_points: Decimal = Decimal("5")

    # Ideal split of savings / investments / asset equity
    target_allocation: dict[str, Decimal] = {
        "savings": Decimal("0.10"),
        "investments": Decimal("0.60"),
        "assets": Decimal("0.30"),
    }

    # Default annual appreciation (+) / depreciation (-) by asset type.
    # Keys are lowercase with underscores; see engine.valuation.normalize_type.
    appreciation_rates: dict[str, Decimal] = {
        "vehicle": Decimal("-0.15"),
        "car": Decimal("-0.15"),
        "motorcycle": Decimal("-0.15"),
        "real_estate": Decimal("0.03"),
        "property": Decimal("0.03"),
        "house": Decimal("0.03"),
        "land": Decimal("0.03"),
        "business": Decimal("0.05"),
        "intellectual_property": Decimal("-0.05"),
        "computer": Decimal("-0.20"),
        "electronics": Decimal("-0.20"),
    }

    # Used when the type has no entry above
    category_fallback_rates: dict[str, Decimal] = {
        "tangible": Decimal("-0.05"),
        "intangible": Decimal("0"),
    }


settings = Settings()
