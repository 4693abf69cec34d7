from decimal import Decimal

from finpicture.engine.decisions import (
    DecisionOption,
    capital_deployment,
    compare_payoff_vs_invest,
    future_value,
    investment_gain,
)


class TestInvestmentGain:
    def test_monthly_compounding(self):
        # 100/month for 12 months at 1%/month
        assert investment_gain(Decimal("100"), 12, Decimal("12")) == Decimal("68.25")

    def test_degenerate_inputs(self):
        assert investment_gain(Decimal("100"), 12, Decimal("0")) == Decimal("0")
        assert investment_gain(Decimal("100"), 0, Decimal("7")) == Decimal("0")
        assert investment_gain(Decimal("0"), 12, Decimal("7")) == Decimal("0")


class TestPayoffVsInvest:
    def test_no_loan_is_a_tie(self, laptop, as_of):
        result = compare_payoff_vs_invest(laptop, Decimal("500"), as_of)
        assert result.months_saved == 0
        assert result.investment_gain == Decimal("0")
        assert result.better_option is DecisionOption.PAYOFF

    def test_expensive_loan_favours_payoff(self, make_asset, as_of):
        asset = make_asset("Card", price="30000", loan_amount="20000", rate="18", acquired=as_of)
        result = compare_payoff_vs_invest(asset, Decimal("500"), as_of, annual_return_pct=Decimal("2"))
        assert result.months_saved > 0
        assert result.better_option is DecisionOption.PAYOFF
        assert result.difference == result.interest_saved - result.investment_gain

    def test_cheap_loan_favours_investing(self, make_asset, as_of):
        asset = make_asset("Cheap", price="30000", loan_amount="20000", rate="2", acquired=as_of)
        result = compare_payoff_vs_invest(asset, Decimal("500"), as_of, annual_return_pct=Decimal("20"))
        assert result.better_option is DecisionOption.INVEST
        assert result.investment_gain > result.interest_saved


class TestCapitalDeployment:
    def test_future_value(self):
        assert future_value(Decimal("10000"), 2, Decimal("10")) == Decimal("12100.00")

    def test_scenarios(self, accounts):
        result = capital_deployment(Decimal("10000"), 5, accounts)
        assert [s.name for s in result.scenarios] == ["Conservative", "Moderate", "Aggressive"]
        values = [s.future_value for s in result.scenarios]
        assert values == sorted(values)
        assert result.buffer_months_after == Decimal("5.00")
        assert not result.below_minimum_buffer

    def test_draining_savings_flagged(self, accounts):
        result = capital_deployment(Decimal("25000"), 5, accounts)
        assert result.buffer_months_after == Decimal("1.25")
        assert result.below_minimum_buffer
