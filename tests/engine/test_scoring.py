from datetime import date
from decimal import Decimal

from finpicture.engine.scoring import (
    budget_health,
    capital_allocation,
    count_savings_months,
    diversification_health,
    expense_growth,
    financial_health_score,
    months_back,
    net_worth,
    portfolio_health,
    record_net_worth,
    savings_health,
)
from finpicture.models.accounts import AccountSummary
from finpicture.models.results import FinancialHealthScore, NetWorthSnapshot


class TestNetWorth:
    def test_holdings_minus_debt(self, make_asset, as_of):
        accounts = AccountSummary(
            cash_balance=Decimal("1000"),
            savings_balance=Decimal("2000"),
            investment_value=Decimal("5000"),
        )
        plain = make_asset("Plain", price="10000")
        levered = make_asset("Levered", price="10000", loan_amount="4000", acquired=as_of)
        assert net_worth([plain], accounts, as_of) == Decimal("18000")
        assert net_worth([plain, levered], accounts, as_of) == Decimal("24000")

    def test_empty(self, empty_accounts, as_of):
        assert net_worth([], empty_accounts, as_of) == Decimal("0")


class TestCapitalAllocation:
    def test_split(self, make_asset, as_of):
        accounts = AccountSummary(
            cash_balance=Decimal("10000"),
            savings_balance=Decimal("20000"),
            investment_value=Decimal("30000"),
        )
        alloc = capital_allocation([make_asset(price="40000")], accounts, as_of)
        assert alloc.total_capital == Decimal("100000")
        assert alloc.investments_percentage == Decimal("0.3")
        assert alloc.assets_percentage == Decimal("0.4")
        assert alloc.debt == Decimal("0")

    def test_negative_balances_clamped(self, as_of):
        accounts = AccountSummary(cash_balance=Decimal("-500"), savings_balance=Decimal("1000"))
        alloc = capital_allocation([], accounts, as_of)
        assert alloc.cash == Decimal("0")
        assert alloc.total_capital == Decimal("1000")

    def test_empty_has_zero_shares(self, empty_accounts, as_of):
        alloc = capital_allocation([], empty_accounts, as_of)
        assert alloc.savings_percentage == Decimal("0")


class TestNetWorthHistory:
    def test_replaces_current_month(self):
        history = [NetWorthSnapshot(date(2025, 6, 1), Decimal("100"))]
        updated = record_net_worth(history, Decimal("150"), date(2025, 6, 30))
        assert updated == [NetWorthSnapshot(date(2025, 6, 1), Decimal("150"))]

    def test_appends_in_month_order(self):
        history = [NetWorthSnapshot(date(2025, 5, 1), Decimal("100"))]
        updated = record_net_worth(history, Decimal("120"), date(2025, 6, 15))
        assert [s.month for s in updated] == [date(2025, 5, 1), date(2025, 6, 1)]
        assert len(history) == 1

    def test_keeps_last_months(self):
        history = [NetWorthSnapshot(date(2024, m, 1), Decimal(m)) for m in range(1, 13)]
        updated = record_net_worth(history, Decimal("13"), date(2025, 1, 10), keep=6)
        assert len(updated) == 6
        assert updated[-1].month == date(2025, 1, 1)
        assert updated[0].month == date(2024, 8, 1)


class TestCollaboratorHelpers:
    def test_months_back_clamps_to_month_end(self):
        assert months_back(date(2025, 3, 31), 1) == date(2025, 2, 28)
        assert months_back(date(2025, 1, 15), 2) == date(2024, 11, 15)

    def test_expense_growth(self):
        assert expense_growth(Decimal("110"), Decimal("100")) == Decimal("0.1")
        assert expense_growth(Decimal("110"), Decimal("0")) == Decimal("0")

    def test_count_savings_months(self, as_of):
        credits = [
            date(2025, 1, 5),
            date(2025, 1, 20),
            date(2025, 3, 1),
            date(2025, 6, 15),
            date(2024, 11, 1),  # Outside the 6-month window
        ]
        assert count_savings_months(credits, as_of) == 3


class TestSubScores:
    def test_portfolio_without_investments(self, empty_accounts):
        assert portfolio_health(empty_accounts, Decimal("0")) == Decimal("40")

    def test_portfolio_health(self, accounts):
        # allocation min(0.6 * 2, 1) = 1, performance (0.08 + 0.1) / 0.2 = 0.9
        assert portfolio_health(accounts, Decimal("100000")) == Decimal("96.00")

    def test_budget_health(self, accounts):
        # 7.5 months of savings caps at 1; flat expenses score 0.5
        assert budget_health(accounts) == Decimal("85.00")

    def test_budget_health_explicit_zero_target(self):
        accounts = AccountSummary(savings_balance=Decimal("4000"), monthly_expenses=Decimal("4000"))
        # A zero target is floored to one month instead of falling back to the default
        assert budget_health(accounts, target_months=0) == Decimal("85.00")
        assert budget_health(accounts) == Decimal("26.67")

    def test_savings_health(self, accounts):
        # 20% savings rate and 5 of 6 months with savings
        assert savings_health(accounts) == Decimal("100.00")

    def test_inconsistent_saver(self):
        accounts = AccountSummary(
            total_savings_credits=Decimal("6000"),
            total_income=Decimal("60000"),
            recent_savings_months=2,
        )
        # 0.5 * 0.7 + 0.5 * 0.3
        assert savings_health(accounts) == Decimal("50.00")

    def test_diversification_on_target(self, make_asset, as_of):
        accounts = AccountSummary(savings_balance=Decimal("10000"), investment_value=Decimal("60000"))
        assets = [make_asset(price="30000")]
        assert diversification_health(assets, accounts, as_of) == Decimal("100.00")

    def test_diversification_without_investments(self, make_asset, as_of):
        accounts = AccountSummary(savings_balance=Decimal("10000"))
        assert diversification_health([make_asset()], accounts, as_of) == Decimal("0")


class TestFinancialHealthScore:
    def test_zero_inputs_stay_in_range(self, empty_accounts, as_of):
        score = financial_health_score([], empty_accounts, as_of)
        for part in (
            score.portfolio_health,
            score.budget_health,
            score.savings_health,
            score.diversification_health,
            score.overall_score,
        ):
            assert Decimal("0") <= part <= Decimal("100")

    def test_full_snapshot_in_range(self, car, house, laptop, accounts, as_of):
        score = financial_health_score([car, house, laptop], accounts, as_of)
        assert Decimal("0") <= score.overall_score <= Decimal("100")
        assert score.overall_grade in {"A+", "A", "B", "C", "D", "F"}

    def test_grades(self):
        assert FinancialHealthScore(*[Decimal("90")] * 4).overall_grade == "A+"
        assert FinancialHealthScore(*[Decimal("80")] * 4).overall_grade == "A"
        assert FinancialHealthScore(*[Decimal("55")] * 4).overall_grade == "D"
        assert FinancialHealthScore().overall_grade == "F"

    def test_overall_is_mean(self):
        score = FinancialHealthScore(Decimal("100"), Decimal("80"), Decimal("60"), Decimal("40"))
        assert score.overall_score == Decimal("70")
