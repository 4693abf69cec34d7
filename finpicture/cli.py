"""CLI: evaluate a snapshot file and print a terminal report.

Usage:
    python -m finpicture.cli snapshot.json --as-of 2025-06-30
    python -m finpicture.cli snapshot.json --as-of 2025-06-30 --extra 500
"""

import argparse
import logging
import sys
from datetime import date
from decimal import Decimal

from pydantic import ValidationError

from finpicture.config import settings
from finpicture.engine import portfolio as pf
from finpicture.engine.liquidity import system_health_score
from finpicture.engine.recommendations import generate_recommendations
from finpicture.engine.scoring import capital_allocation, financial_health_score, net_worth
from finpicture.ingest.records import SnapshotRecord
from finpicture.models.accounts import AccountSummary
from finpicture.models.asset import Asset

logger = logging.getLogger(__name__)


# ── Helpers ──────────────────────────────────────────────────────────────────

def _pct(v) -> str:
    """Format a ratio as a percentage string."""
    return f"{float(v) * 100:.2f}%"


def _money(v) -> str:
    return f"{settings.currency_symbol}{float(v):,.0f}"


def _header(title: str) -> None:
    print(f"\n{'=' * 64}")
    print(f"  {title}")
    print(f"{'=' * 64}")


# ── Report sections ──────────────────────────────────────────────────────────

def print_portfolio_summary(assets: list[Asset], accounts: AccountSummary, as_of: date) -> None:
    summary = pf.portfolio_summary(assets, as_of)
    _header("Portfolio Summary")
    print(f"  Assets:             {summary.assets_count} ({summary.active_loans_count} with active loans)")
    print(f"  Total Value:        {_money(summary.total_value)}")
    print(f"  Total Debt:         {_money(summary.total_debt)}")
    print(f"  Total Equity:       {_money(summary.total_equity)}")
    print(f"  Monthly Payments:   {_money(summary.monthly_payments)}")
    print(f"  Avg Interest Rate:  {float(summary.average_interest_rate):.2f}%")
    print(f"  Loan-to-Value:      {_pct(summary.loan_to_value_ratio)}")
    print(f"  Health Score:       {_pct(summary.health_score)}")
    print(f"  Net Worth:          {_money(net_worth(assets, accounts, as_of))}")


def print_health_score(assets: list[Asset], accounts: AccountSummary, as_of: date) -> None:
    score = financial_health_score(assets, accounts, as_of)
    _header("Financial Health")
    print(f"  Overall:          {float(score.overall_score):.1f}  ({score.overall_grade})")
    print(f"  Portfolio:        {float(score.portfolio_health):.1f}")
    print(f"  Budget:           {float(score.budget_health):.1f}")
    print(f"  Savings:          {float(score.savings_health):.1f}")
    print(f"  Diversification:  {float(score.diversification_health):.1f}")
    print(f"  System (banded):  {system_health_score(assets, accounts, as_of).score}")


def print_allocation(assets: list[Asset], accounts: AccountSummary, as_of: date) -> None:
    alloc = capital_allocation(assets, accounts, as_of)
    _header("Capital Allocation")
    rows = [
        ("Savings", alloc.savings, alloc.savings_percentage),
        ("Investments", alloc.investments, alloc.investments_percentage),
        ("Assets", alloc.assets, alloc.assets_percentage),
        ("Cash", alloc.cash, alloc.cash_percentage),
        ("Debt", alloc.debt, alloc.debt_percentage),
    ]
    for label, amount, share in rows:
        print(f"  {label:<12} {_money(amount):>14}  {_pct(share):>8}")


def print_payoff_orders(
    assets: list[Asset], as_of: date, extra: Decimal | None
) -> None:
    avalanche = pf.optimal_payoff_order(assets)
    if not avalanche:
        return
    _header("Loan Payoff Order")
    print("  Highest rate first:")
    for i, asset in enumerate(avalanche, 1):
        print(f"    {i}. {asset.name:<24} {float(asset.interest_rate):.2f}%")
    print("  Smallest balance first:")
    for i, asset in enumerate(pf.emotional_payoff_order(assets, as_of), 1):
        print(f"    {i}. {asset.name:<24} {_money(asset.remaining_loan_balance(as_of))}")

    if extra:
        print(f"\n  With {_money(extra)}/mo extra:")
        for asset in avalanche:
            savings = asset.payoff_analysis(extra, as_of)
            print(
                f"    {asset.name:<24} {savings.months_saved:>4} months sooner, "
                f"{_money(savings.interest_saved)} interest saved"
            )


def print_recommendations(assets: list[Asset], accounts: AccountSummary, as_of: date) -> None:
    recs = generate_recommendations(assets, accounts, as_of)
    _header("Recommendations")
    if not recs:
        print("  Nothing to act on.")
        return
    for rec in recs:
        print(f"  [{rec.priority.value.upper():>6}]  {rec.title}")
        print(f"            {rec.description}")
        print(f"            -> {rec.action_text}")


# ── Main ─────────────────────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Value a loan-backed asset portfolio and print recommendations"
    )
    parser.add_argument("snapshot", help="Path to a snapshot JSON file")
    parser.add_argument(
        "--as-of", type=date.fromisoformat, required=True, help="Evaluation date (YYYY-MM-DD)"
    )
    parser.add_argument("--extra", type=Decimal, help="Extra monthly loan payment to evaluate")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level)

    try:
        with open(args.snapshot, encoding="utf-8") as f:
            snapshot = SnapshotRecord.model_validate_json(f.read())
    except OSError as e:
        print(f"Error: could not read {args.snapshot}: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"Error: invalid snapshot {args.snapshot}", file=sys.stderr)
        print(f"  {e}", file=sys.stderr)
        return 1

    assets = snapshot.to_portfolio().assets
    accounts = snapshot.accounts.to_summary(args.as_of)
    logger.info("Evaluating %d assets as of %s", len(assets), args.as_of.isoformat())

    print_portfolio_summary(assets, accounts, args.as_of)
    print_health_score(assets, accounts, args.as_of)
    print_allocation(assets, accounts, args.as_of)
    print_payoff_orders(assets, args.as_of, args.extra)
    print_recommendations(assets, accounts, args.as_of)
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
