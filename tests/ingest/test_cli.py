import json

import pytest

from finpicture.cli import main

SNAPSHOT = {
    "assets": [
        {
            "id": "car",
            "name": "Car",
            "type": "Car",
            "acquisition_date": "2024-01-15",
            "acquisition_price": "30000",
            "current_market_value": "24000",
            "loan": {"original_amount": "25000", "interest_rate": "7.5", "term_years": 5},
        },
        {
            "id": "laptop",
            "name": "Laptop",
            "type": "Computer",
            "acquisition_date": "2023-06-01",
            "acquisition_price": "2000",
        },
    ],
    "accounts": {
        "cash_balance": "8000",
        "savings_balance": "30000",
        "investment_value": "60000",
        "monthly_expenses": "4000",
        "monthly_income": "10000",
    },
}


@pytest.fixture
def snapshot_file(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(SNAPSHOT), encoding="utf-8")
    return path


class TestMain:
    def test_report(self, snapshot_file, capsys):
        assert main([str(snapshot_file), "--as-of", "2025-06-30"]) == 0
        out = capsys.readouterr().out
        for section in ("Portfolio Summary", "Financial Health", "Capital Allocation",
                        "Loan Payoff Order", "Recommendations"):
            assert section in out
        assert "Pay Off Car Loan" in out
        assert "System (banded)" in out

    def test_extra_payment(self, snapshot_file, capsys):
        assert main([str(snapshot_file), "--as-of", "2025-06-30", "--extra", "500"]) == 0
        assert "months sooner" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.json"), "--as-of", "2025-06-30"]) == 1
        assert "could not read" in capsys.readouterr().err

    def test_invalid_snapshot(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"assets": [{"name": "X"}]}), encoding="utf-8")
        assert main([str(path), "--as-of", "2025-06-30"]) == 1
        assert "invalid snapshot" in capsys.readouterr().err

    def test_as_of_required(self, snapshot_file):
        with pytest.raises(SystemExit):
            main([str(snapshot_file)])

    def test_duplicate_asset_ids(self, tmp_path, capsys):
        path = tmp_path / "dupes.json"
        twice = dict(SNAPSHOT, assets=[SNAPSHOT["assets"][0], dict(SNAPSHOT["assets"][0], name="Other Car")])
        path.write_text(json.dumps(twice), encoding="utf-8")
        assert main([str(path), "--as-of", "2025-06-30"]) == 1
        assert "duplicate asset id" in capsys.readouterr().err
