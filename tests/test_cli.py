import json

import pytest

from swipewise import cli
from swipewise.config import settings


@pytest.fixture(autouse=True)
def offline(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "openai_api_key", "")
    monkeypatch.setattr(settings, "ledger_file", str(tmp_path / "spending.jsonl"))


def test_classify_prints_json(capsys) -> None:
    cli.main(["classify", "weekly groceries at whole foods"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["category"] == "Grocery"
    assert payload["source"] == "merchant"


def test_record_then_recommend(capsys, tmp_path) -> None:
    cli.main(["record", "demo", "blue_cash_preferred", "Grocery", "5900", "--date", "2026-01-15"])
    capsys.readouterr()

    cli.main(["recommend", "--category", "Grocery", "--amount", "200", "--user", "demo", "--date", "2026-06-01"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["best_card"]["effective_rate"] == 3.5
    assert (tmp_path / "spending.jsonl").exists()


def test_gaps_category_mode(capsys) -> None:
    cli.main(["gaps", "demo", "--category", "Dining", "--date", "2026-05-01"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["category"] == "Dining"
    assert payload["user_best_rate"] == 3


def test_subcommand_is_required() -> None:
    with pytest.raises(SystemExit):
        cli.main([])


def test_import_then_history(capsys, tmp_path) -> None:
    path = tmp_path / "purchases.json"
    path.write_text(
        json.dumps(
            [
                {"card_id": "double_cash", "category": "Dining", "amount": 42.5, "purchase_date": "2026-03-01"},
                {"card_id": "freedom_flex", "category": "Gas", "amount": 30, "purchase_date": "2026-03-02"},
            ]
        )
    )

    cli.main(["import", "demo", str(path)])
    assert "Imported 2 transaction(s)" in capsys.readouterr().out

    cli.main(["history", "demo", "--limit", "1"])
    payload = json.loads(capsys.readouterr().out)
    assert [row["category"] for row in payload] == ["Gas"]
