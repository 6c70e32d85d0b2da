import json

import checkout


def test_demo_prints_expected_totals(capsys, monkeypatch):
    monkeypatch.delenv("POS_CATALOG", raising=False)
    assert checkout.main(["demo"]) == 0
    out = capsys.readouterr().out
    assert "Total: $13.25 (Expected: $13.25)" in out
    assert "Total: $6.00 (Expected: $6.00)" in out
    assert "Total: $7.25 (Expected: $7.25)" in out
    assert "Card balance: $2164.75" in out


def test_price_with_card_balance(capsys, monkeypatch):
    monkeypatch.delenv("POS_CATALOG", raising=False)
    assert checkout.main(["price", "AAAABCDAAA", "--card-balance", "2150"]) == 0
    result = json.loads(capsys.readouterr().out)
    assert result["items"] == {"A": 7, "B": 1, "C": 1, "D": 1}
    assert result["subtotal"] == "13.25"
    assert result["total"] == "13.0325"
    assert result["card"]["tier"] == "silver"
    assert result["card"]["balance_after"] == "2164.75"


def test_price_with_catalog_file_and_separator(tmp_path, capsys):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([{"code": "apple", "unit_price": "0.50", "pack_size": 4, "pack_price": "1.50"}]))
    assert checkout.main(["--catalog", str(path), "price", "apple,apple,apple,apple,apple", "--sep", ","]) == 0
    result = json.loads(capsys.readouterr().out)
    assert result["total"] == "2.00"
    assert "card" not in result


def test_unknown_code_exits_with_error(capsys, monkeypatch):
    monkeypatch.delenv("POS_CATALOG", raising=False)
    assert checkout.main(["price", "ABZ"]) == 1
    assert "Product code 'Z' not found" in capsys.readouterr().err


def test_tiers_lists_table(capsys):
    assert checkout.main(["tiers"]) == 0
    rows = json.loads(capsys.readouterr().out)
    assert [row["tier"] for row in rows] == ["none", "bronze", "silver", "gold", "platinum"]
    assert rows[-1]["rate"] == "0.07"


def test_json_logging_goes_to_stderr(capsys, monkeypatch):
    monkeypatch.delenv("POS_CATALOG", raising=False)
    assert checkout.main(["--log-level", "info", "--log-format", "json", "price", "AB"]) == 0
    captured = capsys.readouterr()
    assert json.loads(captured.out)["total"] == "5.50"
    events = [json.loads(line) for line in captured.err.splitlines() if line.strip()]
    priced = [event for event in events if event["event"] == "transaction_priced"]
    assert priced[0]["total"] == "5.50"
    assert priced[0]["level"] == "info"


def test_missing_catalog_file_exits_with_error(tmp_path, capsys):
    assert checkout.main(["--catalog", str(tmp_path / "nope.json"), "price", "A"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Cannot read catalog" in captured.err


def test_log_level_flag_overrides_bad_env_value(capsys, monkeypatch):
    monkeypatch.setenv("POS_LOG_LEVEL", "chatty")
    assert checkout.main(["--log-level", "info", "tiers"]) == 0
    assert json.loads(capsys.readouterr().out)[0]["tier"] == "none"


def test_bad_log_setting_keeps_stdout_clean(capsys, monkeypatch):
    monkeypatch.setenv("POS_LOG_FORMAT", "xml")
    assert checkout.main(["tiers"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "command_failed" in captured.err
    assert "Log format" in captured.err
