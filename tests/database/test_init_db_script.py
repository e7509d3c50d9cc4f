from scripts import init_db


def test_check_reports_missing_ledger_tables(monkeypatch, caplog):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setattr(init_db, "list_tables", lambda cfg: ["persons", "fee_transactions"])

    assert init_db.main(["--check"]) == 1
    assert "attendance_punches, mark_entries" in caplog.text


def test_check_passes_when_all_tables_exist(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setattr(init_db, "list_tables", lambda cfg: [t.upper() for t in init_db.LEDGER_TABLES])

    assert init_db.main(["--check"]) == 0


def test_missing_schema_file_is_not_applied(monkeypatch, tmp_path):
    applied = []
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setattr(init_db, "apply_schema", lambda cfg, schema_path: applied.append(schema_path))

    assert init_db.main(["--schema", str(tmp_path / "nope.sql")]) == 2
    assert applied == []
