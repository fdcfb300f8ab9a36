from __future__ import annotations

import pytest

from tracker.main import main
from tracker.repository import EquipmentRepository


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ["DB_PATH", "DB_URL", "LOG_FILE"]:
        monkeypatch.delenv(name, raising=False)


def _only_item(db_path):
    with EquipmentRepository(db_path) as repo:
        (item,) = repo.list_equipment()
    return item


def test_add_adjust_and_list(db_path, capsys):
    db = str(db_path)

    assert main(["--db", db, "add", "Hammer", "--quantity", "10", "--min-stock", "5", "--category", "Tools"]) == 0
    item = _only_item(db_path)

    assert main(["--db", db, "adjust", item.id, "7", "--remove"]) == 0
    assert "Quantity is now 3." in capsys.readouterr().out

    assert main(["--db", db, "list", "--low-stock"]) == 0
    out = capsys.readouterr().out
    assert "Hammer" in out
    assert "LOW" in out


def test_transactions_and_history(db_path, capsys):
    db = str(db_path)
    main(["--db", db, "add", "Rope", "--quantity", "2"])
    item = _only_item(db_path)
    main(["--db", db, "adjust", item.id, "3", "--add", "--notes", "restock"])
    capsys.readouterr()

    assert main(["--db", db, "transactions", "--page-size", "1"]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 1
    assert "Add" in lines[0] and "2 -> 5" in lines[0] and "restock" in lines[0]

    assert main(["--db", db, "history", item.id]) == 0
    assert len(capsys.readouterr().out.strip().splitlines()) == 2


def test_update_keeps_unspecified_fields(db_path):
    db = str(db_path)
    main(["--db", db, "add", "Hamer", "--category", "Tools", "--min-stock", "4"])
    item = _only_item(db_path)

    assert main(["--db", db, "update", item.id, "--name", "Hammer"]) == 0

    updated = _only_item(db_path)
    assert updated.name == "Hammer"
    assert updated.category == "Tools"
    assert updated.min_stock_level == 4


def test_unknown_id_exit_code(db_path, capsys):
    assert main(["--db", str(db_path), "adjust", "missing", "1", "--add"]) == 2
    assert "not found" in capsys.readouterr().err

    assert main(["--db", str(db_path), "delete", "missing"]) == 2


def test_validation_error_exit_code(db_path, capsys):
    assert main(["--db", str(db_path), "add", "   "]) == 1
    assert "Error" in capsys.readouterr().err


def test_summary_backup_and_export(db_path, tmp_path, capsys):
    db = str(db_path)
    main(["--db", db, "add", "Hammer", "--quantity", "3", "--min-stock", "5"])
    main(["--db", db, "add", "Saw, hand", "--quantity", "8"])
    capsys.readouterr()

    assert main(["--db", db, "summary"]) == 0
    assert "Total Equipment: 2 | Low Stock Alerts: 1 | Units On Hand: 11" in capsys.readouterr().out

    backup = tmp_path / "backup.db"
    assert main(["--db", db, "backup", str(backup)]) == 0
    assert backup.exists()

    export = tmp_path / "equipment.csv"
    assert main(["--db", db, "export", str(export)]) == 0
    lines = export.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Name,Quantity,Category,MinStockLevel,LastUpdated"
    assert lines[1].startswith("Hammer,3,,5,")
    assert lines[2].startswith('"Saw, hand",8,,0,')


def test_db_path_from_environment(monkeypatch, tmp_path):
    target = tmp_path / "data" / "from_env.db"
    monkeypatch.setenv("DB_PATH", str(target))

    assert main(["add", "Hammer"]) == 0

    assert target.exists()
