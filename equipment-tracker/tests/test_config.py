from __future__ import annotations

from tracker.core.config import Settings


def test_defaults(monkeypatch):
    for name in ["DB_PATH", "DB_URL", "DB_ECHO", "LOG_LEVEL", "LOG_FILE", "TRANSACTIONS_PAGE_SIZE"]:
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.DB_PATH == "equipment.db"
    assert settings.database_url == "sqlite:///equipment.db"
    assert settings.LOG_LEVEL == "INFO"
    assert settings.LOG_FILE is None
    assert settings.TRANSACTIONS_PAGE_SIZE == 100


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DB_PATH", "/var/lib/tracker/stock.db")
    monkeypatch.setenv("TRANSACTIONS_PAGE_SIZE", "25")
    monkeypatch.delenv("DB_URL", raising=False)

    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite:////var/lib/tracker/stock.db"
    assert settings.TRANSACTIONS_PAGE_SIZE == 25


def test_explicit_url_wins(monkeypatch):
    monkeypatch.setenv("DB_PATH", "ignored.db")
    monkeypatch.setenv("DB_URL", "sqlite:///:memory:")

    assert Settings(_env_file=None).database_url == "sqlite:///:memory:"


def test_repository_from_settings_uses_database_url(monkeypatch, tmp_path):
    from tracker.repository import EquipmentRepository

    target = tmp_path / "nested" / "stock.db"
    monkeypatch.setenv("DB_PATH", str(target))
    monkeypatch.delenv("DB_URL", raising=False)

    with EquipmentRepository.from_settings(Settings(_env_file=None)) as repo:
        repo.add_equipment("Hammer")
        assert repo.database_path == target

    assert target.exists()
