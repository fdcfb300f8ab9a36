from __future__ import annotations

import pytest

from tracker.core.errors import BackupError
from tracker.repository import EquipmentRepository


def test_backup_round_trip(repo, tmp_path):
    hammer = repo.add_equipment("Hammer", quantity=10, category="Tools", min_stock_level=5)
    repo.add_equipment("Saw", quantity=2)
    repo.adjust_quantity(hammer.id, 7, is_add=False)
    destination = tmp_path / "backup.db"

    repo.backup(destination)

    with EquipmentRepository(destination) as restored:
        assert restored.list_equipment() == repo.list_equipment()
        assert restored.list_transactions(page_size=100) == repo.list_transactions(page_size=100)


def test_backup_is_point_in_time(repo, tmp_path):
    item = repo.add_equipment("Hammer", quantity=1)
    destination = tmp_path / "backup.db"
    repo.backup(destination)

    repo.adjust_quantity(item.id, 5, is_add=True)

    with EquipmentRepository(destination) as restored:
        assert restored.get_equipment(item.id).quantity == 1
        assert len(restored.list_transactions()) == 1


def test_backup_overwrites_destination(repo, tmp_path):
    repo.add_equipment("Hammer")
    destination = tmp_path / "backup.db"
    destination.write_bytes(b"stale contents")

    repo.backup(destination)

    assert destination.read_bytes() == repo.database_path.read_bytes()


def test_repository_usable_after_backup(repo, tmp_path):
    item = repo.add_equipment("Hammer", quantity=1)
    repo.backup(tmp_path / "backup.db")

    assert repo.adjust_quantity(item.id, 1, is_add=True) == 2


def test_backup_to_unwritable_destination(repo, tmp_path):
    repo.add_equipment("Hammer")

    with pytest.raises(BackupError):
        repo.backup(tmp_path / "no-such-dir" / "backup.db")


def test_backup_missing_source(db_path, tmp_path):
    repository = EquipmentRepository(db_path)
    repository.close()
    db_path.unlink()

    with pytest.raises(BackupError):
        repository.backup(tmp_path / "backup.db")


def test_backup_in_memory_database(tmp_path):
    with EquipmentRepository(db_url="sqlite:///:memory:") as repository:
        repository.add_equipment("Hammer")
        with pytest.raises(BackupError):
            repository.backup(tmp_path / "backup.db")
