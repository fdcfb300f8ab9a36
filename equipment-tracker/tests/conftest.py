from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from tracker.repository import EquipmentRepository  # noqa: E402


@pytest.fixture()
def db_path(tmp_path):
    return tmp_path / "equipment.db"


@pytest.fixture()
def repo(db_path):
    repository = EquipmentRepository(db_path)
    try:
        yield repository
    finally:
        repository.close()
