"""
Repository facade for the equipment inventory.

This is the only surface that outside callers (CLI, exporters, a UI) use.
Each instance owns one SQLAlchemy engine bound to one SQLite file and runs
every operation as a short synchronous unit of work:

- mutations (add / delete / adjust / metadata update) run inside
  ``sessionmaker.begin()``: the equipment write and its audit row commit
  together or roll back together;
- reads use a plain session that is closed on exit;
- nothing is retried; storage errors surface as ``StorageError``.

Callers that need non-blocking behaviour should offload calls to a worker
thread; the facade itself never suspends.
"""

from contextlib import contextmanager
import logging
import os
from pathlib import Path
import shutil
from typing import Iterator, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tracker.core.config import Settings
from tracker.core.errors import BackupError, StorageError, ValidationError
from tracker.db.base import create_db_engine, database_file, init_db, make_session_factory
from tracker.db.repositories import equipment as equipment_repo
from tracker.db.repositories import transactions as transactions_repo
from tracker.domain.inventory import service
from tracker.domain.inventory.schemas import (
    EquipmentCreate,
    EquipmentMetadataUpdate,
    EquipmentOut,
    InventorySummary,
    QuantityAdjustment,
    TransactionOut,
    TransactionPage,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]
SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _validate(schema: Type[SchemaT], **values) -> SchemaT:
    try:
        return schema(**values)
    except SchemaValidationError as exc:
        messages = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'value'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ValidationError(messages) from exc


class EquipmentRepository:
    def __init__(
        self,
        db_path: PathLike = "equipment.db",
        *,
        db_url: Optional[str] = None,
        echo: bool = False,
    ):
        if db_url is None:
            db_url = f"sqlite:///{db_path}"

        self._engine = create_db_engine(db_url, echo=echo)
        source = database_file(self._engine)
        if source is not None:
            source.parent.mkdir(parents=True, exist_ok=True)

        self._sessions = make_session_factory(self._engine)
        try:
            init_db(self._engine)
        except SQLAlchemyError as exc:
            self._engine.dispose()
            raise StorageError(f"Could not initialise database at {db_url}: {exc}") from exc

    @classmethod
    def from_settings(cls, settings: Settings) -> "EquipmentRepository":
        return cls(db_url=settings.database_url, echo=settings.DB_ECHO)

    @property
    def database_path(self) -> Optional[Path]:
        return database_file(self._engine)

    # ------------------------------------------------------------------
    # session scopes
    # ------------------------------------------------------------------

    @contextmanager
    def _unit_of_work(self) -> Iterator[Session]:
        try:
            with self._sessions.begin() as db:
                yield db
        except (SQLAlchemyError, OverflowError) as exc:
            logger.exception("Write transaction rolled back")
            raise StorageError(str(exc)) from exc

    @contextmanager
    def _read_session(self) -> Iterator[Session]:
        try:
            with self._sessions() as db:
                yield db
        except SQLAlchemyError as exc:
            logger.exception("Read failed")
            raise StorageError(str(exc)) from exc

    # ------------------------------------------------------------------
    # equipment
    # ------------------------------------------------------------------

    def list_equipment(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[EquipmentOut]:
        with self._read_session() as db:
            rows = equipment_repo.list_equipment(db, search=search, category=category)
            return [EquipmentOut.model_validate(row) for row in rows]

    def get_equipment(self, equipment_id: str) -> Optional[EquipmentOut]:
        with self._read_session() as db:
            row = equipment_repo.get_equipment_by_id(db, equipment_id)
            return EquipmentOut.model_validate(row) if row is not None else None

    def add_equipment(
        self,
        name: str,
        quantity: int = 0,
        category: Optional[str] = None,
        min_stock_level: int = 0,
    ) -> EquipmentOut:
        data = _validate(
            EquipmentCreate,
            name=name,
            quantity=quantity,
            category=category,
            min_stock_level=min_stock_level,
        )
        with self._unit_of_work() as db:
            equipment = service.create_equipment(db, data)
            created = EquipmentOut.model_validate(equipment)

        logger.info("Created equipment %s (%r, quantity=%d)", created.id, created.name, created.quantity)
        return created

    def update_equipment_metadata(
        self,
        equipment_id: str,
        name: str,
        category: Optional[str] = None,
        min_stock_level: int = 0,
    ) -> None:
        data = _validate(
            EquipmentMetadataUpdate,
            name=name,
            category=category,
            min_stock_level=min_stock_level,
        )
        with self._unit_of_work() as db:
            service.update_equipment_metadata(db, equipment_id, data)

        logger.info("Updated metadata of equipment %s", equipment_id)

    def delete_equipment(self, equipment_id: str) -> None:
        """Delete equipment and log it. Unknown ids are a no-op."""
        with self._unit_of_work() as db:
            txn = service.delete_equipment(db, equipment_id)

        if txn is None:
            logger.debug("Delete of unknown equipment %s ignored", equipment_id)
        else:
            logger.info("Deleted equipment %s (%r, quantity was %d)", equipment_id, txn.equipment_name, txn.old_quantity)

    def adjust_quantity(
        self,
        equipment_id: str,
        delta: int,
        is_add: bool,
        notes: str = "",
    ) -> int:
        """Add or remove stock and return the new quantity.

        Removal never goes below zero. Raises NotFoundError for unknown ids.
        """
        data = _validate(QuantityAdjustment, delta=delta, is_add=is_add, notes=notes or "")
        with self._unit_of_work() as db:
            txn = service.adjust_quantity(db, equipment_id, data)
            new_quantity = txn.new_quantity

        logger.info(
            "%s %d on equipment %s: %d -> %d",
            txn.change_type.value, data.delta, equipment_id, txn.old_quantity, new_quantity,
        )
        return new_quantity

    def list_categories(self) -> List[str]:
        with self._read_session() as db:
            return equipment_repo.list_categories(db)

    def summary(self) -> InventorySummary:
        with self._read_session() as db:
            total_items, low_stock_items, total_quantity = equipment_repo.stock_totals(db)
        return InventorySummary(
            total_items=total_items,
            low_stock_items=low_stock_items,
            total_quantity=total_quantity,
        )

    # ------------------------------------------------------------------
    # transaction log
    # ------------------------------------------------------------------

    def list_transactions(self, page: int = 1, page_size: int = 100) -> List[TransactionOut]:
        """Return one page of the audit log, newest first. Past the end is an empty list."""
        paging = _validate(TransactionPage, page=page, page_size=page_size)
        with self._read_session() as db:
            rows = transactions_repo.get_transactions_page(db, paging.page, paging.page_size)
            return [TransactionOut.model_validate(row) for row in rows]

    def list_equipment_transactions(self, equipment_id: str) -> List[TransactionOut]:
        with self._read_session() as db:
            rows = transactions_repo.get_transactions_for_equipment(db, equipment_id)
            return [TransactionOut.model_validate(row) for row in rows]

    # ------------------------------------------------------------------
    # backup / lifecycle
    # ------------------------------------------------------------------

    def backup(self, destination_path: PathLike) -> None:
        """Copy the database file byte for byte, overwriting the destination."""
        source = database_file(self._engine)
        if source is None:
            raise BackupError("Only file-backed databases can be backed up")
        if not source.is_file():
            raise BackupError(f"Database file {source} does not exist")

        # drop pooled connections so nothing holds the file mid-transaction
        self._engine.dispose()
        try:
            shutil.copyfile(source, destination_path)
        except OSError as exc:
            raise BackupError(f"Could not back up {source} to {destination_path}: {exc}") from exc

        logger.info("Backed up %s to %s", source, destination_path)

    def close(self) -> None:
        self._engine.dispose()

    def __enter__(self) -> "EquipmentRepository":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
