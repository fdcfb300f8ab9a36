# tracker/exports/csv_export.py
import csv
from datetime import datetime
import os
from typing import Any, Callable, Iterable, Mapping, TypeVar, Union

from tracker.domain.inventory.schemas import EquipmentOut

T = TypeVar("T")

DEFAULT_EQUIPMENT_COLUMNS: Mapping[str, Callable[[EquipmentOut], Any]] = {
    "Name": lambda e: e.name,
    "Quantity": lambda e: e.quantity,
    "Category": lambda e: e.category,
    "MinStockLevel": lambda e: e.min_stock_level,
    "LastUpdated": lambda e: e.last_updated,
}


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    return str(value)


def export_csv(
    rows: Iterable[T],
    path: Union[str, os.PathLike],
    columns: Mapping[str, Callable[[T], Any]],
) -> int:
    """Write a header line and one line per row; return the number of data rows.

    Values containing a comma, quote or line break are wrapped in quotes with
    embedded quotes doubled.
    """
    count = 0
    with open(path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
        writer.writerow(list(columns.keys()))
        for row in rows:
            writer.writerow([_format_value(accessor(row)) for accessor in columns.values()])
            count += 1
    return count


def export_equipment_csv(
    equipment: Iterable[EquipmentOut],
    path: Union[str, os.PathLike],
) -> int:
    return export_csv(equipment, path, DEFAULT_EQUIPMENT_COLUMNS)
