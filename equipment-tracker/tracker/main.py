import argparse
import logging
import sys
from typing import List, Optional

from tracker.core.config import get_settings
from tracker.core.errors import NotFoundError, TrackerError
from tracker.core.logging import configure_logging
from tracker.domain.inventory.schemas import EquipmentOut, TransactionOut
from tracker.exports.csv_export import export_equipment_csv
from tracker.repository import EquipmentRepository

logger = logging.getLogger(__name__)


def _format_equipment(item: EquipmentOut) -> str:
    flag = "  LOW" if item.is_low_stock else ""
    category = item.category or "-"
    return f"{item.id}  {item.name:<30} {item.quantity:>6}  min={item.min_stock_level:<4} {category}{flag}"


def _format_transaction(txn: TransactionOut) -> str:
    return (
        f"#{txn.id:<6} {txn.timestamp:%Y-%m-%d %H:%M:%S}  {txn.change_type.value:<6} "
        f"{txn.equipment_name} ({txn.equipment_id}) {txn.old_quantity} -> {txn.new_quantity}"
        + (f"  {txn.notes}" if txn.notes else "")
    )


def _require(repo: EquipmentRepository, equipment_id: str) -> EquipmentOut:
    item = repo.get_equipment(equipment_id)
    if item is None:
        raise NotFoundError(f"Equipment {equipment_id} not found")
    return item


def build_parser(default_page_size: int = 100) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="equipment-tracker",
        description="Track equipment stock levels with a full audit trail of quantity changes.",
    )
    parser.add_argument("--db", help="Path to the SQLite database file (overrides DB_PATH).")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("list", help="List equipment sorted by name.")
    p.add_argument("--search", help="Case-insensitive match on name or category.")
    p.add_argument("--category", help="Only this category.")
    p.add_argument("--low-stock", action="store_true", help="Only items at or below their minimum.")

    p = sub.add_parser("show", help="Show one equipment record.")
    p.add_argument("equipment_id")

    p = sub.add_parser("add", help="Add a new equipment line.")
    p.add_argument("name")
    p.add_argument("--quantity", type=int, default=0)
    p.add_argument("--category")
    p.add_argument("--min-stock", type=int, default=0)

    p = sub.add_parser("update", help="Change name, category or minimum stock.")
    p.add_argument("equipment_id")
    p.add_argument("--name")
    p.add_argument("--category")
    p.add_argument("--min-stock", type=int)

    p = sub.add_parser("delete", help="Delete an equipment line (its history is kept).")
    p.add_argument("equipment_id")

    p = sub.add_parser("adjust", help="Add or remove stock.")
    p.add_argument("equipment_id")
    p.add_argument("delta", type=int)
    direction = p.add_mutually_exclusive_group(required=True)
    direction.add_argument("--add", dest="is_add", action="store_true")
    direction.add_argument("--remove", dest="is_add", action="store_false")
    p.add_argument("--notes", default="")

    p = sub.add_parser("history", help="Show every logged change for one equipment id.")
    p.add_argument("equipment_id")

    p = sub.add_parser("transactions", help="Show the audit log, newest first.")
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--page-size", type=int, default=default_page_size)

    sub.add_parser("summary", help="Totals and low-stock count.")
    sub.add_parser("categories", help="List known categories.")

    p = sub.add_parser("backup", help="Copy the database file.")
    p.add_argument("destination")

    p = sub.add_parser("export", help="Export equipment to CSV.")
    p.add_argument("destination")
    p.add_argument("--search")
    p.add_argument("--category")

    return parser


def run(repo: EquipmentRepository, args: argparse.Namespace) -> None:
    if args.command == "list":
        items = repo.list_equipment(search=args.search, category=args.category)
        if args.low_stock:
            items = [item for item in items if item.is_low_stock]
        if not items:
            print("No equipment found.")
        for item in items:
            print(_format_equipment(item))

    elif args.command == "show":
        print(_format_equipment(_require(repo, args.equipment_id)))

    elif args.command == "add":
        item = repo.add_equipment(args.name, args.quantity, args.category, args.min_stock)
        print(f"Added {item.name} ({item.id}) with quantity {item.quantity}.")

    elif args.command == "update":
        current = _require(repo, args.equipment_id)
        repo.update_equipment_metadata(
            args.equipment_id,
            name=args.name if args.name is not None else current.name,
            category=args.category if args.category is not None else current.category,
            min_stock_level=args.min_stock if args.min_stock is not None else current.min_stock_level,
        )
        print(f"Updated {args.equipment_id}.")

    elif args.command == "delete":
        _require(repo, args.equipment_id)
        repo.delete_equipment(args.equipment_id)
        print(f"Deleted {args.equipment_id}.")

    elif args.command == "adjust":
        new_quantity = repo.adjust_quantity(args.equipment_id, args.delta, args.is_add, args.notes)
        print(f"Quantity is now {new_quantity}.")

    elif args.command == "history":
        for txn in repo.list_equipment_transactions(args.equipment_id):
            print(_format_transaction(txn))

    elif args.command == "transactions":
        for txn in repo.list_transactions(args.page, args.page_size):
            print(_format_transaction(txn))

    elif args.command == "summary":
        summary = repo.summary()
        print(
            f"Total Equipment: {summary.total_items} | "
            f"Low Stock Alerts: {summary.low_stock_items} | "
            f"Units On Hand: {summary.total_quantity}"
        )

    elif args.command == "categories":
        for category in repo.list_categories():
            print(category)

    elif args.command == "backup":
        repo.backup(args.destination)
        print(f"Database backed up to {args.destination}.")

    elif args.command == "export":
        items = repo.list_equipment(search=args.search, category=args.category)
        count = export_equipment_csv(items, args.destination)
        print(f"Exported {count} item(s) to {args.destination}.")


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    args = build_parser(settings.TRANSACTIONS_PAGE_SIZE).parse_args(argv)

    try:
        if args.db:
            repo = EquipmentRepository(args.db, echo=settings.DB_ECHO)
        else:
            repo = EquipmentRepository.from_settings(settings)
        with repo:
            run(repo, args)
    except NotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except TrackerError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
