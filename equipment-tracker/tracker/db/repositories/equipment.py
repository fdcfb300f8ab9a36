from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session
from sqlalchemy.sql import select

from tracker.db.models.equipment import Equipment


def get_equipment_by_id(
    db: Session,
    equipment_id: str
) -> Optional[Equipment]:
    result = db.execute(
        select(Equipment).where(Equipment.id == equipment_id)
    )
    return result.scalar_one_or_none()


def list_equipment(
    db: Session,
    search: Optional[str] = None,
    category: Optional[str] = None,
) -> List[Equipment]:
    query = select(Equipment)
    if search:
        needle = search.lower()
        query = query.where(
            or_(
                func.lower(Equipment.name).contains(needle, autoescape=True),
                func.lower(Equipment.category).contains(needle, autoescape=True),
            )
        )
    if category:
        query = query.where(Equipment.category == category)

    result = db.execute(query.order_by(Equipment.name, Equipment.id))
    return list(result.scalars().all())


def list_categories(db: Session) -> List[str]:
    result = db.execute(
        select(Equipment.category)
        .where(Equipment.category.is_not(None), Equipment.category != "")
        .distinct()
        .order_by(Equipment.category)
    )
    return list(result.scalars().all())


def stock_totals(db: Session) -> Tuple[int, int, int]:
    """Return (item count, low-stock item count, summed quantity)."""
    low_stock = case((Equipment.quantity <= Equipment.min_stock_level, 1), else_=0)
    result = db.execute(
        select(
            func.count(Equipment.id),
            func.coalesce(func.sum(low_stock), 0),
            func.coalesce(func.sum(Equipment.quantity), 0),
        )
    )
    total_items, low_stock_items, total_quantity = result.one()
    return total_items, low_stock_items, total_quantity


def insert_equipment(
    db: Session,
    name: str,
    quantity: int,
    category: Optional[str],
    min_stock_level: int,
    now: datetime,
) -> Equipment:
    equipment = Equipment(
        name=name,
        quantity=quantity,
        category=category,
        min_stock_level=min_stock_level,
        last_updated=now,
    )
    db.add(equipment)
    db.flush()
    return equipment


def remove_equipment(
    db: Session,
    equipment: Equipment
) -> None:
    db.delete(equipment)
    db.flush()
