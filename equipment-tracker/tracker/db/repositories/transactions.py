from datetime import datetime
from typing import List

from sqlalchemy.orm import Session
from sqlalchemy.sql import select

from tracker.db.models.transactions import ChangeType, Transaction


def append_transaction(
    db: Session,
    equipment_id: str,
    equipment_name: str,
    change_type: ChangeType,
    old_quantity: int,
    new_quantity: int,
    notes: str = "",
) -> Transaction:
    # Must run inside the caller's open unit of work; never commits.
    txn = Transaction(
        equipment_id=equipment_id,
        equipment_name=equipment_name,
        timestamp=datetime.now(),
        change_type=change_type,
        old_quantity=old_quantity,
        new_quantity=new_quantity,
        notes=notes or "",
    )
    db.add(txn)
    db.flush()
    return txn


def get_transactions_page(
    db: Session,
    page: int,
    page_size: int
) -> List[Transaction]:
    result = db.execute(
        select(Transaction)
        .order_by(Transaction.id.desc())
        .limit(page_size)
        .offset((page - 1) * page_size)
    )
    return list(result.scalars().all())


def get_transactions_for_equipment(
    db: Session,
    equipment_id: str
) -> List[Transaction]:
    result = db.execute(
        select(Transaction)
        .where(Transaction.equipment_id == equipment_id)
        .order_by(Transaction.id)
    )
    return list(result.scalars().all())
