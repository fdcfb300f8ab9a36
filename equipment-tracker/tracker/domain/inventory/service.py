# tracker/domain/inventory/service.py
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from tracker.core.errors import NotFoundError, ValidationError
from tracker.db.models.equipment import Equipment
from tracker.db.models.transactions import ChangeType, Transaction
from tracker.db.repositories.equipment import get_equipment_by_id, insert_equipment, remove_equipment
from tracker.db.repositories.transactions import append_transaction
from .schemas import MAX_QUANTITY, EquipmentCreate, EquipmentMetadataUpdate, QuantityAdjustment

# Every function here runs inside a unit of work opened by the caller and
# leaves commit/rollback to it.


def create_equipment(
    db: Session,
    data: EquipmentCreate,
) -> Equipment:
    equipment = insert_equipment(
        db,
        name=data.name,
        quantity=data.quantity,
        category=data.category,
        min_stock_level=data.min_stock_level,
        now=datetime.now(),
    )
    append_transaction(
        db,
        equipment_id=equipment.id,
        equipment_name=equipment.name,
        change_type=ChangeType.CREATE,
        old_quantity=0,
        new_quantity=equipment.quantity,
        notes="Equipment created",
    )
    return equipment


def update_equipment_metadata(
    db: Session,
    equipment_id: str,
    data: EquipmentMetadataUpdate,
) -> Equipment:
    equipment = get_equipment_by_id(db, equipment_id)
    if equipment is None:
        raise NotFoundError(f"Equipment {equipment_id} not found")

    # metadata changes are not audited; quantity is left alone
    equipment.name = data.name
    equipment.category = data.category
    equipment.min_stock_level = data.min_stock_level
    equipment.last_updated = datetime.now()
    db.flush()
    return equipment


def delete_equipment(
    db: Session,
    equipment_id: str,
) -> Optional[Transaction]:
    equipment = get_equipment_by_id(db, equipment_id)
    if equipment is None:
        return None

    # snapshot before the row goes away
    equipment_name, old_quantity = equipment.name, equipment.quantity
    remove_equipment(db, equipment)

    return append_transaction(
        db,
        equipment_id=equipment_id,
        equipment_name=equipment_name,
        change_type=ChangeType.DELETE,
        old_quantity=old_quantity,
        new_quantity=0,
        notes="Equipment deleted",
    )


def adjust_quantity(
    db: Session,
    equipment_id: str,
    data: QuantityAdjustment,
) -> Transaction:
    equipment = get_equipment_by_id(db, equipment_id)
    if equipment is None:
        raise NotFoundError(f"Equipment {equipment_id} not found")

    old_quantity = equipment.quantity
    if data.is_add:
        new_quantity = old_quantity + data.delta
        if new_quantity > MAX_QUANTITY:
            raise ValidationError(f"Quantity of {equipment_id} would exceed {MAX_QUANTITY}")
        change_type = ChangeType.ADD
    else:
        # removing more than is on hand empties the line instead of failing
        new_quantity = max(0, old_quantity - data.delta)
        change_type = ChangeType.REMOVE

    equipment.quantity = new_quantity
    equipment.last_updated = datetime.now()
    db.flush()

    return append_transaction(
        db,
        equipment_id=equipment.id,
        equipment_name=equipment.name,
        change_type=change_type,
        old_quantity=old_quantity,
        new_quantity=new_quantity,
        notes=data.notes or data.default_notes(),
    )
