from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String
import uuid

from tracker.db.base import Base


def _new_equipment_id() -> str:
    return str(uuid.uuid4())


class Equipment(Base):
    __tablename__ = "equipment"

    """Represents one trackable line of physical equipment.

    Holds the current on-hand count, an optional free-text category used only
    for grouping, and the minimum stock threshold below which the line is
    reported as low stock. Every quantity change is mirrored by a row in the
    transactions log.
    """

    id = Column(String(36), primary_key=True, default=_new_equipment_id)
    name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    category = Column(String, nullable=True)
    min_stock_level = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime, nullable=False)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_equipment_quantity_non_negative"),
        CheckConstraint("min_stock_level >= 0", name="ck_equipment_min_stock_non_negative"),
        Index("ix_equipment_name", "name"),
    )

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_stock_level

    def __repr__(self):
        return f"<Equipment {self.id} {self.name!r} qty={self.quantity}>"
