import enum

from sqlalchemy import DDL, Column, DateTime, Enum, Index, Integer, String, Text, event

from tracker.db.base import Base


class ChangeType(str, enum.Enum):
    CREATE = "Create"
    UPDATE = "Update"
    ADD = "Add"
    REMOVE = "Remove"
    DELETE = "Delete"


class Transaction(Base):
    __tablename__ = "transactions"

    """One immutable audit record of a quantity change.

    The equipment id and name are copied at the time of the event, not joined:
    the history has to survive renames and deletion of the equipment it
    describes, so equipment_id is a lookup key with no foreign key behind it.
    Ids come from SQLite AUTOINCREMENT and are never reused.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    equipment_id = Column(String(36), nullable=False)
    equipment_name = Column(String, nullable=False)
    timestamp = Column(DateTime, nullable=False)
    change_type = Column(
        Enum(
            ChangeType,
            name="change_type_enum",
            native_enum=False,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
    )
    old_quantity = Column(Integer, nullable=False)
    new_quantity = Column(Integer, nullable=False)
    notes = Column(Text, nullable=False, default="")

    __table_args__ = (
        Index("ix_transactions_equipment_id", "equipment_id", "id"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return f"<Transaction {self.id} {self.change_type.value} {self.equipment_id}: {self.old_quantity}->{self.new_quantity}>"


# Rows are append-only; the engine refuses to rewrite history.
event.listen(
    Transaction.__table__,
    "after_create",
    DDL(
        "CREATE TRIGGER IF NOT EXISTS trg_transactions_no_update "
        "BEFORE UPDATE ON transactions "
        "BEGIN SELECT RAISE(ABORT, 'transactions are append-only'); END"
    ).execute_if(dialect="sqlite"),
)
event.listen(
    Transaction.__table__,
    "after_create",
    DDL(
        "CREATE TRIGGER IF NOT EXISTS trg_transactions_no_delete "
        "BEFORE DELETE ON transactions "
        "BEGIN SELECT RAISE(ABORT, 'transactions are append-only'); END"
    ).execute_if(dialect="sqlite"),
)
