# tracker/domain/inventory/schemas.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from tracker.db.models.transactions import ChangeType

# largest value a SQLite INTEGER column holds
MAX_QUANTITY = 2**63 - 1


def _clean_name(value):
    if isinstance(value, str):
        value = value.strip()
    if not value:
        raise ValueError("name must not be empty")
    return value


def _clean_category(value):
    if isinstance(value, str):
        return value.strip() or None
    return value


class EquipmentCreate(BaseModel):
    name: str
    quantity: int = Field(default=0, ge=0, le=MAX_QUANTITY)
    category: Optional[str] = None
    min_stock_level: int = Field(default=0, ge=0, le=MAX_QUANTITY)

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, value):
        return _clean_name(value)

    @field_validator("category", mode="before")
    @classmethod
    def clean_category(cls, value):
        return _clean_category(value)


class EquipmentMetadataUpdate(BaseModel):
    name: str
    category: Optional[str] = None
    min_stock_level: int = Field(default=0, ge=0, le=MAX_QUANTITY)

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, value):
        return _clean_name(value)

    @field_validator("category", mode="before")
    @classmethod
    def clean_category(cls, value):
        return _clean_category(value)


class QuantityAdjustment(BaseModel):
    delta: int = Field(ge=1, le=MAX_QUANTITY)
    is_add: bool
    notes: str = ""

    def default_notes(self) -> str:
        verb = "Added" if self.is_add else "Removed"
        return f"{verb} {self.delta} units."


class TransactionPage(BaseModel):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=100, ge=1)


class EquipmentOut(BaseModel):
    id: str
    name: str
    quantity: int
    category: Optional[str]
    min_stock_level: int
    last_updated: datetime
    is_low_stock: bool

    class Config:
        from_attributes = True


class TransactionOut(BaseModel):
    id: int
    equipment_id: str
    equipment_name: str
    timestamp: datetime
    change_type: ChangeType
    old_quantity: int
    new_quantity: int
    notes: str

    class Config:
        from_attributes = True


class InventorySummary(BaseModel):
    total_items: int
    low_stock_items: int
    total_quantity: int
