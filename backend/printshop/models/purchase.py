from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from printshop.models.base import utcnow


class PurchaseListItem(SQLModel, table=True):
    __tablename__ = "purchase_list"

    id: Optional[int] = Field(default=None, primary_key=True)
    filament_id: int = Field(foreign_key="filaments.id")
    quantity: int = 1
    notes: Optional[str] = None
    ordered: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class PurchaseItemCreate(SQLModel):
    filament_id: int
    quantity: int = Field(default=1, ge=1)
    notes: Optional[str] = None
    ordered: bool = False


class PurchaseItemUpdate(SQLModel):
    quantity: Optional[int] = Field(default=None, ge=1)
    notes: Optional[str] = None
    ordered: Optional[bool] = None
