from datetime import datetime
from typing import List, Optional

from pydantic import FiniteFloat
from sqlmodel import SQLModel, Field

from printshop.models.base import utcnow


class Part(SQLModel, table=True):
    __tablename__ = "parts"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None
    quantity: int = 0
    minimum_quantity: int = 0
    supplier: Optional[str] = None
    part_number: Optional[str] = None
    price: Optional[float] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class PartPrinterLink(SQLModel, table=True):
    __tablename__ = "part_printers"

    part_id: int = Field(foreign_key="parts.id", primary_key=True)
    printer_id: int = Field(foreign_key="printers.id", primary_key=True)


class PartCreate(SQLModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    quantity: int = Field(default=0, ge=0)
    minimum_quantity: int = Field(default=0, ge=0)
    supplier: Optional[str] = None
    part_number: Optional[str] = None
    price: Optional[FiniteFloat] = Field(default=None, ge=0)
    notes: Optional[str] = None
    printer_ids: List[int] = []


class PartUpdate(SQLModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    minimum_quantity: Optional[int] = Field(default=None, ge=0)
    supplier: Optional[str] = None
    part_number: Optional[str] = None
    price: Optional[FiniteFloat] = Field(default=None, ge=0)
    notes: Optional[str] = None
    printer_ids: Optional[List[int]] = None
