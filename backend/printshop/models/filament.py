from datetime import datetime
from typing import Optional

from pydantic import FiniteFloat, field_validator
from sqlmodel import SQLModel, Field

from printshop.models.base import utcnow
from printshop.services.colors import hex_to_rgb

MATERIAL_TYPES = (
    "ABS",
    "ABS-GF",
    "ASA",
    "PAHT-CF",
    "PC",
    "PETG",
    "PETG-CF",
    "PLA",
    "PLA+WOOD",
    "PVA",
    "TPU",
    "Other",
)

# reorder floor for new spools when the caller does not give one
DEFAULT_MINIMUM_QUANTITY = 1


class Filament(SQLModel, table=True):
    __tablename__ = "filaments"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    material: str
    color: str
    color2: Optional[str] = None
    color3: Optional[str] = None
    quantity: int = 0
    minimum_quantity: int = DEFAULT_MINIMUM_QUANTITY
    # None means "automatic": minimum_quantity applies
    minimum_quantity_override: Optional[int] = None
    manufacturer: Optional[str] = None
    # currency per kg; None falls back to the spool price setting
    cost: Optional[float] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


def _check_material(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in MATERIAL_TYPES:
        raise ValueError(f"unsupported material: {value}")
    return value


def _check_color(value: Optional[str]) -> Optional[str]:
    if value:
        hex_to_rgb(value)
    return value or None


class FilamentCreate(SQLModel):
    name: str = Field(min_length=1)
    material: str
    color: str = Field(min_length=1)
    color2: Optional[str] = None
    color3: Optional[str] = None
    quantity: int = Field(default=0, ge=0)
    minimum_quantity: int = Field(default=DEFAULT_MINIMUM_QUANTITY, ge=0)
    minimum_quantity_override: Optional[int] = Field(default=None, ge=0)
    manufacturer: Optional[str] = None
    cost: Optional[FiniteFloat] = Field(default=None, ge=0)
    notes: Optional[str] = None

    @field_validator("material")
    @classmethod
    def check_material(cls, value):
        return _check_material(value)

    @field_validator("color", "color2", "color3")
    @classmethod
    def check_color(cls, value):
        return _check_color(value)


class FilamentUpdate(SQLModel):
    name: Optional[str] = Field(default=None, min_length=1)
    material: Optional[str] = None
    color: Optional[str] = Field(default=None, min_length=1)
    color2: Optional[str] = None
    color3: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    minimum_quantity: Optional[int] = Field(default=None, ge=0)
    minimum_quantity_override: Optional[int] = Field(default=None, ge=0)
    manufacturer: Optional[str] = None
    cost: Optional[FiniteFloat] = Field(default=None, ge=0)
    notes: Optional[str] = None

    @field_validator("material")
    @classmethod
    def check_material(cls, value):
        return _check_material(value)

    @field_validator("color", "color2", "color3")
    @classmethod
    def check_color(cls, value):
        return _check_color(value)
