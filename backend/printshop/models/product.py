from datetime import datetime
from typing import Literal, Optional

from pydantic import FiniteFloat
from sqlmodel import SQLModel, Field

from printshop.models.base import utcnow

BUSINESSES = ("Super Fantastic", "Cedar & Sail")
Business = Literal["Super Fantastic", "Cedar & Sail"]


class Product(SQLModel, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    business: str = BUSINESSES[0]
    # legacy grams total, only used when no filaments are attached
    filament_used: float = 0
    print_prep_time: float = 0
    post_processing_time: float = 0
    additional_parts_cost: float = 0
    # 0 means "use the suggested price"
    list_price: float = 0
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ProductFilamentLink(SQLModel, table=True):
    __tablename__ = "product_filaments"

    product_id: int = Field(foreign_key="products.id", primary_key=True)
    filament_id: int = Field(foreign_key="filaments.id", primary_key=True)
    filament_usage_amount: float = 0


class ProductCreate(SQLModel):
    name: str = Field(min_length=1)
    business: Business = BUSINESSES[0]
    filament_used: FiniteFloat = Field(default=0, ge=0)
    print_prep_time: FiniteFloat = Field(default=0, ge=0)
    post_processing_time: FiniteFloat = Field(default=0, ge=0)
    additional_parts_cost: FiniteFloat = Field(default=0, ge=0)
    list_price: FiniteFloat = Field(default=0, ge=0)
    notes: Optional[str] = None


class ProductUpdate(SQLModel):
    name: Optional[str] = Field(default=None, min_length=1)
    business: Optional[Business] = None
    filament_used: Optional[FiniteFloat] = Field(default=None, ge=0)
    print_prep_time: Optional[FiniteFloat] = Field(default=None, ge=0)
    post_processing_time: Optional[FiniteFloat] = Field(default=None, ge=0)
    additional_parts_cost: Optional[FiniteFloat] = Field(default=None, ge=0)
    list_price: Optional[FiniteFloat] = Field(default=None, ge=0)
    notes: Optional[str] = None


class FilamentAttach(SQLModel):
    filament_id: int
    filament_usage_amount: FiniteFloat = Field(default=0, ge=0)


class FilamentUsageUpdate(SQLModel):
    filament_usage_amount: FiniteFloat = Field(ge=0)
