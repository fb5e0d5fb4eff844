from datetime import datetime

from pydantic import FiniteFloat
from sqlmodel import SQLModel, Field

from printshop.models.base import utcnow


class SettingEntry(SQLModel, table=True):
    """One pricing knob, stored as a decimal string."""

    __tablename__ = "settings"

    key: str = Field(primary_key=True)
    value: str
    updated_at: datetime = Field(default_factory=utcnow)


class PricingSettings(SQLModel):
    hourly_rate: FiniteFloat = Field(default=20.0, ge=0)
    wear_tear_markup: FiniteFloat = Field(default=5.0, ge=0)
    platform_fees: FiniteFloat = Field(default=7.0, ge=0)
    filament_spool_price: FiniteFloat = Field(default=18.0, ge=0)
    desired_profit_margin: FiniteFloat = Field(default=55.0, ge=0)
    packaging_cost: FiniteFloat = Field(default=0.5, ge=0)
    spool_weight: FiniteFloat = Field(default=1000.0, ge=0)
    # informational only, not part of the profit formula
    filament_markup: FiniteFloat = Field(default=20.0, ge=0)
