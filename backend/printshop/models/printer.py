from datetime import datetime
from typing import Literal, Optional

from sqlmodel import SQLModel, Field

from printshop.models.base import utcnow

QueueStatus = Literal["pending", "in_progress", "completed"]


class Printer(SQLModel, table=True):
    __tablename__ = "printers"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class PrinterCreate(SQLModel):
    name: str = Field(min_length=1)


class PrintQueueItem(SQLModel, table=True):
    __tablename__ = "print_queue"

    id: Optional[int] = Field(default=None, primary_key=True)
    item_name: str
    printer_id: Optional[int] = Field(default=None, foreign_key="printers.id")
    color: Optional[str] = None
    status: str = "pending"
    position: int = 0
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class PrintQueueCreate(SQLModel):
    item_name: str = Field(min_length=1)
    printer_id: Optional[int] = None
    color: Optional[str] = None
    status: QueueStatus = "pending"


class PrintQueueUpdate(SQLModel):
    item_name: Optional[str] = Field(default=None, min_length=1)
    printer_id: Optional[int] = None
    color: Optional[str] = None
    status: Optional[QueueStatus] = None


class QueueOrder(SQLModel):
    ids: list[int]
