import logging
from typing import Any, Dict

from fastapi import APIRouter
from sqlmodel import Session

from printshop.db.session import get_session
from printshop.db.store import RecordStore, without_nulls
from printshop.models.printer import (
    Printer,
    PrintQueueCreate,
    PrintQueueItem,
    PrintQueueUpdate,
    QueueOrder,
)
from printshop.services import queue

logger = logging.getLogger(__name__)
router = APIRouter()


def item_out(session: Session, item: PrintQueueItem) -> Dict[str, Any]:
    printer = session.get(Printer, item.printer_id) if item.printer_id is not None else None
    return {**item.model_dump(), "printer": printer.model_dump() if printer else None}


@router.get("")
def list_queue():
    session = get_session()
    try:
        return [item_out(session, item) for item in queue.ordered_queue(session)]
    finally:
        session.close()


@router.post("", status_code=201)
def add_queue_item(payload: PrintQueueCreate):
    session = get_session()
    try:
        if payload.printer_id is not None:
            RecordStore(session, Printer).get(payload.printer_id)
        fields = {**payload.model_dump(), "position": queue.next_position(session)}
        item = RecordStore(session, PrintQueueItem, "Print queue item").create(fields)
        logger.info("Queued %r at position %s", item.item_name, item.position)
        return item_out(session, item)
    finally:
        session.close()


@router.put("/reorder")
def reorder_queue(order: QueueOrder):
    """Apply a full drag-and-drop order in one transaction."""
    session = get_session()
    try:
        return [item_out(session, item) for item in queue.reorder(session, order.ids)]
    finally:
        session.close()


@router.put("/{item_id}")
def update_queue_item(item_id: int, payload: PrintQueueUpdate):
    fields = without_nulls(payload.model_dump(exclude_unset=True), ("item_name", "status"))
    session = get_session()
    try:
        if fields.get("printer_id") is not None:
            RecordStore(session, Printer).get(fields["printer_id"])
        item = RecordStore(session, PrintQueueItem, "Print queue item").update(item_id, fields)
        return item_out(session, item)
    finally:
        session.close()


@router.delete("/{item_id}", status_code=204)
def delete_queue_item(item_id: int):
    session = get_session()
    try:
        RecordStore(session, PrintQueueItem, "Print queue item").delete(item_id)
    finally:
        session.close()
