from fastapi import APIRouter
from sqlmodel import select

from printshop.db.session import get_session
from printshop.db.store import RecordStore
from printshop.models.part import PartPrinterLink
from printshop.models.printer import Printer, PrinterCreate, PrintQueueItem
from printshop.models.base import utcnow

router = APIRouter()


@router.get("/printers")
def list_printers():
    session = get_session()
    try:
        return RecordStore(session, Printer).list(Printer.name, Printer.id)
    finally:
        session.close()


@router.get("/printers/{printer_id}")
def get_printer(printer_id: int):
    session = get_session()
    try:
        return RecordStore(session, Printer).get(printer_id)
    finally:
        session.close()


@router.post("/printers", status_code=201)
def create_printer(payload: PrinterCreate):
    session = get_session()
    try:
        return RecordStore(session, Printer).create(payload.model_dump())
    finally:
        session.close()


@router.put("/printers/{printer_id}")
def update_printer(printer_id: int, payload: PrinterCreate):
    session = get_session()
    try:
        return RecordStore(session, Printer).update(printer_id, payload.model_dump())
    finally:
        session.close()


@router.delete("/printers/{printer_id}", status_code=204)
def delete_printer(printer_id: int):
    """Delete a printer; parts lose the link and queue items become unassigned."""
    session = get_session()
    try:
        store = RecordStore(session, Printer)
        store.get(printer_id)
        for link in session.exec(select(PartPrinterLink).where(PartPrinterLink.printer_id == printer_id)).all():
            session.delete(link)
        now = utcnow()
        for item in session.exec(select(PrintQueueItem).where(PrintQueueItem.printer_id == printer_id)).all():
            item.printer_id = None
            item.updated_at = now
            session.add(item)
        store.delete(printer_id)
    finally:
        session.close()
