import logging
from typing import Any, Dict, List

from fastapi import APIRouter
from sqlmodel import Session, select

from printshop.db.session import get_session
from printshop.db.store import RecordStore, without_nulls
from printshop.models.part import Part, PartCreate, PartPrinterLink, PartUpdate
from printshop.models.printer import Printer
from printshop.services.inventory import is_part_below_threshold

logger = logging.getLogger(__name__)
router = APIRouter()

REQUIRED_FIELDS = ("name", "quantity", "minimum_quantity")


def _printer_ids(session: Session, part_id: int) -> List[int]:
    rows = session.exec(
        select(PartPrinterLink.printer_id)
        .where(PartPrinterLink.part_id == part_id)
        .order_by(PartPrinterLink.printer_id)
    ).all()
    return list(rows)


def _set_printers(session: Session, part_id: int, printer_ids: List[int]) -> None:
    printers = RecordStore(session, Printer)
    wanted = []
    for printer_id in printer_ids:
        printers.get(printer_id)
        if printer_id not in wanted:
            wanted.append(printer_id)
    for link in session.exec(select(PartPrinterLink).where(PartPrinterLink.part_id == part_id)).all():
        session.delete(link)
    for printer_id in wanted:
        session.add(PartPrinterLink(part_id=part_id, printer_id=printer_id))
    session.commit()
    logger.info("Part id=%s fits printers %s", part_id, wanted)


def part_out(session: Session, part: Part) -> Dict[str, Any]:
    return {
        **part.model_dump(),
        "printer_ids": _printer_ids(session, part.id),
        "below_threshold": is_part_below_threshold(part),
    }


@router.get("/parts")
def list_parts(low_stock: bool = False):
    session = get_session()
    try:
        parts = RecordStore(session, Part).list(Part.name, Part.id)
        if low_stock:
            parts = [p for p in parts if is_part_below_threshold(p)]
        return [part_out(session, p) for p in parts]
    finally:
        session.close()


@router.get("/parts/{part_id}")
def get_part(part_id: int):
    session = get_session()
    try:
        return part_out(session, RecordStore(session, Part).get(part_id))
    finally:
        session.close()


@router.post("/parts", status_code=201)
def create_part(payload: PartCreate):
    fields = payload.model_dump(exclude={"printer_ids"})
    session = get_session()
    try:
        for printer_id in payload.printer_ids:
            RecordStore(session, Printer).get(printer_id)
        part = RecordStore(session, Part).create(fields)
        if payload.printer_ids:
            _set_printers(session, part.id, payload.printer_ids)
            session.refresh(part)
        return part_out(session, part)
    finally:
        session.close()


@router.put("/parts/{part_id}")
def update_part(part_id: int, payload: PartUpdate):
    fields = without_nulls(payload.model_dump(exclude_unset=True), REQUIRED_FIELDS)
    printer_ids = fields.pop("printer_ids", None)
    session = get_session()
    try:
        store = RecordStore(session, Part)
        store.get(part_id)
        if printer_ids is not None:
            _set_printers(session, part_id, printer_ids)
        part = store.update(part_id, fields)
        return part_out(session, part)
    finally:
        session.close()


def _adjust_quantity(part_id: int, delta: int):
    session = get_session()
    try:
        store = RecordStore(session, Part)
        part = store.get(part_id)
        part = store.update(part_id, {"quantity": max(0, (part.quantity or 0) + delta)})
        return part_out(session, part)
    finally:
        session.close()


@router.post("/parts/{part_id}/increment")
def increment_part(part_id: int):
    return _adjust_quantity(part_id, 1)


@router.post("/parts/{part_id}/decrement")
def decrement_part(part_id: int):
    return _adjust_quantity(part_id, -1)


@router.delete("/parts/{part_id}", status_code=204)
def delete_part(part_id: int):
    session = get_session()
    try:
        store = RecordStore(session, Part)
        store.get(part_id)
        for link in session.exec(select(PartPrinterLink).where(PartPrinterLink.part_id == part_id)).all():
            session.delete(link)
        store.delete(part_id)
    finally:
        session.close()
