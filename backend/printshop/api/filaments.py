import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Query
from sqlmodel import select

from printshop.db.session import get_session
from printshop.db.store import RecordStore, without_nulls
from printshop.models.filament import Filament, FilamentCreate, FilamentUpdate
from printshop.models.purchase import PurchaseListItem
from printshop.services.colors import DEFAULT_SIMILARITY_THRESHOLD, filter_by_color
from printshop.services.inventory import (
    clear_minimum_override,
    effective_minimum,
    is_filament_below_threshold,
)
from printshop.services.products import delete_links

logger = logging.getLogger(__name__)
router = APIRouter()

REQUIRED_FIELDS = ("name", "material", "color", "quantity", "minimum_quantity")


def filament_out(filament: Filament) -> Dict[str, Any]:
    return {
        **filament.model_dump(),
        "effective_minimum_quantity": effective_minimum(filament),
        "below_threshold": is_filament_below_threshold(filament),
    }


@router.get("/filaments")
def list_filaments(
    color: Optional[str] = None,
    threshold: float = Query(DEFAULT_SIMILARITY_THRESHOLD, ge=0, le=100),
    low_stock: bool = False,
):
    """List filaments, newest first. ``color`` keeps filaments with a similar color band."""
    session = get_session()
    try:
        filaments = RecordStore(session, Filament).list(Filament.created_at.desc(), Filament.id.desc())
    finally:
        session.close()

    if color:
        try:
            filaments = filter_by_color(filaments, color, threshold)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    if low_stock:
        filaments = [f for f in filaments if is_filament_below_threshold(f)]
    return [filament_out(f) for f in filaments]


@router.get("/manufacturers")
def list_manufacturers():
    session = get_session()
    try:
        rows = session.exec(
            select(Filament.manufacturer).where(Filament.manufacturer.is_not(None)).distinct()
        ).all()
    finally:
        session.close()
    return sorted({m.strip() for m in rows if m and m.strip()})


@router.get("/filaments/{filament_id}")
def get_filament(filament_id: int):
    session = get_session()
    try:
        return filament_out(RecordStore(session, Filament).get(filament_id))
    finally:
        session.close()


@router.post("/filaments", status_code=201)
def create_filament(payload: FilamentCreate):
    session = get_session()
    try:
        filament = RecordStore(session, Filament).create(payload.model_dump())
        return filament_out(filament)
    finally:
        session.close()


@router.put("/filaments/{filament_id}")
def update_filament(filament_id: int, payload: FilamentUpdate):
    """Partial update. An explicit ``minimum_quantity_override: null`` resets to automatic."""
    fields = without_nulls(payload.model_dump(exclude_unset=True), REQUIRED_FIELDS)
    session = get_session()
    try:
        return filament_out(RecordStore(session, Filament).update(filament_id, fields))
    finally:
        session.close()


@router.delete("/filaments/{filament_id}/minimum-override")
def reset_minimum_override(filament_id: int):
    session = get_session()
    try:
        store = RecordStore(session, Filament)
        filament = clear_minimum_override(store.get(filament_id))
        filament = store.update(filament_id, {"minimum_quantity_override": filament.minimum_quantity_override})
        return filament_out(filament)
    finally:
        session.close()


def _adjust_quantity(filament_id: int, delta: int):
    session = get_session()
    try:
        store = RecordStore(session, Filament)
        filament = store.get(filament_id)
        quantity = max(0, (filament.quantity or 0) + delta)
        return filament_out(store.update(filament_id, {"quantity": quantity}))
    finally:
        session.close()


@router.post("/filaments/{filament_id}/increment")
def increment_filament(filament_id: int):
    return _adjust_quantity(filament_id, 1)


@router.post("/filaments/{filament_id}/decrement")
def decrement_filament(filament_id: int):
    return _adjust_quantity(filament_id, -1)


@router.delete("/filaments/{filament_id}", status_code=204)
def delete_filament(filament_id: int):
    """Delete a filament along with its product associations and purchase list entries."""
    session = get_session()
    try:
        store = RecordStore(session, Filament)
        store.get(filament_id)
        delete_links(session, filament_id=filament_id)
        items = session.exec(
            select(PurchaseListItem).where(PurchaseListItem.filament_id == filament_id)
        ).all()
        for item in items:
            session.delete(item)
        store.delete(filament_id)
        logger.info("Filament id=%s deleted, %d purchase list entries removed", filament_id, len(items))
    finally:
        session.close()
