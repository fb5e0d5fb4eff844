import logging
from typing import Any, Dict

from fastapi import APIRouter
from sqlmodel import Session, select

from printshop.api.filaments import filament_out
from printshop.db.session import get_session
from printshop.db.store import RecordStore, without_nulls
from printshop.models.filament import Filament
from printshop.models.purchase import PurchaseItemCreate, PurchaseItemUpdate, PurchaseListItem
from printshop.services.inventory import low_stock_purchase_plan

logger = logging.getLogger(__name__)
router = APIRouter()

LABEL = "Purchase list item"


def item_out(session: Session, item: PurchaseListItem) -> Dict[str, Any]:
    filament = session.get(Filament, item.filament_id)
    return {**item.model_dump(), "filament": filament_out(filament) if filament else None}


@router.get("")
def list_purchase_items():
    session = get_session()
    try:
        items = RecordStore(session, PurchaseListItem, LABEL).list(
            PurchaseListItem.ordered, PurchaseListItem.created_at, PurchaseListItem.id
        )
        return [item_out(session, item) for item in items]
    finally:
        session.close()


@router.post("", status_code=201)
def add_purchase_item(payload: PurchaseItemCreate):
    session = get_session()
    try:
        RecordStore(session, Filament).get(payload.filament_id)
        item = RecordStore(session, PurchaseListItem, LABEL).create(payload.model_dump())
        return item_out(session, item)
    finally:
        session.close()


@router.post("/from-low-stock", status_code=201)
def add_low_stock_filaments():
    """Queue every low filament that is not already waiting on an order."""
    session = get_session()
    try:
        filaments = RecordStore(session, Filament).list(Filament.name, Filament.id)
        open_ids = session.exec(
            select(PurchaseListItem.filament_id).where(PurchaseListItem.ordered == False)  # noqa: E712
        ).all()
        store = RecordStore(session, PurchaseListItem, LABEL)
        created = []
        for filament, quantity in low_stock_purchase_plan(filaments, open_ids):
            created.append(store.create({"filament_id": filament.id, "quantity": quantity}))
        logger.info("Added %d low-stock filaments to the purchase list", len(created))
        return [item_out(session, item) for item in created]
    finally:
        session.close()


@router.put("/{item_id}")
def update_purchase_item(item_id: int, payload: PurchaseItemUpdate):
    fields = without_nulls(payload.model_dump(exclude_unset=True), ("quantity", "ordered"))
    session = get_session()
    try:
        item = RecordStore(session, PurchaseListItem, LABEL).update(item_id, fields)
        return item_out(session, item)
    finally:
        session.close()


@router.delete("/{item_id}", status_code=204)
def delete_purchase_item(item_id: int):
    session = get_session()
    try:
        RecordStore(session, PurchaseListItem, LABEL).delete(item_id)
    finally:
        session.close()
