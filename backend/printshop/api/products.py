import logging
import math
from typing import Any, Dict, List, Optional

from fastapi import APIRouter
from sqlmodel import Session

from printshop.api.filaments import filament_out
from printshop.db.session import get_session
from printshop.db.store import RecordStore, SettingsStore, without_nulls
from printshop.models.product import (
    FilamentAttach,
    FilamentUsageUpdate,
    Product,
    ProductCreate,
    ProductUpdate,
)
from printshop.services import products as catalog
from printshop.services.costing import CostBreakdown, markup_percent

logger = logging.getLogger(__name__)
router = APIRouter()

REQUIRED_FIELDS = (
    "name",
    "business",
    "filament_used",
    "print_prep_time",
    "post_processing_time",
    "additional_parts_cost",
    "list_price",
)


def _finite_or_none(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def breakdown_out(breakdown: CostBreakdown) -> Dict[str, Any]:
    """JSON-safe breakdown: non-finite figures become null, ``error`` says why."""
    out = {}
    for key, value in breakdown.to_dict().items():
        out[key] = _finite_or_none(value) if isinstance(value, float) else value
    return out


def product_out(product: Product, rows: catalog.UsageRows, settings) -> Dict[str, Any]:
    breakdown = catalog.price_product(product, rows, settings)
    filaments = [
        {**filament_out(filament), "filament_usage_amount": grams}
        for filament, grams in rows
    ]
    return {
        **product.model_dump(),
        "filaments": filaments,
        "breakdown": breakdown_out(breakdown),
        "markup": _finite_or_none(markup_percent(product.list_price, breakdown)),
    }


def _load_one(session: Session, product_id: int) -> Dict[str, Any]:
    product = RecordStore(session, Product).get(product_id)
    rows = catalog.load_filament_usage(session, [product.id])[product.id]
    return product_out(product, rows, SettingsStore(session).get())


@router.get("")
def list_products(business: Optional[str] = None):
    """Every product with its breakdown under the current settings."""
    session = get_session()
    try:
        products: List[Product] = RecordStore(session, Product).list(Product.name, Product.id)
        if business:
            products = [p for p in products if p.business == business]
        usage = catalog.load_filament_usage(session, [p.id for p in products])
        settings = SettingsStore(session).get()
        return [product_out(p, usage[p.id], settings) for p in products]
    finally:
        session.close()


@router.get("/{product_id}")
def get_product(product_id: int):
    session = get_session()
    try:
        return _load_one(session, product_id)
    finally:
        session.close()


@router.post("", status_code=201)
def create_product(payload: ProductCreate):
    session = get_session()
    try:
        product = RecordStore(session, Product).create(payload.model_dump())
        return _load_one(session, product.id)
    finally:
        session.close()


@router.put("/{product_id}")
def update_product(product_id: int, payload: ProductUpdate):
    fields = without_nulls(payload.model_dump(exclude_unset=True), REQUIRED_FIELDS)
    session = get_session()
    try:
        RecordStore(session, Product).update(product_id, fields)
        return _load_one(session, product_id)
    finally:
        session.close()


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: int):
    session = get_session()
    try:
        store = RecordStore(session, Product)
        store.get(product_id)
        catalog.delete_links(session, product_id=product_id)
        store.delete(product_id)
        logger.info("Product id=%s deleted with its filament links", product_id)
    finally:
        session.close()


@router.post("/{product_id}/filaments", status_code=201)
def attach_filament(product_id: int, payload: FilamentAttach):
    session = get_session()
    try:
        catalog.attach_filament(session, product_id, payload.filament_id, payload.filament_usage_amount)
        return _load_one(session, product_id)
    finally:
        session.close()


@router.put("/{product_id}/filaments/{filament_id}")
def set_filament_usage(product_id: int, filament_id: int, payload: FilamentUsageUpdate):
    session = get_session()
    try:
        catalog.set_filament_usage(session, product_id, filament_id, payload.filament_usage_amount)
        return _load_one(session, product_id)
    finally:
        session.close()


@router.delete("/{product_id}/filaments/{filament_id}")
def detach_filament(product_id: int, filament_id: int):
    session = get_session()
    try:
        catalog.detach_filament(session, product_id, filament_id)
        return _load_one(session, product_id)
    finally:
        session.close()
