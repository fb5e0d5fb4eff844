"""Product/filament associations and per-product pricing."""
import logging
from typing import Dict, Iterable, List, Tuple

from sqlmodel import Session, select

from printshop.db.store import NotFoundError, RecordStore
from printshop.models.filament import Filament
from printshop.models.product import Product, ProductFilamentLink
from printshop.services.costing import CostBreakdown, CostingEngine, FilamentUsage

logger = logging.getLogger(__name__)

UsageRows = List[Tuple[Filament, float]]


def load_filament_usage(session: Session, product_ids: Iterable[int]) -> Dict[int, UsageRows]:
    """Attached filaments with their usage grams, keyed by product id.

    Links whose filament has gone away are skipped.
    """
    ids = list(product_ids)
    usage: Dict[int, UsageRows] = {pid: [] for pid in ids}
    if not ids:
        return usage
    statement = (
        select(ProductFilamentLink, Filament)
        .join(Filament, Filament.id == ProductFilamentLink.filament_id)
        .where(ProductFilamentLink.product_id.in_(ids))
        .order_by(ProductFilamentLink.product_id, Filament.id)
    )
    for link, filament in session.exec(statement).all():
        usage[link.product_id].append((filament, link.filament_usage_amount))
    return usage


def to_usages(rows: UsageRows) -> List[FilamentUsage]:
    return [
        FilamentUsage(filament_usage_amount=grams, cost=filament.cost, filament_id=filament.id)
        for filament, grams in rows
    ]


def price_product(product: Product, rows: UsageRows, settings, engine: CostingEngine = None) -> CostBreakdown:
    engine = engine or CostingEngine()
    return engine.compute(product, to_usages(rows), settings)


def _link(session: Session, product_id: int, filament_id: int):
    return session.get(ProductFilamentLink, (product_id, filament_id))


def attach_filament(session: Session, product_id: int, filament_id: int, grams: float) -> ProductFilamentLink:
    """Attach a filament to a product, or update its usage if already attached."""
    RecordStore(session, Product).get(product_id)
    RecordStore(session, Filament).get(filament_id)
    link = _link(session, product_id, filament_id)
    if link is None:
        link = ProductFilamentLink(product_id=product_id, filament_id=filament_id)
    link.filament_usage_amount = grams
    session.add(link)
    session.commit()
    session.refresh(link)
    logger.info("Product id=%s uses filament id=%s grams=%s", product_id, filament_id, grams)
    return link


def set_filament_usage(session: Session, product_id: int, filament_id: int, grams: float) -> ProductFilamentLink:
    link = _link(session, product_id, filament_id)
    if link is None:
        raise NotFoundError("Product filament", (product_id, filament_id))
    link.filament_usage_amount = grams
    session.add(link)
    session.commit()
    session.refresh(link)
    return link


def detach_filament(session: Session, product_id: int, filament_id: int) -> None:
    link = _link(session, product_id, filament_id)
    if link is None:
        raise NotFoundError("Product filament", (product_id, filament_id))
    session.delete(link)
    session.commit()
    logger.info("Product id=%s no longer uses filament id=%s", product_id, filament_id)


def delete_links(session: Session, product_id: int = None, filament_id: int = None) -> None:
    """Remove association rows for a product or a filament (no commit)."""
    statement = select(ProductFilamentLink)
    if product_id is not None:
        statement = statement.where(ProductFilamentLink.product_id == product_id)
    if filament_id is not None:
        statement = statement.where(ProductFilamentLink.filament_id == filament_id)
    for link in session.exec(statement).all():
        session.delete(link)
