import logging
from typing import List, Sequence

from sqlmodel import Session, select, func

from printshop.models.base import utcnow
from printshop.models.printer import PrintQueueItem
from printshop.services.validation import ValidationError

logger = logging.getLogger(__name__)


def ordered_queue(session: Session) -> List[PrintQueueItem]:
    statement = select(PrintQueueItem).order_by(PrintQueueItem.position, PrintQueueItem.id)
    return list(session.exec(statement).all())


def next_position(session: Session) -> int:
    highest = session.exec(select(func.max(PrintQueueItem.position))).one()
    if isinstance(highest, tuple):
        highest = highest[0]
    return 0 if highest is None else int(highest) + 1


def reorder(session: Session, ordered_ids: Sequence[int]) -> List[PrintQueueItem]:
    """Assign positions 0..n-1 following ``ordered_ids`` in a single commit.

    The list must name every queue item exactly once; otherwise nothing changes.
    """
    items = {item.id: item for item in ordered_queue(session)}
    ids = list(ordered_ids)
    if len(set(ids)) != len(ids):
        raise ValidationError("duplicate ids in queue order")
    unknown = [i for i in ids if i not in items]
    if unknown:
        raise ValidationError(f"unknown queue item ids: {unknown}")
    missing = sorted(set(items) - set(ids))
    if missing:
        raise ValidationError(f"queue order is missing ids: {missing}")

    now = utcnow()
    for position, item_id in enumerate(ids):
        item = items[item_id]
        if item.position != position:
            item.position = position
            item.updated_at = now
            session.add(item)
    session.commit()
    logger.info("Print queue reordered: %s", ids)
    return ordered_queue(session)
