"""Key-based record access over a SQLModel session.

Each operation commits on its own; callers own the session and close it.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Type

from pydantic import ValidationError
from sqlmodel import SQLModel, Session, select

from printshop.models.base import utcnow
from printshop.models.settings import PricingSettings, SettingEntry

logger = logging.getLogger(__name__)

# never taken from an update payload
IMMUTABLE_FIELDS = ("id", "created_at", "updated_at")


class NotFoundError(LookupError):
    def __init__(self, entity: str, record_id: Any):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} not found")


def without_nulls(fields: Dict[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    """Drop explicit nulls for columns that cannot be cleared."""
    keys = set(keys)
    return {k: v for k, v in fields.items() if not (k in keys and v is None)}


class RecordStore:
    def __init__(self, session: Session, model: Type[SQLModel], label: Optional[str] = None):
        self.session = session
        self.model = model
        self.label = label or model.__name__

    def list(self, *order_by) -> List[SQLModel]:
        statement = select(self.model)
        if order_by:
            statement = statement.order_by(*order_by)
        return list(self.session.exec(statement).all())

    def find(self, record_id) -> Optional[SQLModel]:
        return self.session.get(self.model, record_id)

    def get(self, record_id) -> SQLModel:
        record = self.find(record_id)
        if record is None:
            logger.warning("%s id=%s not found", self.label, record_id)
            raise NotFoundError(self.label, record_id)
        return record

    def create(self, fields: Dict[str, Any]) -> SQLModel:
        record = self.model(**fields)
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        logger.info("Created %s id=%s", self.label, getattr(record, "id", None))
        return record

    def update(self, record_id, fields: Dict[str, Any]) -> SQLModel:
        record = self.get(record_id)
        for key, value in fields.items():
            if key in IMMUTABLE_FIELDS or not hasattr(record, key):
                continue
            setattr(record, key, value)
        if hasattr(record, "updated_at"):
            record.updated_at = utcnow()
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        logger.info("Updated %s id=%s fields=%s", self.label, record_id, sorted(fields))
        return record

    def delete(self, record_id) -> None:
        record = self.get(record_id)
        self.session.delete(record)
        self.session.commit()
        logger.info("Deleted %s id=%s", self.label, record_id)


def format_decimal(value: float) -> str:
    # repr of a float parses back to the same float
    return repr(float(value))


class SettingsStore:
    """Pricing settings kept as one decimal-string row per knob."""

    def __init__(self, session: Session):
        self.session = session

    def get(self) -> PricingSettings:
        rows = self.session.exec(select(SettingEntry)).all()
        stored = {}
        for row in rows:
            if row.key not in PricingSettings.model_fields:
                continue
            # each knob is checked alone so one bad row only loses that knob
            try:
                parsed = PricingSettings(**{row.key: row.value})
            except ValidationError:
                logger.warning("Ignoring invalid setting %s=%r", row.key, row.value)
                continue
            stored[row.key] = getattr(parsed, row.key)
        return PricingSettings(**stored)

    def put(self, settings: PricingSettings) -> PricingSettings:
        now = utcnow()
        values = settings.model_dump()
        existing = {row.key: row for row in self.session.exec(select(SettingEntry)).all()}
        for key, value in values.items():
            row = existing.get(key)
            if row is None:
                row = SettingEntry(key=key, value=format_decimal(value), updated_at=now)
            else:
                row.value = format_decimal(value)
                row.updated_at = now
            self.session.add(row)
        self.session.commit()
        logger.info("Settings replaced: %s", values)
        return self.get()
