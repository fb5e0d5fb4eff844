import logging

from fastapi import APIRouter

from printshop.db.session import get_session
from printshop.db.store import SettingsStore
from printshop.models.settings import PricingSettings
from printshop.services.validation import Validator

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
def get_settings():
    session = get_session()
    try:
        return SettingsStore(session).get()
    finally:
        session.close()


@router.put("")
def put_settings(settings: PricingSettings):
    """Replace the pricing settings. Omitted knobs go back to their defaults."""
    validation = Validator().validate_settings(settings)
    if not validation["ok"]:
        logger.warning("Saving settings with issues: %s", validation["issues"])
    session = get_session()
    try:
        saved = SettingsStore(session).put(settings)
    finally:
        session.close()
    return {
        **saved.model_dump(),
        "issues": validation["issues"],
        "price_error": validation["price_error"],
    }
