from sqlmodel import create_engine, Session
from sqlalchemy.engine import make_url
import logging
import os
import threading

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./database/printshop.db"

_engine = None
_engine_lock = threading.Lock()


def _database_url() -> str:
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def _echo() -> bool:
    return os.getenv("SQL_ECHO", "").lower() in ("1", "true", "yes")


def _create_engine():
    url = _database_url()
    connect_args = {}
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        # FastAPI runs sync routes in a threadpool
        connect_args["check_same_thread"] = False
        if parsed.database and parsed.database != ":memory:":
            os.makedirs(os.path.dirname(os.path.abspath(parsed.database)), exist_ok=True)
    engine = create_engine(url, echo=_echo(), connect_args=connect_args)
    logger.info("Database engine created url=%s", parsed.render_as_string(hide_password=True))
    return engine


def get_engine():
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = _create_engine()
    return _engine


def reset_engine() -> None:
    """Dispose the cached engine so the next call picks up a new DATABASE_URL."""
    global _engine
    with _engine_lock:
        if _engine is not None:
            _engine.dispose()
        _engine = None


def get_session() -> Session:
    return Session(get_engine())
