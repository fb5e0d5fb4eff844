"""
conftest.py — Shared pytest fixtures for the print shop backend tests.

Pure unit tests use plain namespaces for products and ``PricingSettings``
for settings. API tests get a ``client`` bound to a fresh SQLite file per
test.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``printshop.*`` imports resolve regardless of where pytest is invoked.
"""

import os
import sys
from types import SimpleNamespace

import pytest

_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)


# ---------------------------------------------------------------------------
# Costing fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def scenario_settings():
    """
    Settings from the worked pricing example:
      hourly 20, wear & tear 5%, fees 7%, spool 18/kg, margin 55%, packaging 0.5
    """
    from printshop.models.settings import PricingSettings
    return PricingSettings(
        hourly_rate=20,
        wear_tear_markup=5,
        platform_fees=7,
        filament_spool_price=18,
        desired_profit_margin=55,
        packaging_cost=0.5,
    )


def make_product(**overrides):
    fields = {
        "print_prep_time": 0,
        "post_processing_time": 0,
        "additional_parts_cost": 0,
        "list_price": 0,
        "filament_used": 0,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


@pytest.fixture
def scenario_product():
    """10 min prep, 5 min post-processing, 0.5 in extra parts, no list price."""
    return make_product(print_prep_time=10, post_processing_time=5, additional_parts_cost=0.5)


@pytest.fixture
def engine():
    from printshop.services.costing import CostingEngine
    return CostingEngine()


# ---------------------------------------------------------------------------
# API fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def client(tmp_path, monkeypatch):
    """TestClient against a throwaway SQLite database."""
    from fastapi.testclient import TestClient
    from printshop.db import session as db_session

    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'printshop.db'}")
    db_session.reset_engine()

    from printshop.main import app
    with TestClient(app) as test_client:
        yield test_client

    db_session.reset_engine()
