"""
test_costing.py — Unit tests for the product costing engine.

Covers the worked pricing example, fallbacks (no filaments, no time, no
list price), the margin/fee misconfiguration, and the ordering properties
the breakdown must keep (idempotence, monotonicity, ad budget floor).
"""

import math

import pytest

from conftest import make_product
from printshop.models.settings import PricingSettings
from printshop.services.costing import (
    PRICE_UNDEFINED,
    CostingEngine,
    FilamentUsage,
    compute,
    markup_percent,
)


def _settings(scenario_settings, **changes):
    return scenario_settings.model_copy(update=changes)


# ===========================================================================
# Worked example
# ===========================================================================

class TestWorkedExample:

    def test_every_intermediate(self, engine, scenario_product, scenario_settings):
        b = engine.compute(scenario_product, [FilamentUsage(50)], scenario_settings)

        assert b.labor_cost == pytest.approx(5.0)
        assert b.filament_cost == pytest.approx(0.9)
        assert b.wear_tear_cost == pytest.approx(0.045)
        assert b.total_cost == pytest.approx(6.945)
        assert b.suggested_price == pytest.approx(6.945 / 0.38)
        assert b.selling_price == pytest.approx(18.276, abs=1e-3)
        assert b.platform_fee_amount == pytest.approx(1.279, abs=1e-3)
        assert b.gross_profit == pytest.approx(10.052, abs=1e-3)
        assert b.profit_margin == pytest.approx(55.0, abs=0.01)
        assert b.filament_used == 50
        assert b.error is None

    def test_margin_hits_target_so_no_ad_budget(self, engine, scenario_product, scenario_settings):
        b = engine.compute(scenario_product, [FilamentUsage(50)], scenario_settings)
        assert b.advertising_budget == pytest.approx(0.0, abs=1e-9)

    def test_module_level_compute_matches_engine(self, engine, scenario_product, scenario_settings):
        usages = [FilamentUsage(50)]
        assert compute(scenario_product, usages, scenario_settings) == engine.compute(
            scenario_product, usages, scenario_settings
        )


# ===========================================================================
# Filament costing
# ===========================================================================

class TestFilamentCost:

    def test_own_cost_overrides_spool_price(self, engine, scenario_settings):
        b = engine.compute(make_product(), [FilamentUsage(200, cost=30)], scenario_settings)
        assert b.filament_cost == pytest.approx(6.0)

    def test_zero_cost_is_honoured(self, engine, scenario_settings):
        b = engine.compute(make_product(), [FilamentUsage(200, cost=0)], scenario_settings)
        assert b.filament_cost == 0

    def test_sums_over_several_filaments(self, engine, scenario_settings):
        usages = [FilamentUsage(100), FilamentUsage(250, cost=24), FilamentUsage(0, cost=99)]
        b = engine.compute(make_product(), usages, scenario_settings)
        assert b.filament_used == 350
        assert b.filament_cost == pytest.approx(0.1 * 18 + 0.25 * 24)

    def test_legacy_grams_used_without_filaments(self, engine, scenario_settings):
        b = engine.compute(make_product(filament_used=120), [], scenario_settings)
        assert b.filament_used == 120
        assert b.filament_cost == pytest.approx(0.12 * 18)

    def test_attached_filaments_win_over_legacy_grams(self, engine, scenario_settings):
        b = engine.compute(make_product(filament_used=999), [FilamentUsage(10)], scenario_settings)
        assert b.filament_used == 10

    def test_wear_and_tear_is_share_of_filament_cost(self, engine, scenario_settings):
        settings = _settings(scenario_settings, wear_tear_markup=10)
        b = engine.compute(make_product(), [FilamentUsage(1000)], settings)
        assert b.wear_tear_cost == pytest.approx(1.8)


# ===========================================================================
# Fallbacks and edge cases
# ===========================================================================

class TestEdgeCases:

    def test_nothing_but_parts_and_packaging(self, engine, scenario_settings):
        product = make_product(additional_parts_cost=2.25)
        b = engine.compute(product, [], scenario_settings)
        assert b.total_cost == pytest.approx(2.25 + 0.5)
        assert b.labor_cost == 0
        assert b.filament_cost == 0

    def test_list_price_takes_precedence(self, engine, scenario_product, scenario_settings):
        product = make_product(print_prep_time=10, post_processing_time=5, list_price=25)
        b = engine.compute(product, [FilamentUsage(50)], scenario_settings)
        assert b.selling_price == 25
        assert b.platform_fee_amount == pytest.approx(1.75)
        assert b.gross_profit == pytest.approx(25 - b.total_cost - 1.75)
        assert b.profit_margin == pytest.approx(b.gross_profit / 25 * 100)

    def test_ad_budget_when_list_price_beats_target(self, engine, scenario_settings):
        product = make_product(list_price=100)
        b = engine.compute(product, [], scenario_settings)
        # total 0.5, fees 7, profit 92.5, target profit 55
        assert b.advertising_budget == pytest.approx(37.5)

    def test_zero_cost_zero_price(self, engine):
        settings = PricingSettings(
            hourly_rate=0, wear_tear_markup=0, platform_fees=0,
            filament_spool_price=0, desired_profit_margin=0, packaging_cost=0,
        )
        b = engine.compute(make_product(), [], settings)
        assert b.total_cost == 0
        assert b.selling_price == 0
        assert b.profit_margin == 0
        assert b.advertising_budget == 0


# ===========================================================================
# Misconfigured margin + fees
# ===========================================================================

class TestPriceUndefined:

    @pytest.mark.parametrize("margin,fees", [(93, 7), (95, 10), (100, 0)])
    def test_suggested_price_is_infinite(self, engine, scenario_product, scenario_settings, margin, fees):
        settings = _settings(scenario_settings, desired_profit_margin=margin, platform_fees=fees)
        b = engine.compute(scenario_product, [FilamentUsage(50)], settings)
        assert b.error == PRICE_UNDEFINED
        assert math.isinf(b.suggested_price)
        assert not b.has_finite_price
        assert math.isnan(b.selling_price)
        assert math.isnan(b.profit_margin)
        assert math.isnan(b.advertising_budget)
        # cost side keeps rendering
        assert b.total_cost == pytest.approx(6.945)

    def test_list_price_still_priced(self, engine, scenario_settings):
        settings = _settings(scenario_settings, desired_profit_margin=95, platform_fees=10)
        b = engine.compute(make_product(list_price=40), [], settings)
        assert b.error == PRICE_UNDEFINED
        assert math.isinf(b.suggested_price)
        assert b.selling_price == 40
        assert b.platform_fee_amount == pytest.approx(4.0)
        assert b.has_finite_price


# ===========================================================================
# Properties
# ===========================================================================

class TestProperties:

    def test_suggested_price_exceeds_cost(self, engine, scenario_settings):
        for margin, fees in [(0, 0), (10, 5), (55, 7), (80, 19)]:
            settings = _settings(scenario_settings, desired_profit_margin=margin, platform_fees=fees)
            b = engine.compute(make_product(print_prep_time=30), [FilamentUsage(80)], settings)
            if margin or fees:
                assert b.suggested_price > b.total_cost
            else:
                assert b.suggested_price == pytest.approx(b.total_cost)

    def test_idempotent(self, engine, scenario_product, scenario_settings):
        usages = [FilamentUsage(50, cost=21.5), FilamentUsage(12)]
        first = engine.compute(scenario_product, usages, scenario_settings)
        second = engine.compute(scenario_product, usages, scenario_settings)
        assert first.to_dict() == second.to_dict()

    @pytest.mark.parametrize("field,bump", [
        ("hourly_rate", 5),
        ("packaging_cost", 1),
        ("filament_spool_price", 10),
    ])
    def test_settings_cost_inputs_never_lower_price(self, engine, scenario_product, scenario_settings, field, bump):
        before = engine.compute(scenario_product, [FilamentUsage(50)], scenario_settings)
        raised = _settings(scenario_settings, **{field: getattr(scenario_settings, field) + bump})
        after = engine.compute(scenario_product, [FilamentUsage(50)], raised)
        assert after.total_cost >= before.total_cost
        assert after.selling_price >= before.selling_price

    def test_filament_and_parts_cost_never_lower_price(self, engine, scenario_settings):
        base = engine.compute(make_product(additional_parts_cost=1), [FilamentUsage(50, cost=20)], scenario_settings)
        dearer_filament = engine.compute(make_product(additional_parts_cost=1), [FilamentUsage(50, cost=35)], scenario_settings)
        dearer_parts = engine.compute(make_product(additional_parts_cost=3), [FilamentUsage(50, cost=20)], scenario_settings)
        for other in (dearer_filament, dearer_parts):
            assert other.total_cost >= base.total_cost
            assert other.selling_price >= base.selling_price

    @pytest.mark.parametrize("list_price", [0, 1, 5, 12, 20, 60])
    def test_ad_budget_floor(self, engine, scenario_product, scenario_settings, list_price):
        product = make_product(print_prep_time=10, post_processing_time=5, list_price=list_price)
        b = engine.compute(product, [FilamentUsage(50)], scenario_settings)
        assert b.advertising_budget >= 0
        if b.profit_margin <= scenario_settings.desired_profit_margin:
            assert b.advertising_budget == 0


# ===========================================================================
# markup_percent
# ===========================================================================

class TestMarkup:

    def test_markup_over_cost(self, engine, scenario_settings):
        b = engine.compute(make_product(additional_parts_cost=1.5), [], scenario_settings)
        assert b.total_cost == pytest.approx(2.0)
        assert markup_percent(3.0, b) == pytest.approx(50.0)

    def test_zero_cost_gives_zero_markup(self):
        b = CostingEngine().compute(
            make_product(list_price=10), [], PricingSettings(packaging_cost=0, hourly_rate=0)
        )
        assert b.total_cost == 0
        assert markup_percent(10, b) == 0
