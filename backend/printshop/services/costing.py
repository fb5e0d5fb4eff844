import logging
import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)

# error kind set on a breakdown when margin + fees leave nothing to cover cost
PRICE_UNDEFINED = "suggested_price_undefined"


@dataclass(frozen=True)
class FilamentUsage:
    """Grams of one filament used by a product, with its optional cost per kg."""

    filament_usage_amount: float
    cost: Optional[float] = None
    filament_id: Optional[int] = None


@dataclass(frozen=True)
class CostBreakdown:
    labor_cost: float
    filament_cost: float
    wear_tear_cost: float
    total_cost: float
    suggested_price: float
    selling_price: float
    platform_fee_amount: float
    gross_profit: float
    profit_margin: float
    advertising_budget: float
    filament_used: float
    error: Optional[str] = None

    @property
    def has_finite_price(self) -> bool:
        return math.isfinite(self.selling_price)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _num(value) -> float:
    return float(value or 0)


class CostingEngine:
    """Derives cost, price and profit for one product.

    Stateless: every input comes from the arguments, so one instance can be
    shared freely. Steps run in a fixed order because each feeds the next:

    - labor from prep + post-processing minutes at the hourly rate
    - filament cost per attached filament (own cost per kg, else the spool
      price setting); with nothing attached the legacy ``filament_used``
      grams are priced at the spool price
    - wear & tear as a percentage of filament cost
    - total cost adds additional parts and packaging
    - suggested price = total / (1 - margin% - fees%)
    - selling price is the list price when set, else the suggested price
    - fees, gross profit, margin percent and the advertising budget follow

    When ``desired_profit_margin + platform_fees >= 100`` no finite price
    covers the cost. The suggested price is then ``inf`` and ``error`` is
    ``PRICE_UNDEFINED``; without a list price the selling-side figures are
    ``nan``. Cost figures are always computed.
    """

    def filament_totals(self, product, filaments: Iterable, settings):
        spool_price = _num(settings.filament_spool_price)
        usages = list(filaments or [])
        if not usages:
            grams = _num(getattr(product, "filament_used", 0))
            return grams, (grams / 1000) * spool_price

        grams = 0.0
        cost = 0.0
        for usage in usages:
            amount = _num(usage.filament_usage_amount)
            per_kg = usage.cost if usage.cost is not None else spool_price
            grams += amount
            cost += (amount / 1000) * float(per_kg)
        return grams, cost

    def compute(self, product, filaments: Iterable, settings) -> CostBreakdown:
        minutes = _num(product.print_prep_time) + _num(product.post_processing_time)
        labor_cost = minutes / 60 * _num(settings.hourly_rate)

        filament_used, filament_cost = self.filament_totals(product, filaments, settings)
        wear_tear_cost = filament_cost * (_num(settings.wear_tear_markup) / 100)

        total_cost = (
            labor_cost
            + filament_cost
            + wear_tear_cost
            + _num(product.additional_parts_cost)
            + _num(settings.packaging_cost)
        )

        margin_pct = _num(settings.desired_profit_margin)
        fees_pct = _num(settings.platform_fees)
        divisor = 1 - margin_pct / 100 - fees_pct / 100

        error = None
        if divisor <= 0:
            suggested_price = math.inf
            error = PRICE_UNDEFINED
            logger.warning(
                "Cannot compute a finite suggested price: desired_profit_margin=%s platform_fees=%s",
                margin_pct, fees_pct,
            )
        else:
            suggested_price = total_cost / divisor

        list_price = _num(product.list_price)
        selling_price = list_price if list_price > 0 else suggested_price

        if not math.isfinite(selling_price):
            nan = math.nan
            return CostBreakdown(
                labor_cost=labor_cost,
                filament_cost=filament_cost,
                wear_tear_cost=wear_tear_cost,
                total_cost=total_cost,
                suggested_price=suggested_price,
                selling_price=nan,
                platform_fee_amount=nan,
                gross_profit=nan,
                profit_margin=nan,
                advertising_budget=nan,
                filament_used=filament_used,
                error=error,
            )

        platform_fee_amount = selling_price * (fees_pct / 100)
        gross_profit = selling_price - total_cost - platform_fee_amount
        profit_margin = (gross_profit / selling_price) * 100 if selling_price > 0 else 0.0
        if profit_margin <= margin_pct:
            advertising_budget = 0.0
        else:
            advertising_budget = max(0.0, gross_profit - (selling_price * margin_pct / 100))

        return CostBreakdown(
            labor_cost=labor_cost,
            filament_cost=filament_cost,
            wear_tear_cost=wear_tear_cost,
            total_cost=total_cost,
            suggested_price=suggested_price,
            selling_price=selling_price,
            platform_fee_amount=platform_fee_amount,
            gross_profit=gross_profit,
            profit_margin=profit_margin,
            advertising_budget=advertising_budget,
            filament_used=filament_used,
            error=error,
        )


_default_engine = CostingEngine()


def compute(product, filaments: Iterable, settings) -> CostBreakdown:
    return _default_engine.compute(product, filaments, settings)


def markup_percent(list_price, breakdown: CostBreakdown) -> float:
    """Markup of the list price over total cost; 0 when there is no cost."""
    if not breakdown.total_cost:
        return 0.0
    return (_num(list_price) / breakdown.total_cost - 1) * 100
