from typing import Any, Dict, Iterable, List, Sequence, Tuple

from printshop.services.costing import CostBreakdown, markup_percent


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def average_profit_margin(breakdowns: Iterable[CostBreakdown]) -> float:
    """Mean profit margin; unpriceable products are left out."""
    return _mean([b.profit_margin for b in breakdowns if b.has_finite_price])


def average_markup(items: Iterable[Tuple[float, CostBreakdown]]) -> float:
    """Mean markup over (list_price, breakdown) pairs."""
    return _mean([markup_percent(list_price, breakdown) for list_price, breakdown in items])


def unique_filaments(filament_lists: Iterable[Iterable[Any]]) -> List[Any]:
    """Distinct filaments by identity (``id``), in first-seen order."""
    seen = set()
    result = []
    for filaments in filament_lists:
        for filament in filaments:
            key = getattr(filament, "id", None)
            if key is None:
                key = ("object", id(filament))
            if key in seen:
                continue
            seen.add(key)
            result.append(filament)
    return result


def summarize_products(rows: Iterable[Tuple[Any, List[Any], CostBreakdown]]) -> Dict[str, Any]:
    """Roll up (product, filaments, breakdown) rows for the dashboard."""
    rows = list(rows)
    breakdowns = [b for _, _, b in rows]
    budgets = [b.advertising_budget for b in breakdowns if b.has_finite_price]
    return {
        "product_count": len(rows),
        "average_profit_margin": average_profit_margin(breakdowns),
        "average_markup": average_markup((p.list_price, b) for p, _, b in rows),
        "unique_filament_count": len(unique_filaments(f for _, f, _ in rows)),
        "total_advertising_budget": sum(budgets),
        "unpriceable_products": sum(1 for b in breakdowns if b.error),
    }
