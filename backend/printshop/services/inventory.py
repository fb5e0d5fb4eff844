"""Reorder threshold rules for filaments and parts.

Filaments and parts compare against their minimum differently: a filament
is low only when strictly below its effective minimum, a part is low as
soon as it reaches its minimum. Both rules are kept as they are.
"""
from typing import Iterable, List, Optional, Tuple

from printshop.models.filament import Filament
from printshop.models.part import Part


def effective_minimum(filament) -> int:
    override = filament.minimum_quantity_override
    if override is not None:
        return override
    return filament.minimum_quantity or 0


def is_filament_below_threshold(filament) -> bool:
    return (filament.quantity or 0) < effective_minimum(filament)


def is_part_below_threshold(part) -> bool:
    return (part.quantity or 0) <= (part.minimum_quantity or 0)


def is_below_threshold(record) -> bool:
    if isinstance(record, Filament):
        return is_filament_below_threshold(record)
    if isinstance(record, Part):
        return is_part_below_threshold(record)
    raise TypeError(f"no reorder threshold rule for {type(record).__name__}")


def clear_minimum_override(filament):
    """Return the filament to the automatic minimum."""
    filament.minimum_quantity_override = None
    return filament


def reorder_shortfall(filament) -> int:
    return max(0, effective_minimum(filament) - (filament.quantity or 0))


def low_stock_purchase_plan(
    filaments: Iterable, open_filament_ids: Optional[Iterable[int]] = None
) -> List[Tuple[object, int]]:
    """(filament, quantity) pairs for low filaments not already awaiting an order."""
    skip = set(open_filament_ids or ())
    plan = []
    for filament in filaments:
        if filament.id in skip or not is_filament_below_threshold(filament):
            continue
        plan.append((filament, max(1, reorder_shortfall(filament))))
    return plan
