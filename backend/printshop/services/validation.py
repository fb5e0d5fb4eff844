from typing import Any, Dict, List

from printshop.services.costing import PRICE_UNDEFINED

SETTINGS_FIELDS = (
    "hourly_rate",
    "wear_tear_markup",
    "platform_fees",
    "filament_spool_price",
    "desired_profit_margin",
    "packaging_cost",
    "spool_weight",
    "filament_markup",
)


class ValidationError(ValueError):
    """Caller input rejected before it reaches the store."""


class Validator:
    """Checks pricing settings before they are used.

    Rules:
    - a negative knob -> ``negative:<field>``
    - desired_profit_margin + platform_fees >= 100 -> ``margin_and_fees_at_or_above_100``
      (the suggested price has no finite value)
    - a zero spool price -> ``zero_spool_price`` (filament costs nothing
      unless the filament has its own cost)

    Issues are advisory; the settings are still saved. The list is sorted so
    results are reproducible.
    """

    def _add_issue(self, issues: List[str], issue: str) -> None:
        if issue not in issues:
            issues.append(issue)

    def validate_settings(self, settings) -> Dict[str, Any]:
        issues: List[str] = []

        for name in SETTINGS_FIELDS:
            value = getattr(settings, name, 0) or 0
            if value < 0:
                self._add_issue(issues, f"negative:{name}")

        margin = settings.desired_profit_margin or 0
        fees = settings.platform_fees or 0
        if margin + fees >= 100:
            self._add_issue(issues, "margin_and_fees_at_or_above_100")

        if not settings.filament_spool_price:
            self._add_issue(issues, "zero_spool_price")

        issues_sorted = sorted(issues)
        return {
            "ok": "margin_and_fees_at_or_above_100" not in issues_sorted,
            "price_error": PRICE_UNDEFINED if "margin_and_fees_at_or_above_100" in issues_sorted else None,
            "issues": issues_sorted,
        }
