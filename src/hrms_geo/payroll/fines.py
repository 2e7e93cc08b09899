"""Late-arrival / early-exit fines.

The only source of truth is ``company.settings["payroll"]["fineCalculation"]``.
Shift-based formula: fine = (daily salary / shift hours) * (minutes / 60).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import FineApplyTo, FineRuleType

logger = logging.getLogger(__name__)

SHIFT_BASED = "shiftBased"
FIXED_PER_HOUR = "fixedPerHour"


@dataclass(frozen=True)
class FineRule:
    type: str
    apply_to: Optional[str] = None
    custom_amount: float = 0.0
    custom_amount_unit: str = "perHour"

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "FineRule":
        return cls(
            type=str(raw.get("type") or ""),
            apply_to=raw.get("applyTo") or None,
            custom_amount=float(raw.get("customAmount") or 0),
            custom_amount_unit=str(raw.get("customAmountUnit") or "perHour"),
        )

    def matches(self, apply_to: FineApplyTo) -> bool:
        return not self.apply_to or self.apply_to in (apply_to.value, FineApplyTo.BOTH.value)


@dataclass(frozen=True)
class FineConfig:
    enabled: bool = False
    grace_time_minutes: int = 0
    calculation_type: str = SHIFT_BASED
    fine_per_hour: float = 0.0
    fine_rules: Sequence[FineRule] = field(default_factory=tuple)


DISABLED = FineConfig()


def effective_fine_config(settings: Optional[Mapping[str, Any]]) -> FineConfig:
    """Build the fine config from a company's settings document."""

    source = ((settings or {}).get("payroll") or {}).get("fineCalculation")
    if not source:
        logger.debug("no payroll.fineCalculation in company settings, fines disabled")
        return DISABLED

    enabled = source.get("enabled") is True and source.get("applyFines") is not False
    rules = source.get("fineRules")
    return FineConfig(
        enabled=enabled,
        grace_time_minutes=int(source.get("graceTimeMinutes") or 0),
        calculation_type=source.get("calculationMethod") or source.get("calculationType") or SHIFT_BASED,
        fine_per_hour=float(source.get("finePerHour") or 0),
        fine_rules=tuple(FineRule.from_mapping(r) for r in rules) if isinstance(rules, list) else (),
    )


def _hourly_rate(daily_salary: Optional[float], shift_hours: float) -> float:
    if daily_salary is None or shift_hours <= 0:
        return 0.0
    return daily_salary / shift_hours


def apply_rule_amount(rule: FineRule, minutes: int, daily_salary: Optional[float], shift_hours: float) -> float:
    if not rule.type:
        return 0.0

    hourly_rate = _hourly_rate(daily_salary, shift_hours)
    hours = minutes / 60
    kind = rule.type.lower()

    if kind == FineRuleType.CUSTOM.value:
        unit = rule.custom_amount_unit.lower()
        if unit == "perminute":
            return rule.custom_amount * minutes
        if unit == "fixed":
            return rule.custom_amount
        return rule.custom_amount * hours
    if kind == FineRuleType.ONE_X_SALARY.value.lower():
        return hourly_rate * hours
    if kind == FineRuleType.TWO_X_SALARY.value.lower():
        return 2 * hourly_rate * hours
    if kind == FineRuleType.THREE_X_SALARY.value.lower():
        return 3 * hourly_rate * hours
    if kind == FineRuleType.HALF_DAY.value.lower():
        return daily_salary / 2 if daily_salary is not None else 0.0
    if kind == FineRuleType.FULL_DAY.value.lower():
        return daily_salary if daily_salary is not None else 0.0
    return hourly_rate * hours


def calculate_fine_amount(
    minutes: int,
    apply_to: FineApplyTo,
    config: Optional[FineConfig],
    daily_salary: Optional[float],
    shift_hours: float,
) -> float:
    if not config or not config.enabled or minutes <= 0:
        return 0.0

    rule = next((r for r in config.fine_rules if r.matches(apply_to)), None)
    if rule is not None:
        amount = apply_rule_amount(rule, minutes, daily_salary, shift_hours)
    elif config.calculation_type == FIXED_PER_HOUR and config.fine_per_hour > 0:
        amount = config.fine_per_hour * (minutes / 60)
    elif config.calculation_type == SHIFT_BASED and daily_salary is not None and shift_hours > 0:
        amount = _hourly_rate(daily_salary, shift_hours) * (minutes / 60)
    else:
        amount = 0.0

    result = round(amount or 0.0, 2)
    logger.debug("fine %s minutes=%s amount=%s", apply_to.value, minutes, result)
    return result
