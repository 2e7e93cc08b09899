from hrms_geo.core.enums import FineApplyTo
from hrms_geo.payroll.fines import (
    DISABLED,
    FIXED_PER_HOUR,
    FineConfig,
    FineRule,
    calculate_fine_amount,
    effective_fine_config,
)


def _settings(**fine):
    return {"payroll": {"fineCalculation": fine}}


def test_missing_settings_disable_fines():
    assert effective_fine_config(None) is DISABLED
    assert effective_fine_config({"payroll": {}}) is DISABLED


def test_apply_fines_false_overrides_enabled():
    config = effective_fine_config(_settings(enabled=True, applyFines=False))

    assert config.enabled is False


def test_config_reads_rules_and_grace():
    config = effective_fine_config(
        _settings(
            enabled=True,
            graceTimeMinutes=10,
            calculationType=FIXED_PER_HOUR,
            finePerHour=120,
            fineRules=[{"type": "custom", "applyTo": "lateArrival", "customAmount": 5, "customAmountUnit": "perMinute"}],
        )
    )

    assert config.enabled
    assert config.grace_time_minutes == 10
    assert config.calculation_type == FIXED_PER_HOUR
    assert config.fine_rules[0].custom_amount == 5


def test_shift_based_fine_uses_hourly_rate():
    config = FineConfig(enabled=True)

    # 900 / 9h = 100 per hour, 30 minutes late.
    assert calculate_fine_amount(30, FineApplyTo.LATE_ARRIVAL, config, 900.0, 9.0) == 50.0


def test_fixed_per_hour_fine():
    config = FineConfig(enabled=True, calculation_type=FIXED_PER_HOUR, fine_per_hour=60)

    assert calculate_fine_amount(45, FineApplyTo.EARLY_EXIT, config, None, 8.0) == 45.0


def test_disabled_or_zero_minutes_is_free():
    assert calculate_fine_amount(30, FineApplyTo.LATE_ARRIVAL, DISABLED, 900.0, 9.0) == 0.0
    assert calculate_fine_amount(0, FineApplyTo.LATE_ARRIVAL, FineConfig(enabled=True), 900.0, 9.0) == 0.0


def test_rule_matching_direction_wins():
    config = FineConfig(
        enabled=True,
        fine_rules=(
            FineRule(type="halfDay", apply_to="earlyExit"),
            FineRule(type="2xSalary", apply_to="lateArrival"),
        ),
    )

    assert calculate_fine_amount(30, FineApplyTo.EARLY_EXIT, config, 900.0, 9.0) == 450.0
    assert calculate_fine_amount(30, FineApplyTo.LATE_ARRIVAL, config, 900.0, 9.0) == 100.0


def test_custom_rule_units():
    per_minute = FineConfig(enabled=True, fine_rules=(FineRule(type="custom", custom_amount=2, custom_amount_unit="perMinute"),))
    fixed = FineConfig(enabled=True, fine_rules=(FineRule(type="custom", custom_amount=75, custom_amount_unit="fixed"),))

    assert calculate_fine_amount(10, FineApplyTo.LATE_ARRIVAL, per_minute, None, 8.0) == 20.0
    assert calculate_fine_amount(10, FineApplyTo.LATE_ARRIVAL, fixed, None, 8.0) == 75.0


def test_fine_is_rounded_to_cents():
    config = FineConfig(enabled=True)

    assert calculate_fine_amount(7, FineApplyTo.LATE_ARRIVAL, config, 1000.0, 9.0) == 12.96
