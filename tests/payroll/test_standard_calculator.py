from datetime import date, datetime, timezone

from hrms_geo.attendance.model import AttendanceReportRow
from hrms_geo.core.enums import AttendanceStatus
from hrms_geo.payroll.calculator.standard_calculator import StandardPayrollCalculator


def _row(punch_in, punch_out, break_minutes=60):
    return AttendanceReportRow(
        staff_id=1,
        full_name="A",
        username="a",
        shift_name=None,
        break_minutes=break_minutes,
        work_date=date(2025, 1, 1),
        punch_in=punch_in,
        punch_out=punch_out,
        status=AttendanceStatus.ON_TIME,
    )


def test_standard_calculator_subtracts_break():
    row = _row(datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc), datetime(2025, 1, 1, 17, 0, tzinfo=timezone.utc))

    calc = StandardPayrollCalculator()
    assert calc.worked_minutes(row) == 8 * 60


def test_standard_calculator_open_day_counts_zero():
    row = _row(datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc), None)

    assert StandardPayrollCalculator().worked_minutes(row) == 0


def test_standard_calculator_never_negative():
    row = _row(
        datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc),
        datetime(2025, 1, 1, 8, 30, tzinfo=timezone.utc),
        break_minutes=60,
    )

    assert StandardPayrollCalculator().worked_minutes(row) == 0
