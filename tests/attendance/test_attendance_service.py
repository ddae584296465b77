from __future__ import annotations

from datetime import date, datetime

import pytest

from src.timeclock.timeclock.attendance.service import AttendanceService, overtime_note
from src.timeclock.timeclock.core.enums import ShiftStatus
from src.timeclock.timeclock.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def svc(attendance_repo, employees_repo):
    return AttendanceService(attendance_repo, employees_repo)


@pytest.fixture
def taro(employees_repo):
    return employees_repo.add("山田太郎")


def test_clock_in_opens_first_shift_of_the_day(svc, taro, fixed_now):
    rec = svc.clock_in(taro.employee_id, now=fixed_now)

    assert rec.status == ShiftStatus.WORKING
    assert rec.shift_number == 1
    assert rec.work_date == fixed_now.date()
    assert rec.clock_in == fixed_now
    assert rec.clock_out is None
    assert rec.employee_name == "山田太郎"


def test_second_clock_in_while_working_is_rejected(svc, taro, fixed_now):
    svc.clock_in(taro.employee_id, now=fixed_now)

    with pytest.raises(ValidationError, match="既に出勤中です"):
        svc.clock_in(taro.employee_id, now=fixed_now.replace(hour=10))


def test_open_shift_from_previous_day_blocks_clock_in(svc, taro):
    svc.clock_in(taro.employee_id, now=datetime(2026, 1, 19, 22, 0))

    with pytest.raises(ValidationError):
        svc.clock_in(taro.employee_id, now=datetime(2026, 1, 20, 9, 0))


def test_next_shift_on_same_day_gets_next_number(svc, taro):
    svc.clock_in(taro.employee_id, now=datetime(2026, 1, 20, 9, 0))
    svc.clock_out(taro.employee_id, now=datetime(2026, 1, 20, 12, 0))

    rec = svc.clock_in(taro.employee_id, now=datetime(2026, 1, 20, 13, 0))
    assert rec.shift_number == 2


def test_clock_in_unknown_employee(svc):
    with pytest.raises(NotFoundError):
        svc.clock_in(999, now=datetime(2026, 1, 20, 9, 0))


def test_clock_in_inactive_employee(svc, employees_repo, fixed_now):
    retired = employees_repo.add("退職者", is_active=False)
    with pytest.raises(ValidationError):
        svc.clock_in(retired.employee_id, now=fixed_now)


def test_clock_in_race_is_caught_by_repository(attendance_repo, employees_repo, taro, fixed_now):
    class BlindAttendance(type(attendance_repo)):
        def get_open_for_employee(self, employee_id):
            return None

    repo = BlindAttendance(employees_repo)
    svc = AttendanceService(repo, employees_repo)
    svc.clock_in(taro.employee_id, now=fixed_now)

    with pytest.raises(ValidationError, match="既に出勤中です"):
        svc.clock_in(taro.employee_id, now=fixed_now)


def test_clock_out_without_open_shift(svc, taro, fixed_now):
    with pytest.raises(ValidationError, match="出勤記録がありません"):
        svc.clock_out(taro.employee_id, now=fixed_now)


def test_clock_out_computes_break_and_work(svc, taro):
    svc.clock_in(taro.employee_id, now=datetime(2026, 1, 20, 9, 0))
    rec = svc.clock_out(taro.employee_id, now=datetime(2026, 1, 20, 18, 0))

    assert rec.status == ShiftStatus.COMPLETED
    assert rec.clock_out == datetime(2026, 1, 20, 18, 0)
    assert rec.break_minutes == 60
    assert rec.work_minutes == 480
    assert rec.is_overnight is False
    assert rec.note is None


def test_clock_out_with_overtime_writes_note(svc, taro):
    svc.clock_in(taro.employee_id, now=datetime(2026, 1, 20, 9, 0))
    rec = svc.clock_out(taro.employee_id, overtime_minutes=30, now=datetime(2026, 1, 20, 15, 10))

    assert rec.note == "残業30分"
    assert rec.work_minutes == 360
    assert rec.break_minutes == 0


def test_clock_out_next_morning_closes_yesterdays_shift(svc, taro):
    svc.clock_in(taro.employee_id, now=datetime(2026, 1, 19, 22, 0))

    status = svc.get_status(taro.employee_id, today=date(2026, 1, 20))
    assert status.is_working is True
    assert status.is_old_working_record is True

    rec = svc.clock_out(taro.employee_id, now=datetime(2026, 1, 20, 7, 0))
    assert rec.work_date == date(2026, 1, 19)
    assert rec.work_minutes == 480
    assert rec.break_minutes == 60

    status = svc.get_status(taro.employee_id, today=date(2026, 1, 20))
    assert status.is_working is False
    assert status.working_record is None


def test_status_for_todays_open_shift_is_not_old(svc, taro, fixed_now):
    svc.clock_in(taro.employee_id, now=fixed_now)
    status = svc.get_status(taro.employee_id, today=fixed_now.date())
    assert status.is_working is True
    assert status.is_old_working_record is False


def test_list_today_orders_by_shift_number(svc, taro):
    svc.clock_in(taro.employee_id, now=datetime(2026, 1, 20, 9, 0))
    svc.clock_out(taro.employee_id, now=datetime(2026, 1, 20, 11, 0))
    svc.clock_in(taro.employee_id, now=datetime(2026, 1, 20, 12, 0))

    records = svc.list_today(taro.employee_id, today=date(2026, 1, 20))
    assert [r.shift_number for r in records] == [1, 2]


def test_correct_record_recomputes_when_both_instants_given(svc, attendance_repo, taro):
    rec = attendance_repo.add(
        employee_id=taro.employee_id,
        work_date=date(2026, 1, 20),
        clock_in=datetime(2026, 1, 20, 9, 0),
    )

    updated = svc.correct_record(
        rec.attendance_id,
        clock_in=datetime(2026, 1, 20, 9, 0),
        clock_out=datetime(2026, 1, 20, 16, 0),
        note="打刻忘れ",
    )

    assert updated.status == ShiftStatus.COMPLETED
    assert updated.work_minutes == 375
    assert updated.break_minutes == 45
    assert updated.note == "打刻忘れ"


def test_correct_record_note_only_keeps_minutes(svc, attendance_repo, taro):
    rec = attendance_repo.add(
        employee_id=taro.employee_id,
        work_date=date(2026, 1, 20),
        clock_in=datetime(2026, 1, 20, 9, 0),
        clock_out=datetime(2026, 1, 20, 17, 0),
        work_minutes=420,
        break_minutes=60,
        status=ShiftStatus.COMPLETED,
    )

    updated = svc.correct_record(rec.attendance_id, note=None)
    assert updated.work_minutes == 420
    assert updated.note is None


def test_correct_missing_record(svc):
    with pytest.raises(NotFoundError):
        svc.correct_record(42, note="x")


def test_delete_missing_record(svc):
    with pytest.raises(NotFoundError):
        svc.delete_record(42)


def test_search_rejects_inverted_range(svc):
    with pytest.raises(ValidationError):
        svc.search(start_date=date(2026, 2, 1), end_date=date(2026, 1, 1))


def test_overtime_note():
    assert overtime_note(None) is None
    assert overtime_note(0) is None
    assert overtime_note(-5) is None
    assert overtime_note(45) == "残業45分"


@pytest.fixture
def completed_shift(attendance_repo, taro):
    return attendance_repo.add(
        employee_id=taro.employee_id,
        work_date=date(2026, 1, 20),
        clock_in=datetime(2026, 1, 20, 9, 0),
        clock_out=datetime(2026, 1, 20, 17, 0),
        work_minutes=420,
        break_minutes=60,
        status=ShiftStatus.COMPLETED,
    )


def test_correct_clock_out_only_recomputes_from_stored_clock_in(svc, completed_shift):
    updated = svc.correct_record(completed_shift.attendance_id, clock_out=datetime(2026, 1, 20, 19, 0))

    assert updated.clock_in == datetime(2026, 1, 20, 9, 0)
    assert updated.clock_out == datetime(2026, 1, 20, 19, 0)
    assert updated.work_minutes == 540
    assert updated.break_minutes == 60


def test_correct_clock_in_only_recomputes_from_stored_clock_out(svc, completed_shift):
    updated = svc.correct_record(completed_shift.attendance_id, clock_in=datetime(2026, 1, 20, 10, 0))

    assert updated.work_minutes == 375
    assert updated.break_minutes == 45
    assert updated.status == ShiftStatus.COMPLETED


def test_clearing_clock_out_reopens_shift(svc, completed_shift):
    updated = svc.correct_record(completed_shift.attendance_id, clock_out=None)

    assert updated.clock_out is None
    assert updated.status == ShiftStatus.WORKING
    assert updated.work_minutes == 0
    assert updated.break_minutes == 0


def test_clearing_clock_out_rejected_while_another_shift_is_open(svc, attendance_repo, completed_shift, taro):
    attendance_repo.add(
        employee_id=taro.employee_id,
        work_date=date(2026, 1, 21),
        clock_in=datetime(2026, 1, 21, 9, 0),
    )

    with pytest.raises(ValidationError, match="既に出勤中です"):
        svc.correct_record(completed_shift.attendance_id, clock_out=None)
