import csv
import os
from datetime import timedelta

from conftest import TODAY, consecutive_days
from utils.backup import backup_students_to_csv, export_promotion_report_csv
from utils.promotion import compute_all_statuses
from utils.reports import (
    attendance_by_day, attendance_stats, dashboard_stats, inactive_students, years_ago,
)


def test_attendance_by_day_and_stats(make_student, add_attendance):
    first = make_student()
    second = make_student(first_name="Alex")
    day = TODAY - timedelta(days=3)
    add_attendance(first, [day, TODAY])
    add_attendance(second, [day])

    rows = attendance_by_day(TODAY - timedelta(days=7))
    assert rows == [(day, 2), (TODAY, 1)]

    stats = attendance_stats(rows)
    assert stats['total_classes'] == 3
    assert stats['busiest_day'] == (day, 2)
    assert stats['avg_per_week'] == 0


def test_attendance_stats_empty():
    assert attendance_stats([]) == {'total_classes': 0, 'busiest_day': None, 'avg_per_week': 0}


def test_inactive_students(make_student, add_attendance):
    gone_long = make_student(first_name="Long")
    gone_short = make_student(first_name="Short")
    regular = make_student(first_name="Regular")
    make_student(first_name="New")
    archived = make_student(first_name="Archived", is_active=False)

    add_attendance(gone_long, [TODAY - timedelta(days=90)])
    add_attendance(gone_short, [TODAY - timedelta(days=45)])
    add_attendance(regular, [TODAY - timedelta(days=2)])
    add_attendance(archived, [TODAY - timedelta(days=200)])

    rows = inactive_students(TODAY)

    assert [row['student'].first_name for row in rows] == ["Long", "Short"]
    assert rows[0]['days_inactive'] == 90
    assert rows[1]['last_attendance'] == TODAY - timedelta(days=45)


def test_dashboard_stats(make_student, add_attendance):
    student = make_student()
    make_student(first_name="Idle", is_active=False)
    add_attendance(student, [TODAY, TODAY - timedelta(days=3), TODAY - timedelta(days=20)])

    stats = dashboard_stats(TODAY)

    assert stats['active_students'] == 1
    assert stats['today_attendance'] == 1
    assert stats['weekly_attendance'] == 2
    assert len(stats['recent_checkins']) == 3


def test_years_ago_handles_leap_day():
    from datetime import date
    assert years_ago(date(2028, 2, 29), 1) == date(2027, 2, 28)
    assert years_ago(TODAY, 1) == date(2025, 10, 19)


def test_export_promotion_report_csv(tmp_path, make_student, add_attendance):
    student = make_student(first_name="Casey", last_name="Ng", start_date=TODAY - timedelta(days=30))
    add_attendance(student, consecutive_days(TODAY - timedelta(days=25), 25))
    make_student(first_name="Dana", belt="black", stripes=4)

    filename = export_promotion_report_csv(compute_all_statuses(today=TODAY), str(tmp_path))

    with open(os.path.join(tmp_path, filename), newline='', encoding='utf-8') as fh:
        rows = list(csv.reader(fh))
    assert rows[0][0] == 'Student'
    by_name = {row[0]: row for row in rows[1:]}
    assert by_name['Casey Ng'][7] == '100'
    assert by_name['Casey Ng'][8] == 'Yes'
    assert by_name['Dana Rivera'][6] == ''


def test_backup_students_to_csv(tmp_path, make_student):
    make_student(first_name="Active")
    make_student(first_name="Gone", is_active=False)

    filename = backup_students_to_csv(str(tmp_path), include_archived=False)

    with open(os.path.join(tmp_path, filename), newline='', encoding='utf-8') as fh:
        rows = list(csv.reader(fh))
    assert len(rows) == 2
    assert rows[1][1] == 'Active'
