# utils/reports.py
from datetime import date, timedelta

from sqlalchemy import func

from models import Student, Attendance
from utils.extensions import db


def years_ago(today: date, years: int) -> date:
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        # 29 February
        return today.replace(year=today.year - years, day=28)


def attendance_by_day(since: date):
    """(date, check-in count) for every day with attendance on or after `since`."""
    return (
        db.session.query(Attendance.date, func.count(Attendance.id))
        .filter(Attendance.date >= since)
        .group_by(Attendance.date)
        .order_by(Attendance.date)
        .all()
    )


def attendance_stats(rows):
    total = sum(count for _, count in rows)
    busiest = None
    for day, count in rows:
        if busiest is None or count > busiest[1]:
            busiest = (day, count)
    return {
        'total_classes': total,
        'busiest_day': busiest,
        'avg_per_week': round(total / 52),
    }


def inactive_students(today: date, days=30):
    """
    Active students whose last check-in was more than `days` days ago,
    longest absence first. Students who have never checked in are new,
    not inactive, so they are left out.
    """
    cutoff = today - timedelta(days=days)
    rows = (
        db.session.query(Student, func.max(Attendance.date))
        .outerjoin(Attendance, Attendance.student_id == Student.id)
        .filter(Student.is_active.is_(True))
        .group_by(Student.id)
        .all()
    )

    inactive = [
        {
            'student': student,
            'last_attendance': last_attendance,
            'days_inactive': (today - last_attendance).days,
        }
        for student, last_attendance in rows
        if last_attendance is not None and last_attendance < cutoff
    ]
    inactive.sort(key=lambda row: row['days_inactive'], reverse=True)
    return inactive


def dashboard_stats(today: date):
    week_ago = today - timedelta(days=7)

    recent_checkins = (
        db.session.query(Attendance, Student)
        .join(Student, Attendance.student_id == Student.id)
        .order_by(Attendance.created_at.desc(), Attendance.id.desc())
        .limit(10)
        .all()
    )

    return {
        'active_students': Student.query.filter_by(is_active=True).count(),
        'today_attendance': Attendance.query.filter(Attendance.date == today).count(),
        'weekly_attendance': Attendance.query.filter(Attendance.date >= week_ago).count(),
        'recent_checkins': recent_checkins,
    }
