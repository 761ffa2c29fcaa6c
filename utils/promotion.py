# utils/promotion.py
"""
Promotion eligibility.

Progress is measured from a student's *baseline date*: the date of their most
recent promotion record, or their start date if they have never been
promoted. Classes attended since the baseline are compared with the threshold
for the next step: the next stripe while the student has fewer than 4
stripes, the next belt once they have 4. Days since the baseline are only
carried along for display.
"""
from dataclasses import dataclass, asdict
from datetime import date
from fractions import Fraction
import math
from typing import Optional

from sqlalchemy import func

from models import Student, Attendance, Promotion
from utils.extensions import db
from utils.ranks import MAX_STRIPES, as_belt, is_terminal
from utils.thresholds import ThresholdConfig, load_thresholds


@dataclass(frozen=True)
class PromotionStatus:
    classes_since_promotion: int
    days_since_promotion: int
    last_promotion_date: date
    stripe_due: bool
    belt_eligible: bool
    progress: int  # 0-100, percent of the way to next_threshold
    next_threshold: Optional[int]  # None when there is no next milestone
    is_stripe_promotion: bool

    @property
    def has_next_threshold(self):
        return self.next_threshold is not None

    @property
    def classes_remaining(self):
        if self.next_threshold is None:
            return None
        return max(0, self.next_threshold - self.classes_since_promotion)

    def to_dict(self):
        data = asdict(self)
        data['last_promotion_date'] = self.last_promotion_date.isoformat()
        return data


def round_half_away_from_zero(value: Fraction) -> int:
    if value < 0:
        return -math.floor(-value + Fraction(1, 2))
    return math.floor(value + Fraction(1, 2))


def progress_percent(classes, threshold) -> int:
    # No next milestone, or a zero threshold that is met by any count
    if threshold is None or threshold == 0:
        return 100
    percent = round_half_away_from_zero(Fraction(100 * classes, threshold))
    return max(0, min(100, percent))


def compute_status(belt, stripes, classes, days, baseline, thresholds: ThresholdConfig) -> PromotionStatus:
    """Decide whether a student is due a stripe or eligible for their next belt.

    Pure function of its arguments. At black belt with 4 stripes there is no
    next milestone: ``next_threshold`` is None, progress is 100 and the
    student is never reported as belt eligible.
    """
    belt = as_belt(belt)
    is_stripe_promotion = stripes < MAX_STRIPES

    if is_stripe_promotion:
        next_threshold = thresholds.stripe_threshold(belt)
    else:
        next_threshold = thresholds.belt_threshold(belt)

    reached = next_threshold is not None and classes >= next_threshold

    return PromotionStatus(
        classes_since_promotion=classes,
        days_since_promotion=days,
        last_promotion_date=baseline,
        stripe_due=is_stripe_promotion and reached,
        belt_eligible=not is_stripe_promotion and not is_terminal(belt) and reached,
        progress=progress_percent(classes, next_threshold),
        next_threshold=next_threshold,
        is_stripe_promotion=is_stripe_promotion,
    )


def days_between(start: date, end: date) -> int:
    return (end - start).days


def most_recent_promotion(student_id):
    return (
        Promotion.query
        .filter_by(student_id=student_id)
        .order_by(Promotion.promoted_at.desc(), Promotion.id.desc())
        .first()
    )


def get_baseline_date(student) -> date:
    """Most recent promotion date, falling back to the student's start date."""
    promotion = most_recent_promotion(student.id)
    if promotion:
        return promotion.promoted_at
    return student.start_date


def count_attendance_since(student_id, since: date) -> int:
    return (
        Attendance.query
        .filter(Attendance.student_id == student_id, Attendance.date >= since)
        .count()
    )


def get_student_promotion_status(student, thresholds=None, today=None) -> PromotionStatus:
    if thresholds is None:
        thresholds = load_thresholds()
    if today is None:
        today = date.today()

    baseline = get_baseline_date(student)
    classes = count_attendance_since(student.id, baseline)

    return compute_status(
        student.current_belt,
        student.current_stripes,
        classes,
        days_between(baseline, today),
        baseline,
        thresholds,
    )


def _latest_promotion_dates(student_ids):
    rows = (
        db.session.query(Promotion.student_id, func.max(Promotion.promoted_at))
        .filter(Promotion.student_id.in_(student_ids))
        .group_by(Promotion.student_id)
        .all()
    )
    return {student_id: promoted_at for student_id, promoted_at in rows}


def _attendance_counts_since_baseline(student_ids):
    """Classes per student since that student's own baseline, counted in SQL."""
    latest = (
        db.session.query(
            Promotion.student_id.label('student_id'),
            func.max(Promotion.promoted_at).label('promoted_at'),
        )
        .group_by(Promotion.student_id)
        .subquery()
    )
    baseline = func.coalesce(latest.c.promoted_at, Student.start_date)

    rows = (
        db.session.query(Attendance.student_id, func.count(Attendance.id))
        .join(Student, Student.id == Attendance.student_id)
        .outerjoin(latest, latest.c.student_id == Student.id)
        .filter(Attendance.student_id.in_(student_ids), Attendance.date >= baseline)
        .group_by(Attendance.student_id)
        .all()
    )
    return {student_id: count for student_id, count in rows}


def compute_all_statuses(thresholds=None, today=None):
    """Promotion status for every active student, as (student, status) pairs.

    Uses a fixed number of grouped queries instead of two per student; the
    result is the same as calling get_student_promotion_status for each student.
    """
    if thresholds is None:
        thresholds = load_thresholds()
    if today is None:
        today = date.today()

    students = Student.query.filter_by(is_active=True).all()
    if not students:
        return []

    ids = [s.id for s in students]
    latest = _latest_promotion_dates(ids)
    counts = _attendance_counts_since_baseline(ids)

    results = []
    for student in students:
        baseline = latest.get(student.id) or student.start_date
        status = compute_status(
            student.current_belt,
            student.current_stripes,
            counts.get(student.id, 0),
            days_between(baseline, today),
            baseline,
            thresholds,
        )
        results.append((student, status))
    return results


def promotion_summary(rows):
    return {
        'total': len(rows),
        'stripe_due': sum(1 for _, status in rows if status.stripe_due),
        'belt_eligible': sum(1 for _, status in rows if status.belt_eligible),
    }
