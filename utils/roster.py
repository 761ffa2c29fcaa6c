# utils/roster.py
"""Write paths for students, check-ins, promotions and notes."""
from datetime import date, datetime

from flask import current_app
from sqlalchemy.exc import IntegrityError

from models import Student, Attendance, Promotion, Note
from utils.extensions import db
from utils.ranks import Belt, CLASS_TYPES, NOTE_CATEGORIES, as_belt

STUDENT_FIELDS = (
    'first_name', 'last_name', 'email', 'phone',
    'emergency_contact', 'emergency_phone', 'start_date',
    'current_belt', 'current_stripes',
)


def _apply_student_fields(student, data):
    for name in STUDENT_FIELDS:
        if name not in data:
            continue
        value = data[name]
        if isinstance(value, str):
            value = value.strip() or None
        if name == 'current_belt':
            value = as_belt(value or Belt.WHITE).value
        elif name == 'current_stripes':
            value = int(value or 0)
        setattr(student, name, value)


def create_student(data, last_promoted_date=None):
    student = Student()
    _apply_student_fields(student, data)
    db.session.add(student)
    db.session.flush()

    # A student joining with an existing rank gets a baseline promotion
    # record so progress is counted from their last real promotion.
    is_fresh_white_belt = student.current_belt == Belt.WHITE.value and student.current_stripes == 0
    if last_promoted_date and not is_fresh_white_belt:
        db.session.add(Promotion(
            student_id=student.id,
            from_belt=student.current_belt,
            from_stripes=student.current_stripes,
            to_belt=student.current_belt,
            to_stripes=student.current_stripes,
            promoted_at=last_promoted_date,
            notes="Baseline promotion (pre-existing rank at onboarding)",
        ))

    db.session.commit()
    current_app.logger.info("Student %s created at %s/%s", student.id, student.current_belt, student.current_stripes)
    return student


def update_student(student, data):
    # Rank edits here do not write a promotion record; use record_promotion for that.
    _apply_student_fields(student, data)
    student.updated_at = datetime.utcnow()
    db.session.commit()
    current_app.logger.info("Student %s updated", student.id)
    return student


def record_promotion(student, to_belt, to_stripes, notes=None, promoted_on=None):
    to_belt = as_belt(to_belt)
    promotion = Promotion(
        student_id=student.id,
        from_belt=student.current_belt,
        from_stripes=student.current_stripes,
        to_belt=to_belt.value,
        to_stripes=int(to_stripes),
        promoted_at=promoted_on or date.today(),
        notes=(notes or '').strip() or None,
    )
    db.session.add(promotion)

    student.current_belt = promotion.to_belt
    student.current_stripes = promotion.to_stripes
    student.updated_at = datetime.utcnow()
    db.session.commit()

    current_app.logger.info(
        "Student %s promoted from %s/%s to %s/%s",
        student.id, promotion.from_belt, promotion.from_stripes, promotion.to_belt, promotion.to_stripes,
    )
    return promotion


def _set_active(student, active):
    student.is_active = active
    student.updated_at = datetime.utcnow()
    db.session.commit()


def archive_student(student):
    _set_active(student, False)
    current_app.logger.info("Student %s archived", student.id)


def restore_student(student):
    _set_active(student, True)
    current_app.logger.info("Student %s restored", student.id)


def check_in(student_id, on, class_type='gi'):
    """Record attendance; returns False if the student was already checked in."""
    if class_type not in CLASS_TYPES:
        raise ValueError(f"Unknown class type: {class_type}")

    existing = Attendance.query.filter_by(student_id=student_id, date=on, class_type=class_type).first()
    if existing:
        return False

    db.session.add(Attendance(student_id=student_id, date=on, class_type=class_type))
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with another check-in for the same class
        db.session.rollback()
        return False

    current_app.logger.info("Student %s checked in for %s on %s", student_id, class_type, on.isoformat())
    return True


def remove_check_in(student_id, on, class_type='gi'):
    removed = (
        Attendance.query
        .filter_by(student_id=student_id, date=on, class_type=class_type)
        .delete()
    )
    db.session.commit()
    if removed:
        current_app.logger.info("Check-in removed for student %s (%s on %s)", student_id, class_type, on.isoformat())
    return bool(removed)


def add_note(student, category, content):
    if category not in NOTE_CATEGORIES:
        raise ValueError(f"Unknown note category: {category}")

    note = Note(student_id=student.id, category=category, content=content.strip())
    db.session.add(note)
    db.session.commit()
    current_app.logger.info("Note added for student %s", student.id)
    return note
