from datetime import date

from flask import Blueprint, render_template, redirect, url_for, flash, request, abort
from flask_login import login_required

from forms import CheckInForm
from models import db, Student, Attendance
from utils.helpers import parse_iso_date
from utils.ranks import CLASS_TYPES, get_class_type_choices
from utils.roster import check_in, remove_check_in

attendance_bp = Blueprint("attendance", __name__, url_prefix="/attendance")


def _selected_day_and_class():
    try:
        selected_date = parse_iso_date(request.values.get('date'), default=date.today())
    except ValueError:
        abort(400)
    class_type = request.values.get('class_type') or request.values.get('classType')
    if class_type and class_type not in CLASS_TYPES:
        abort(400)
    return selected_date, class_type


def _student_from_form(form):
    try:
        student_id = int(form.student_id.data)
    except (TypeError, ValueError):
        abort(400)
    return db.get_or_404(Student, student_id)


@attendance_bp.route('/')
@login_required
def check_in_sheet():
    selected_date, class_type = _selected_day_and_class()

    day_checkins = Attendance.query.filter_by(date=selected_date).all()
    if not class_type:
        # Default to whichever class already has check-ins that day
        class_type = day_checkins[0].class_type if day_checkins else 'gi'

    checked_in = {a.student_id for a in day_checkins if a.class_type == class_type}
    students = (
        Student.query.filter_by(is_active=True)
        .order_by(Student.last_name.asc(), Student.first_name.asc())
        .all()
    )

    return render_template(
        'attendance.html',
        students=students,
        checked_in=checked_in,
        selected_date=selected_date,
        class_type=class_type,
        class_types=get_class_type_choices(),
        total_today=len(day_checkins),
    )


@attendance_bp.route('/check-in', methods=['POST'])
@login_required
def do_check_in():
    form = CheckInForm()
    if not form.validate_on_submit():
        abort(400)

    student = _student_from_form(form)
    if check_in(student.id, form.date.data, form.class_type.data):
        flash(f"{student.full_name} checked in.", "success")
    else:
        flash(f"{student.full_name} is already checked in.", "info")

    return redirect(url_for('attendance.check_in_sheet', date=form.date.data.isoformat(), class_type=form.class_type.data))


@attendance_bp.route('/remove', methods=['POST'])
@login_required
def do_remove_check_in():
    form = CheckInForm()
    if not form.validate_on_submit():
        abort(400)

    student = _student_from_form(form)
    if remove_check_in(student.id, form.date.data, form.class_type.data):
        flash(f"Check-in removed for {student.full_name}.", "info")

    return redirect(url_for('attendance.check_in_sheet', date=form.date.data.isoformat(), class_type=form.class_type.data))
