from datetime import date

from flask import Blueprint, render_template, redirect, url_for, flash, request, jsonify, current_app
from flask_login import login_required
from sqlalchemy import or_

from forms import StudentForm, NewStudentForm, NoteForm, PromotionForm
from models import db, Student, Attendance, Promotion, Note
from utils.promotion import get_student_promotion_status
from utils.promotion_validation import validate_transition
from utils.ranks import next_belt, MAX_STRIPES
from utils.reports import years_ago
from utils.roster import (
    create_student, update_student, record_promotion, archive_student,
    restore_student, add_note,
)
from utils.serializers import serialize_status, serialize_promotion

student_bp = Blueprint("students", __name__, url_prefix="/students")


def suggested_next_rank(student):
    """The standard next step: one more stripe, or the next belt at 0 stripes."""
    if student.current_stripes < MAX_STRIPES:
        return student.current_belt, student.current_stripes + 1
    upcoming = next_belt(student.current_belt)
    if upcoming is None:
        return student.current_belt, student.current_stripes
    return upcoming.value, 0


@student_bp.route('/')
@login_required
def list_students():
    show_archived = request.args.get('view') == 'archived'
    search = request.args.get('q', '').strip()

    query = Student.query.filter(Student.is_active.is_(not show_archived))
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Student.first_name.ilike(pattern), Student.last_name.ilike(pattern)))

    students = query.order_by(Student.last_name.asc(), Student.first_name.asc()).all()
    return render_template('students/list.html', students=students, show_archived=show_archived, search=search)


@student_bp.route('/new', methods=['GET', 'POST'])
@login_required
def new_student():
    form = NewStudentForm()
    if form.validate_on_submit():
        try:
            student = create_student(form.student_data(), last_promoted_date=form.last_promoted_date.data)
        except Exception:
            db.session.rollback()
            current_app.logger.exception("Failed to create student")
            flash("Could not save the student. Please try again.", "danger")
            return render_template('students/form.html', form=form, student=None), 500

        flash(f"{student.full_name} added.", "success")
        return redirect(url_for('students.list_students'))

    status = 400 if request.method == 'POST' else 200
    return render_template('students/form.html', form=form, student=None), status


@student_bp.route('/<int:student_id>')
@login_required
def student_detail(student_id):
    student = db.get_or_404(Student, student_id)
    today = date.today()

    status = get_student_promotion_status(student, today=today)

    # Last 12 months of check-in dates for the calendar
    attendance_dates = [
        row.date for row in
        Attendance.query.with_entities(Attendance.date)
        .filter(Attendance.student_id == student.id, Attendance.date >= years_ago(today, 1))
        .order_by(Attendance.date.desc())
    ]
    promotions = (
        Promotion.query.filter_by(student_id=student.id)
        .order_by(Promotion.promoted_at.desc(), Promotion.id.desc())
        .all()
    )
    notes = Note.query.filter_by(student_id=student.id).order_by(Note.created_at.desc(), Note.id.desc()).all()

    form = PromotionForm()
    form.to_belt.data, form.to_stripes.data = suggested_next_rank(student)

    return render_template(
        'students/detail.html',
        student=student,
        status=status,
        attendance_dates=sorted(set(attendance_dates), reverse=True),
        promotions=promotions,
        notes=notes,
        form=form,
    )


@student_bp.route('/<int:student_id>/status.json')
@login_required
def student_status_json(student_id):
    student = db.get_or_404(Student, student_id)
    status = get_student_promotion_status(student)
    return jsonify(serialize_status(student, status))


@student_bp.route('/<int:student_id>/edit', methods=['GET', 'POST'])
@login_required
def edit_student(student_id):
    student = db.get_or_404(Student, student_id)
    form = StudentForm(obj=student)

    if form.validate_on_submit():
        try:
            update_student(student, form.student_data())
        except Exception:
            db.session.rollback()
            current_app.logger.exception("Failed to update student %s", student.id)
            flash("Could not save changes. Please try again.", "danger")
            return render_template('students/form.html', form=form, student=student), 500

        flash("Student updated.", "success")
        return redirect(url_for('students.student_detail', student_id=student.id))

    status = 400 if request.method == 'POST' else 200
    return render_template('students/form.html', form=form, student=student), status


@student_bp.route('/<int:student_id>/promote', methods=['POST'])
@login_required
def promote(student_id):
    student = db.get_or_404(Student, student_id)
    form = PromotionForm()

    if not form.validate_on_submit():
        flash("Choose a belt and stripe count for the promotion.", "danger")
        return redirect(url_for('students.student_detail', student_id=student.id))

    warning = validate_transition(student.current_belt, student.current_stripes, form.to_belt.data, form.to_stripes.data)
    if warning and not form.confirmed.data:
        # Non-standard: ask again before recording anything
        return render_template('students/confirm_promotion.html', student=student, form=form, warning=warning)

    try:
        promotion = record_promotion(student, form.to_belt.data, form.to_stripes.data, notes=form.notes.data)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to promote student %s", student.id)
        flash("Could not record the promotion. Please try again.", "danger")
        return redirect(url_for('students.student_detail', student_id=student.id))

    if warning:
        current_app.logger.warning("Non-standard promotion confirmed for student %s: %s", student.id, warning)
    flash(f"Promoted to {promotion.to_belt} belt, {promotion.to_stripes} stripe(s).", "success")
    return redirect(url_for('students.student_detail', student_id=student.id))


@student_bp.route('/<int:student_id>/promotions.json')
@login_required
def promotion_history_json(student_id):
    student = db.get_or_404(Student, student_id)
    promotions = (
        Promotion.query.filter_by(student_id=student.id)
        .order_by(Promotion.promoted_at.desc(), Promotion.id.desc())
        .all()
    )
    return jsonify([serialize_promotion(p) for p in promotions])


@student_bp.route('/<int:student_id>/archive', methods=['POST'])
@login_required
def archive(student_id):
    student = db.get_or_404(Student, student_id)
    try:
        archive_student(student)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to archive student %s", student.id)
        flash("Could not archive the student. Please try again.", "danger")
        return redirect(url_for('students.student_detail', student_id=student.id))

    flash(f"{student.full_name} archived.", "info")
    return redirect(url_for('students.list_students'))


@student_bp.route('/<int:student_id>/restore', methods=['POST'])
@login_required
def restore(student_id):
    student = db.get_or_404(Student, student_id)
    try:
        restore_student(student)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to restore student %s", student.id)
        flash("Could not restore the student. Please try again.", "danger")
        return redirect(url_for('students.student_detail', student_id=student.id))

    flash(f"{student.full_name} restored.", "success")
    return redirect(url_for('students.student_detail', student_id=student.id))


@student_bp.route('/<int:student_id>/notes/new', methods=['GET', 'POST'])
@login_required
def new_note(student_id):
    student = db.get_or_404(Student, student_id)
    form = NoteForm()

    if form.validate_on_submit():
        try:
            add_note(student, form.category.data, form.content.data)
        except Exception:
            db.session.rollback()
            current_app.logger.exception("Failed to add note for student %s", student.id)
            flash("Could not save the note. Please try again.", "danger")
            return render_template('students/note_form.html', form=form, student=student), 500

        flash("Note added.", "success")
        return redirect(url_for('students.student_detail', student_id=student.id))

    status = 400 if request.method == 'POST' else 200
    return render_template('students/note_form.html', form=form, student=student), status
