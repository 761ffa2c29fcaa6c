from datetime import date

from flask import Blueprint, render_template, redirect, url_for, flash, request, jsonify, current_app, send_from_directory, abort
from flask_login import login_required

from utils.backup import export_promotion_report_csv, backup_students_to_csv
from utils.promotion import compute_all_statuses, promotion_summary
from utils.reports import attendance_by_day, attendance_stats, inactive_students, years_ago
from utils.serializers import serialize_status

report_bp = Blueprint("reports", __name__, url_prefix="/reports")

PROMOTION_FILTERS = {
    'stripe': lambda status: status.stripe_due,
    'belt': lambda status: status.belt_eligible,
}


def _sorted_rows(rows):
    # Closest to their next promotion first
    return sorted(rows, key=lambda row: (-row[1].progress, row[0].last_name, row[0].first_name))


@report_bp.route('/')
@login_required
def attendance_report():
    today = date.today()
    rows = attendance_by_day(years_ago(today, 1))

    return render_template(
        'reports/index.html',
        attendance_rows=rows,
        stats=attendance_stats(rows),
        inactive=inactive_students(today),
    )


@report_bp.route('/promotions')
@login_required
def promotions_report():
    rows = compute_all_statuses()
    summary = promotion_summary(rows)

    selected = request.args.get('filter', '')
    if selected and selected not in PROMOTION_FILTERS:
        abort(400)
    if selected:
        rows = [row for row in rows if PROMOTION_FILTERS[selected](row[1])]

    return render_template('reports/promotions.html', rows=_sorted_rows(rows), summary=summary, selected=selected)


@report_bp.route('/promotions.json')
@login_required
def promotions_json():
    rows = compute_all_statuses()
    return jsonify({
        'summary': promotion_summary(rows),
        'students': [serialize_status(student, status) for student, status in _sorted_rows(rows)],
    })


@report_bp.route('/promotions/export', methods=['POST'])
@login_required
def export_promotions():
    try:
        filename = export_promotion_report_csv(compute_all_statuses(), current_app.config['BACKUP_FOLDER'])
    except OSError:
        current_app.logger.exception("Failed to export promotion report")
        flash("Could not write the export file.", "danger")
        return redirect(url_for('reports.promotions_report'))

    current_app.logger.info("Promotion report exported to %s", filename)
    return redirect(url_for('reports.download_export', filename=filename))


@report_bp.route('/students/backup', methods=['POST'])
@login_required
def backup_students():
    try:
        filename = backup_students_to_csv(current_app.config['BACKUP_FOLDER'])
    except OSError:
        current_app.logger.exception("Failed to back up students")
        flash("Could not write the backup file.", "danger")
        return redirect(url_for('students.list_students'))

    current_app.logger.info("Student roster backed up to %s", filename)
    return redirect(url_for('reports.download_export', filename=filename))


@report_bp.route('/download/<path:filename>')
@login_required
def download_export(filename):
    return send_from_directory(current_app.config['BACKUP_FOLDER'], filename, as_attachment=True)
