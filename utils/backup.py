# utils/backup.py
import csv
import os
from datetime import datetime

from models import Student


def _timestamped_path(backup_dir, prefix):
    os.makedirs(backup_dir, exist_ok=True)
    timestamp = datetime.utcnow().strftime('%Y%m%d%H%M%S')
    filename = f'{prefix}_{timestamp}.csv'
    return filename, os.path.join(backup_dir, filename)


def backup_students_to_csv(backup_dir='backups', include_archived=True):
    filename, path = _timestamped_path(backup_dir, 'student_backup')

    query = Student.query
    if not include_archived:
        query = query.filter_by(is_active=True)
    students = query.order_by(Student.last_name, Student.first_name).all()

    with open(path, mode='w', newline='', encoding='utf-8') as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(['ID', 'First Name', 'Last Name', 'Email', 'Phone', 'Start Date', 'Belt', 'Stripes', 'Active'])

        for s in students:
            writer.writerow([
                s.id,
                s.first_name,
                s.last_name,
                s.email or '',
                s.phone or '',
                s.start_date.strftime('%Y-%m-%d') if s.start_date else '',
                s.current_belt,
                s.current_stripes,
                'Yes' if s.is_active else 'No',
            ])

    return filename


def export_promotion_report_csv(rows, backup_dir='backups'):
    """Write (student, status) pairs from compute_all_statuses to a CSV file."""
    filename, path = _timestamped_path(backup_dir, 'promotion_report')

    with open(path, mode='w', newline='', encoding='utf-8') as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow([
            'Student', 'Belt', 'Stripes', 'Last Promotion', 'Days Since',
            'Classes Since', 'Next Threshold', 'Progress %', 'Stripe Due', 'Belt Eligible',
        ])

        for student, status in rows:
            writer.writerow([
                student.full_name,
                student.current_belt,
                student.current_stripes,
                status.last_promotion_date.strftime('%Y-%m-%d'),
                status.days_since_promotion,
                status.classes_since_promotion,
                '' if status.next_threshold is None else status.next_threshold,
                status.progress,
                'Yes' if status.stripe_due else 'No',
                'Yes' if status.belt_eligible else 'No',
            ])

    return filename
