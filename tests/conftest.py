from datetime import date, timedelta

import pytest

from app import create_app
from config import TestConfig
from models import Student, Attendance, Promotion
from utils.extensions import db

TODAY = date(2026, 10, 19)


@pytest.fixture
def app(tmp_path):
    class Config(TestConfig):
        BACKUP_FOLDER = str(tmp_path / "backups")

    app = create_app(Config)
    ctx = app.app_context()
    ctx.push()
    yield app
    db.session.remove()
    db.drop_all()
    ctx.pop()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    response = client.post('/login', data={'password': TestConfig.ADMIN_PASSWORD})
    assert response.status_code == 302
    return client


@pytest.fixture
def make_student(app):
    def _make(first_name="Sam", last_name="Rivera", belt="white", stripes=0,
              start_date=TODAY - timedelta(days=365), is_active=True):
        student = Student(
            first_name=first_name,
            last_name=last_name,
            current_belt=belt,
            current_stripes=stripes,
            start_date=start_date,
            is_active=is_active,
        )
        db.session.add(student)
        db.session.commit()
        return student
    return _make


@pytest.fixture
def add_attendance(app):
    def _add(student, days, class_type="gi"):
        """Check `student` in on each date in `days`."""
        for day in days:
            db.session.add(Attendance(student_id=student.id, date=day, class_type=class_type))
        db.session.commit()
    return _add


@pytest.fixture
def add_promotion(app):
    def _add(student, promoted_at, from_belt="white", from_stripes=0, to_belt="white", to_stripes=1):
        promotion = Promotion(
            student_id=student.id,
            from_belt=from_belt,
            from_stripes=from_stripes,
            to_belt=to_belt,
            to_stripes=to_stripes,
            promoted_at=promoted_at,
        )
        db.session.add(promotion)
        db.session.commit()
        return promotion
    return _add


def consecutive_days(start, count):
    return [start + timedelta(days=i) for i in range(count)]
