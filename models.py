from datetime import datetime, date

from flask_login import UserMixin

from utils.extensions import db
from utils.ranks import Belt, as_belt, BELT_LABELS, CLASS_TYPE_LABELS, NOTE_CATEGORY_LABELS


class AdminUser(UserMixin):
    """The single shared-password administrator. Not stored in the database."""

    id = "admin"

    def get_id(self):
        return f"admin:{self.id}"

    @property
    def role(self):
        return 'admin'


class Student(db.Model):
    __tablename__ = 'students'

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120))
    phone = db.Column(db.String(30))
    emergency_contact = db.Column(db.String(100))
    emergency_phone = db.Column(db.String(30))
    start_date = db.Column(db.Date, nullable=False, default=date.today)
    current_belt = db.Column(db.String(10), nullable=False, default=Belt.WHITE.value)
    current_stripes = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    attendance = db.relationship('Attendance', back_populates='student', cascade='all, delete-orphan', lazy='dynamic')
    promotions = db.relationship('Promotion', back_populates='student', cascade='all, delete-orphan', lazy='dynamic')
    notes = db.relationship('Note', back_populates='student', cascade='all, delete-orphan', lazy='dynamic')

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def belt(self) -> Belt:
        return as_belt(self.current_belt)

    @property
    def belt_label(self):
        return BELT_LABELS[self.belt]

    def __repr__(self):
        return f"<Student {self.id} {self.full_name} {self.current_belt}/{self.current_stripes}>"


class Attendance(db.Model):
    __tablename__ = 'attendance'
    # One check-in per student, day and class type
    __table_args__ = (
        db.UniqueConstraint('student_id', 'date', 'class_type', name='uq_attendance_student_date_type'),
    )

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False, index=True)
    class_type = db.Column(db.String(20), nullable=False, default='gi')
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    student = db.relationship('Student', back_populates='attendance')

    @property
    def class_type_label(self):
        return CLASS_TYPE_LABELS.get(self.class_type, self.class_type)


class Promotion(db.Model):
    __tablename__ = 'promotions'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False, index=True)
    from_belt = db.Column(db.String(10), nullable=False)
    from_stripes = db.Column(db.Integer, nullable=False)
    to_belt = db.Column(db.String(10), nullable=False)
    to_stripes = db.Column(db.Integer, nullable=False)
    promoted_at = db.Column(db.Date, nullable=False, default=date.today)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    student = db.relationship('Student', back_populates='promotions')

    @property
    def is_belt_change(self):
        return self.from_belt != self.to_belt


class Note(db.Model):
    __tablename__ = 'notes'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False, index=True)
    category = db.Column(db.String(20), nullable=False, default='general')
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    student = db.relationship('Student', back_populates='notes')

    @property
    def category_label(self):
        return NOTE_CATEGORY_LABELS.get(self.category, self.category)


class Setting(db.Model):
    __tablename__ = 'settings'

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text, nullable=False)  # JSON string

    def __repr__(self):
        return f"<Setting {self.key}>"
