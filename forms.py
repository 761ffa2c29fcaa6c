from datetime import date

from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField, SelectField, DateField, TextAreaField, BooleanField, IntegerField, HiddenField
from wtforms.validators import DataRequired, Length, InputRequired, Email, Optional, NumberRange, ValidationError

from utils.thresholds import ThresholdConfig
from utils.ranks import (
    BELT_PROGRESSION, TERMINAL_BELT, get_belt_choices, get_stripe_choices,
    get_class_type_choices, get_note_category_choices,
)


class LoginForm(FlaskForm):
    password = PasswordField("Password", validators=[DataRequired()])
    next = HiddenField()
    submit = SubmitField("Sign in")


class StudentForm(FlaskForm):
    first_name = StringField('First Name', validators=[InputRequired(), Length(min=1, max=100)])
    last_name = StringField('Last Name', validators=[InputRequired(), Length(min=1, max=100)])
    email = StringField('Email', validators=[Optional(), Email(), Length(max=120)])
    phone = StringField('Phone', validators=[Optional(), Length(max=30)])
    emergency_contact = StringField('Emergency Contact', validators=[Optional(), Length(max=100)])
    emergency_phone = StringField('Emergency Phone', validators=[Optional(), Length(max=30)])
    start_date = DateField('Start Date', format='%Y-%m-%d', default=date.today, validators=[InputRequired()])
    current_belt = SelectField('Belt', choices=get_belt_choices(), default='white', validators=[InputRequired()])
    current_stripes = SelectField('Stripes', choices=get_stripe_choices(), default=0, coerce=int)
    submit = SubmitField('Save')

    def student_data(self):
        return {
            'first_name': self.first_name.data,
            'last_name': self.last_name.data,
            'email': self.email.data,
            'phone': self.phone.data,
            'emergency_contact': self.emergency_contact.data,
            'emergency_phone': self.emergency_phone.data,
            'start_date': self.start_date.data,
            'current_belt': self.current_belt.data,
            'current_stripes': self.current_stripes.data,
        }

    def validate_start_date(self, field):
        if field.data and field.data > date.today():
            raise ValidationError("Start date can't be in the future.")


class NewStudentForm(StudentForm):
    # Only used for students who already hold a rank when they join
    last_promoted_date = DateField('Last Promoted', format='%Y-%m-%d', validators=[Optional()])

    def validate_last_promoted_date(self, field):
        if field.data and field.data > date.today():
            raise ValidationError("Last promotion date can't be in the future.")


class NoteForm(FlaskForm):
    category = SelectField('Category', choices=get_note_category_choices(), default='general')
    content = TextAreaField('Note', validators=[InputRequired(), Length(max=5000)])
    submit = SubmitField('Add Note')


class PromotionForm(FlaskForm):
    to_belt = SelectField('New Belt', choices=get_belt_choices(), validators=[InputRequired()])
    to_stripes = SelectField('New Stripes', choices=get_stripe_choices(), coerce=int)
    notes = TextAreaField('Notes', validators=[Optional(), Length(max=2000)])
    # Set once the instructor has seen a non-standard promotion warning
    confirmed = BooleanField('I understand this is a non-standard promotion')
    submit = SubmitField('Record Promotion')


class CheckInForm(FlaskForm):
    student_id = HiddenField(validators=[DataRequired()])
    date = DateField('Date', format='%Y-%m-%d', validators=[InputRequired()])
    class_type = SelectField('Class', choices=get_class_type_choices(), default='gi')


class ThresholdsForm(FlaskForm):
    # Classes needed for each stripe at a belt
    stripe_white = IntegerField('White Belt', validators=[InputRequired(), NumberRange(min=1, max=10000)])
    stripe_blue = IntegerField('Blue Belt', validators=[InputRequired(), NumberRange(min=1, max=10000)])
    stripe_purple = IntegerField('Purple Belt', validators=[InputRequired(), NumberRange(min=1, max=10000)])
    stripe_brown = IntegerField('Brown Belt', validators=[InputRequired(), NumberRange(min=1, max=10000)])
    stripe_black = IntegerField('Black Belt', validators=[InputRequired(), NumberRange(min=1, max=10000)])

    # Classes needed at 4 stripes before the next belt (none after black)
    belt_white = IntegerField('White to Blue', validators=[InputRequired(), NumberRange(min=1, max=10000)])
    belt_blue = IntegerField('Blue to Purple', validators=[InputRequired(), NumberRange(min=1, max=10000)])
    belt_purple = IntegerField('Purple to Brown', validators=[InputRequired(), NumberRange(min=1, max=10000)])
    belt_brown = IntegerField('Brown to Black', validators=[InputRequired(), NumberRange(min=1, max=10000)])

    submit = SubmitField('Save Thresholds')

    def apply_config(self, config):
        for belt in BELT_PROGRESSION:
            getattr(self, f'stripe_{belt.value}').data = config.stripe_threshold(belt)
            if belt != TERMINAL_BELT:
                getattr(self, f'belt_{belt.value}').data = config.belt_threshold(belt)

    def to_config(self):
        return ThresholdConfig(
            stripe_thresholds={belt: getattr(self, f'stripe_{belt.value}').data for belt in BELT_PROGRESSION},
            belt_thresholds={
                belt: getattr(self, f'belt_{belt.value}').data
                for belt in BELT_PROGRESSION if belt != TERMINAL_BELT
            },
        )
