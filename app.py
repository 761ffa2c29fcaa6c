from datetime import date
import logging

import click
from flask import Flask, render_template
from flask_login import login_required
from flask_wtf.csrf import generate_csrf

from config import Config
from utils.extensions import db, migrate, login_manager, csrf
from utils.helpers import format_date
from utils.promotion import compute_all_statuses, promotion_summary
from utils.ranks import CLASS_TYPE_LABELS, as_belt
from utils.reports import dashboard_stats

# Import blueprints after the extensions they register against
from student_routes import student_bp
from attendance_routes import attendance_bp
from report_routes import report_bp
from settings_routes import settings_bp
from utils.auth_routes import auth_bp, init_auth


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, app.config.get('LOG_LEVEL', 'INFO'), logging.INFO))

    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    login_manager.init_app(app)
    init_auth(app)

    app.register_blueprint(auth_bp)  # no prefix
    app.register_blueprint(student_bp, url_prefix="/students")
    app.register_blueprint(attendance_bp, url_prefix="/attendance")
    app.register_blueprint(report_bp, url_prefix="/reports")
    app.register_blueprint(settings_bp, url_prefix="/settings")

    @app.context_processor
    def template_helpers():
        return dict(
            csrf_token=generate_csrf,
            class_type_labels=CLASS_TYPE_LABELS,
        )

    app.add_template_filter(format_date, 'date')
    app.add_template_filter(lambda value: as_belt(value).label, 'belt_label')

    @app.after_request
    def set_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        return response

    @app.route('/')
    @login_required
    def dashboard():
        today = date.today()
        summary = promotion_summary(compute_all_statuses(today=today))
        return render_template('dashboard.html', stats=dashboard_stats(today), summary=summary, today=today)

    @app.cli.command('init-db')
    def init_db_command():
        """Create all tables."""
        db.create_all()
        click.echo("Database initialised.")

    with app.app_context():
        db.create_all()

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=False)
