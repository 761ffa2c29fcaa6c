from flask import Blueprint, render_template, redirect, url_for, flash, request, current_app
from flask_login import login_required

from forms import ThresholdsForm
from models import db
from utils.thresholds import load_thresholds, save_thresholds, DEFAULT_THRESHOLDS

settings_bp = Blueprint("settings", __name__, url_prefix="/settings")


@settings_bp.route('/', methods=['GET', 'POST'])
@login_required
def thresholds():
    form = ThresholdsForm()
    if request.method == 'GET':
        form.apply_config(load_thresholds())

    if form.validate_on_submit():
        try:
            save_thresholds(form.to_config())
        except Exception:
            db.session.rollback()
            current_app.logger.exception("Failed to save promotion thresholds")
            flash("Could not save thresholds. Please try again.", "danger")
        else:
            flash("Promotion thresholds saved.", "success")
            return redirect(url_for('settings.thresholds'))

    status = 400 if form.errors else 200
    return render_template('settings.html', form=form, defaults=DEFAULT_THRESHOLDS), status


@settings_bp.route('/reset', methods=['POST'])
@login_required
def reset_thresholds():
    try:
        save_thresholds(DEFAULT_THRESHOLDS)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to reset promotion thresholds")
        flash("Could not reset thresholds. Please try again.", "danger")
    else:
        flash("Promotion thresholds reset to defaults.", "info")
    return redirect(url_for('settings.thresholds'))
