from flask import Blueprint, render_template, redirect, url_for, flash, request, current_app
from flask_login import login_user, logout_user, login_required
from werkzeug.security import generate_password_hash, check_password_hash

from forms import LoginForm
from models import AdminUser
from utils.extensions import login_manager

auth_bp = Blueprint('auth', __name__)


def init_auth(app):
    """Hash the shared admin password, or switch login off when none is set."""
    password = app.config.get('ADMIN_PASSWORD')
    if not password:
        app.config['LOGIN_DISABLED'] = True
        app.logger.warning("ADMIN_PASSWORD not set - authentication disabled")
        return
    app.config['ADMIN_PASSWORD_HASH'] = generate_password_hash(password)


def validate_password(password):
    password_hash = current_app.config.get('ADMIN_PASSWORD_HASH')
    if not password_hash:
        return True
    return check_password_hash(password_hash, password or '')


def _safe_next(target):
    # Only follow relative paths back into this app
    if target and target.startswith('/') and not target.startswith('//'):
        return target
    return None


@login_manager.user_loader
def load_user(user_id):
    if user_id == AdminUser().get_id():
        return AdminUser()
    return None


@login_manager.unauthorized_handler
def unauthorized_callback():
    return redirect(url_for('auth.login', next=request.path))


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    form = LoginForm()
    if request.method == 'GET':
        form.next.data = request.args.get('next', '')

    if form.validate_on_submit():
        if validate_password(form.password.data):
            login_user(AdminUser(), remember=True)
            current_app.logger.info("Admin signed in")
            return redirect(_safe_next(form.next.data) or url_for('dashboard'))

        current_app.logger.warning("Failed sign-in attempt from %s", request.remote_addr)
        flash("Invalid password.", "danger")
        return render_template('login.html', form=form), 401

    return render_template('login.html', form=form)


@auth_bp.route('/logout', methods=['POST', 'GET'])
@login_required
def logout():
    logout_user()
    flash("You have been logged out.", "info")
    return redirect(url_for('auth.login'))
