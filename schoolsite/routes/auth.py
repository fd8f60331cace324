from urllib.parse import urlparse

from flask import Blueprint, render_template, redirect, url_for, flash, request
from flask_login import login_user, logout_user, login_required, current_user
from schoolsite.models.user import User
from schoolsite.utils.helpers import log_activity

bp = Blueprint('auth', __name__, url_prefix='/auth')

def _safe_next(target):
    """Only allow relative redirects after login"""
    if not target:
        return None
    parsed = urlparse(target)
    if parsed.scheme or parsed.netloc:
        return None
    return target

@bp.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('dashboard.index'))

    if request.method == 'POST':
        email = (request.form.get('email') or '').strip()
        password = request.form.get('password')
        user = User.query.filter_by(email=email).first()

        if user and user.check_password(password):
            login_user(user, remember=bool(request.form.get('remember')))
            log_activity(user.id, 'login', f'User logged in: {email}', request.remote_addr)
            next_page = _safe_next(request.args.get('next'))
            return redirect(next_page or url_for('dashboard.index'))

        flash('Invalid email or password', 'danger')
        log_activity(user.id if user else None, 'login_failed', f'Failed login attempt for {email}', request.remote_addr)
        return render_template('auth/login.html', email=email), 401

    return render_template('auth/login.html')

@bp.route('/logout', methods=['GET', 'POST'])
@login_required
def logout():
    log_activity(current_user.id, 'logout', f'User logged out: {current_user.email}', request.remote_addr)
    logout_user()
    flash('You have been logged out.', 'info')
    return redirect(url_for('auth.login'))
