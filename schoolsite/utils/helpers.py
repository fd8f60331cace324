from functools import wraps

from flask import current_app, flash, redirect, request, url_for
from flask_login import current_user

from sqlalchemy.exc import SQLAlchemyError

from schoolsite import db
from schoolsite.models.user_activity import UserActivity
from schoolsite.services.storage_service import StorageError, UploadBatch, UploadValidationError


def log_activity(user_id, activity_type, description, ip_address=None):
    """Record an audit entry; a failure here never breaks the request"""
    try:
        activity = UserActivity(user_id=user_id, activity_type=activity_type, description=description, ip_address=ip_address)
        db.session.add(activity)
        db.session.commit()
        current_app.logger.info(f"[{activity_type}] {description}")
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error logging activity: {str(e)}")


def record(activity_type, description):
    """log_activity for the current user and request"""
    log_activity(current_user.id if current_user.is_authenticated else None,
                 activity_type, description, request.remote_addr)


def admin_required(view):
    """Restrict a back-office view to administrators (login is checked first)"""
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated:
            return current_app.login_manager.unauthorized()
        if not current_user.is_admin:
            flash('Unauthorized access', 'danger')
            return redirect(url_for('dashboard.index'))
        return view(*args, **kwargs)
    return wrapped


def page_arg():
    return request.args.get('page', 1, type=int) or 1


def paginate(query, per_page=None):
    """Paginate ``query`` using the ``page`` query arg; out-of-range pages are empty, not 404"""
    per_page = per_page or current_app.config.get('ITEMS_PER_PAGE', 10)
    return query.paginate(page=page_arg(), per_page=per_page, error_out=False)


def search_arg(name='search'):
    return request.args.get(name, '').strip()


def not_found(message, endpoint, **values):
    """Missing slug/id: tell the user and send them back to the listing"""
    flash(message, 'error')
    return redirect(url_for(endpoint, **values))


def save_changes(apply, failure_message):
    """Run ``apply(batch)`` and commit the session as one unit.

    Returns ``(ok, errors)``. Upload validation problems come back as a field
    errors dict; storage and database failures are logged and flashed and
    come back as ``(False, None)``. On any failure the session is rolled back
    and blobs written during the attempt are removed. Blobs queued as
    superseded are deleted only after a successful commit.
    """
    batch = UploadBatch()
    try:
        apply(batch)
        db.session.commit()
    except UploadValidationError as e:
        db.session.rollback()
        batch.rollback()
        return False, {e.field: e.message}
    except (StorageError, SQLAlchemyError) as e:
        db.session.rollback()
        batch.rollback()
        current_app.logger.error(f"{failure_message}: {str(e)}")
        flash(f'{failure_message}. Please try again.', 'danger')
        return False, None
    batch.commit()
    return True, {}
