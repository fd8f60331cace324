from flask import Blueprint, render_template, request, flash, redirect, url_for
from flask_login import login_required, current_user
from sqlalchemy import or_
from schoolsite import db
from schoolsite.models.user import User
from schoolsite.utils.helpers import admin_required, not_found, paginate, record, save_changes, search_arg
from schoolsite.utils.validators import FormValidator, PasswordValidator

bp = Blueprint('admin_users', __name__, url_prefix='/admin/users')

ROLES = ('admin', 'editor')

def _validate(form, user=None):
    v = FormValidator(form)
    data = {
        'name': v.string('name', required=True, max_length=64),
        'email': v.email('email', required=True),
        'role': v.choice('role', ROLES),
    }
    if data['email'] and 'email' not in v.errors:
        existing = User.query.filter_by(email=data['email']).first()
        if existing and (user is None or existing.id != user.id):
            v.add_error('email', 'The email has already been taken.')

    password = form.get('password') or ''
    if user is None or password:
        is_valid, issues = PasswordValidator().validate_password(password)
        if not is_valid:
            v.add_error('password', issues[0])
        elif password != form.get('password_confirmation', ''):
            v.add_error('password', 'The password confirmation does not match.')
    data['password'] = password or None
    return data, v.errors

def _form_page(user, errors, status=200):
    return render_template('admin/users/form.html', user=user, roles=ROLES,
                           form=request.form, errors=errors), status

def _apply(user, data):
    user.name = data['name']
    user.email = data['email']
    user.is_admin = data['role'] == 'admin'
    if data['password']:
        user.set_password(data['password'])

@bp.route('/')
@login_required
@admin_required
def index():
    search = search_arg()
    role = request.args.get('role', '').strip()
    query = User.query
    if search:
        query = query.filter(or_(User.name.ilike(f"%{search}%"), User.email.ilike(f"%{search}%")))
    if role in ROLES:
        query = query.filter(User.is_admin == (role == 'admin'))
    users = paginate(query.order_by(User.created_at.desc(), User.id.desc()))
    return render_template('admin/users/index.html', users=users, roles=ROLES,
                           filters={'search': search, 'role': role})

@bp.route('/create', methods=['GET', 'POST'])
@login_required
@admin_required
def create():
    if request.method == 'GET':
        return _form_page(None, {})

    data, errors = _validate(request.form)
    if errors:
        return _form_page(None, errors, 422)

    user = User()

    def apply(batch):
        _apply(user, data)
        db.session.add(user)

    ok, _ = save_changes(apply, 'Error creating user')
    if ok:
        record('create_user', f'Created user: {user.email} ({user.role})')
        flash('User created successfully.', 'success')
    return redirect(url_for('admin_users.index'))

@bp.route('/<int:user_id>')
@login_required
@admin_required
def show(user_id):
    user = db.session.get(User, user_id)
    if not user:
        return not_found('User not found.', 'admin_users.index')
    return render_template('admin/users/show.html', user=user)

@bp.route('/<int:user_id>/edit', methods=['GET', 'POST'])
@login_required
@admin_required
def edit(user_id):
    user = db.session.get(User, user_id)
    if not user:
        return not_found('User not found.', 'admin_users.index')
    if request.method == 'GET':
        return _form_page(user, {})

    data, errors = _validate(request.form, user)
    if errors:
        return _form_page(user, errors, 422)

    ok, _ = save_changes(lambda batch: _apply(user, data), 'Error updating user')
    if ok:
        record('update_user', f'Updated user: {user.email}')
        flash('User updated successfully.', 'success')
    return redirect(url_for('admin_users.index'))

@bp.route('/<int:user_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete(user_id):
    user = db.session.get(User, user_id)
    if not user:
        return not_found('User not found.', 'admin_users.index')
    if user.id == current_user.id:
        flash('You cannot delete your own account.', 'danger')
        return redirect(url_for('admin_users.index'))
    email = user.email

    ok, _ = save_changes(lambda batch: db.session.delete(user), 'Error deleting user')
    if ok:
        record('delete_user', f'Deleted user: {email}')
        flash('User deleted successfully.', 'success')
    return redirect(url_for('admin_users.index'))
