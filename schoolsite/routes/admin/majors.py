from flask import Blueprint, render_template, request, flash, redirect, url_for
from flask_login import login_required
from schoolsite import db
from schoolsite.models.major import Major
from schoolsite.services.storage_service import ICON, PREVIEW_IMAGE, has_file
from schoolsite.utils.helpers import admin_required, not_found, paginate, record, save_changes, search_arg
from schoolsite.utils.slug import unique_slug
from schoolsite.utils.validators import FormValidator

bp = Blueprint('admin_majors', __name__, url_prefix='/admin/majors')

ICON_FOLDER = 'major/icons'
PREVIEW_FOLDER = 'major/previews'

def _validate(form):
    v = FormValidator(form)
    data = {
        'name': v.string('name', required=True, max_length=255),
        'description': v.string('description', required=True),
    }
    return data, v.errors

def _form_page(major, errors, status=200):
    return render_template('admin/majors/form.html', major=major,
                           form=request.form, errors=errors), status

def _apply_images(major, batch):
    icon = request.files.get('icon')
    if has_file(icon):
        major.icon = batch.replace(major.icon, icon, ICON, ICON_FOLDER, field='icon')
    preview = request.files.get('preview_image')
    if has_file(preview):
        major.preview_image = batch.replace(major.preview_image, preview, PREVIEW_IMAGE, PREVIEW_FOLDER, field='preview_image')

def _find(major_id):
    return db.session.get(Major, major_id)

@bp.route('/')
@login_required
@admin_required
def index():
    search = search_arg()
    query = Major.query
    if search:
        query = query.filter(Major.name.ilike(f"%{search}%"))
    majors = paginate(query.order_by(Major.created_at.desc(), Major.id.desc()))
    return render_template('admin/majors/index.html', majors=majors, filters={'search': search})

@bp.route('/create', methods=['GET', 'POST'])
@login_required
@admin_required
def create():
    if request.method == 'GET':
        return _form_page(None, {})

    data, errors = _validate(request.form)
    if errors:
        return _form_page(None, errors, 422)

    major = Major(slug=unique_slug(Major, data['name']), **data)

    def apply(batch):
        _apply_images(major, batch)
        db.session.add(major)

    ok, errors = save_changes(apply, 'Error creating major')
    if ok:
        record('create_major', f'Created major: {major.name}')
        flash('Major created successfully.', 'success')
        return redirect(url_for('admin_majors.index'))
    if errors is None:
        return redirect(url_for('admin_majors.index'))
    return _form_page(None, errors, 422)

@bp.route('/<int:major_id>/edit', methods=['GET', 'POST'])
@login_required
@admin_required
def edit(major_id):
    major = _find(major_id)
    if not major:
        return not_found('Major not found.', 'admin_majors.index')
    if request.method == 'GET':
        return _form_page(major, {})

    data, errors = _validate(request.form)
    if errors:
        return _form_page(major, errors, 422)

    def apply(batch):
        if data['name'] != major.name:
            major.slug = unique_slug(Major, data['name'], ignore_id=major.id)
        major.name = data['name']
        major.description = data['description']
        _apply_images(major, batch)

    ok, errors = save_changes(apply, 'Error updating major')
    if ok:
        record('update_major', f'Updated major: {major.name}')
        flash('Major updated successfully.', 'success')
        return redirect(url_for('admin_majors.index'))
    if errors is None:
        return redirect(url_for('admin_majors.index'))
    return _form_page(major, errors, 422)

@bp.route('/<int:major_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete(major_id):
    major = _find(major_id)
    if not major:
        return not_found('Major not found.', 'admin_majors.index')
    name = major.name

    def apply(batch):
        batch.discard(major.icon)
        batch.discard(major.preview_image)
        db.session.delete(major)

    ok, _ = save_changes(apply, 'Error deleting major')
    if ok:
        record('delete_major', f'Deleted major: {name}')
        flash('Major deleted successfully.', 'success')
    return redirect(url_for('admin_majors.index'))
