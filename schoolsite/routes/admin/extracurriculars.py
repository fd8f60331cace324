from flask import Blueprint, render_template, request, flash, redirect, url_for
from flask_login import login_required
from schoolsite import db
from schoolsite.models.extracurricular import Extracurricular, EXTRACURRICULAR_CATEGORIES
from schoolsite.services.storage_service import THUMBNAIL, has_file
from schoolsite.utils.helpers import admin_required, not_found, paginate, record, save_changes, search_arg
from schoolsite.utils.validators import FormValidator

bp = Blueprint('admin_extracurriculars', __name__, url_prefix='/admin/extracurriculars')

THUMBNAIL_FOLDER = 'extracurricular/thumbnails'

def _validate(form):
    v = FormValidator(form)
    data = {
        'name': v.string('name', required=True, max_length=255),
        'description': v.string('description', required=True),
        'category': v.choice('category', EXTRACURRICULAR_CATEGORIES),
    }
    return data, v.errors

def _form_page(extracurricular, errors, status=200):
    return render_template('admin/extracurriculars/form.html', extracurricular=extracurricular,
                           categories=EXTRACURRICULAR_CATEGORIES, form=request.form, errors=errors), status

def _apply(extracurricular, data, batch):
    for field, value in data.items():
        setattr(extracurricular, field, value)
    thumbnail = request.files.get('thumbnail')
    if has_file(thumbnail):
        extracurricular.thumbnail = batch.replace(extracurricular.thumbnail, thumbnail, THUMBNAIL,
                                                  THUMBNAIL_FOLDER, field='thumbnail')

@bp.route('/')
@login_required
@admin_required
def index():
    search = search_arg()
    category = request.args.get('category', 'all').strip() or 'all'
    query = Extracurricular.query
    if search:
        query = query.filter(Extracurricular.name.ilike(f"%{search}%"))
    if category != 'all':
        query = query.filter(Extracurricular.category == category)
    extracurriculars = paginate(query.order_by(Extracurricular.created_at.desc(), Extracurricular.id.desc()))
    return render_template('admin/extracurriculars/index.html', extracurriculars=extracurriculars,
                           categories=EXTRACURRICULAR_CATEGORIES,
                           filters={'search': search, 'category': category})

@bp.route('/create', methods=['GET', 'POST'])
@login_required
@admin_required
def create():
    if request.method == 'GET':
        return _form_page(None, {})

    data, errors = _validate(request.form)
    if errors:
        return _form_page(None, errors, 422)

    extracurricular = Extracurricular()

    def apply(batch):
        _apply(extracurricular, data, batch)
        db.session.add(extracurricular)

    ok, errors = save_changes(apply, 'Error creating extracurricular')
    if ok:
        record('create_extracurricular', f'Created extracurricular: {extracurricular.name}')
        flash('Extracurricular created successfully.', 'success')
        return redirect(url_for('admin_extracurriculars.index'))
    if errors is None:
        return redirect(url_for('admin_extracurriculars.index'))
    return _form_page(None, errors, 422)

@bp.route('/<int:extracurricular_id>/edit', methods=['GET', 'POST'])
@login_required
@admin_required
def edit(extracurricular_id):
    extracurricular = db.session.get(Extracurricular, extracurricular_id)
    if not extracurricular:
        return not_found('Extracurricular not found.', 'admin_extracurriculars.index')
    if request.method == 'GET':
        return _form_page(extracurricular, {})

    data, errors = _validate(request.form)
    if errors:
        return _form_page(extracurricular, errors, 422)

    ok, errors = save_changes(lambda batch: _apply(extracurricular, data, batch), 'Error updating extracurricular')
    if ok:
        record('update_extracurricular', f'Updated extracurricular: {extracurricular.name}')
        flash('Extracurricular updated successfully.', 'success')
        return redirect(url_for('admin_extracurriculars.index'))
    if errors is None:
        return redirect(url_for('admin_extracurriculars.index'))
    return _form_page(extracurricular, errors, 422)

@bp.route('/<int:extracurricular_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete(extracurricular_id):
    extracurricular = db.session.get(Extracurricular, extracurricular_id)
    if not extracurricular:
        return not_found('Extracurricular not found.', 'admin_extracurriculars.index')
    name = extracurricular.name

    def apply(batch):
        batch.discard(extracurricular.thumbnail)
        db.session.delete(extracurricular)

    ok, _ = save_changes(apply, 'Error deleting extracurricular')
    if ok:
        record('delete_extracurricular', f'Deleted extracurricular: {name}')
        flash('Extracurricular deleted successfully.', 'success')
    return redirect(url_for('admin_extracurriculars.index'))
