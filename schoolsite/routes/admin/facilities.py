from flask import Blueprint, render_template, request, flash, redirect, url_for
from flask_login import login_required
from schoolsite import db
from schoolsite.models.facility import Facility
from schoolsite.services.storage_service import THUMBNAIL, has_file
from schoolsite.utils.helpers import admin_required, not_found, paginate, record, save_changes, search_arg
from schoolsite.utils.slug import unique_slug
from schoolsite.utils.validators import FormValidator

bp = Blueprint('admin_facilities', __name__, url_prefix='/admin/facilities')

IMAGE_FOLDER = 'facilities'

def _validate(form):
    v = FormValidator(form)
    data = {
        'name': v.string('name', required=True, max_length=255),
        'description': v.string('description'),
    }
    return data, v.errors

def _form_page(facility, errors, status=200):
    return render_template('admin/facilities/form.html', facility=facility,
                           form=request.form, errors=errors), status

def _apply(facility, data, batch):
    if data['name'] != facility.name:
        facility.slug = unique_slug(Facility, data['name'], ignore_id=facility.id)
    facility.name = data['name']
    facility.description = data['description']
    image = request.files.get('image')
    if has_file(image):
        facility.image = batch.replace(facility.image, image, THUMBNAIL, IMAGE_FOLDER, field='image')

@bp.route('/')
@login_required
@admin_required
def index():
    search = search_arg()
    query = Facility.query
    if search:
        query = query.filter(Facility.name.ilike(f"%{search}%"))
    facilities = paginate(query.order_by(Facility.created_at.desc(), Facility.id.desc()))
    return render_template('admin/facilities/index.html', facilities=facilities, filters={'search': search})

@bp.route('/create', methods=['GET', 'POST'])
@login_required
@admin_required
def create():
    if request.method == 'GET':
        return _form_page(None, {})

    data, errors = _validate(request.form)
    if errors:
        return _form_page(None, errors, 422)

    facility = Facility()

    def apply(batch):
        _apply(facility, data, batch)
        db.session.add(facility)

    ok, errors = save_changes(apply, 'Error creating facility')
    if ok:
        record('create_facility', f'Created facility: {facility.name}')
        flash('Facility created successfully.', 'success')
        return redirect(url_for('admin_facilities.index'))
    if errors is None:
        return redirect(url_for('admin_facilities.index'))
    return _form_page(None, errors, 422)

@bp.route('/<slug>/edit', methods=['GET', 'POST'])
@login_required
@admin_required
def edit(slug):
    facility = Facility.query.filter_by(slug=slug).first()
    if not facility:
        return not_found('Facility not found.', 'admin_facilities.index')
    if request.method == 'GET':
        return _form_page(facility, {})

    data, errors = _validate(request.form)
    if errors:
        return _form_page(facility, errors, 422)

    ok, errors = save_changes(lambda batch: _apply(facility, data, batch), 'Error updating facility')
    if ok:
        record('update_facility', f'Updated facility: {facility.name}')
        flash('Facility updated successfully.', 'success')
        return redirect(url_for('admin_facilities.index'))
    if errors is None:
        return redirect(url_for('admin_facilities.index'))
    return _form_page(facility, errors, 422)

@bp.route('/<slug>/delete', methods=['POST'])
@login_required
@admin_required
def delete(slug):
    facility = Facility.query.filter_by(slug=slug).first()
    if not facility:
        return not_found('Facility not found.', 'admin_facilities.index')
    name = facility.name

    def apply(batch):
        batch.discard(facility.image)
        db.session.delete(facility)

    ok, _ = save_changes(apply, 'Error deleting facility')
    if ok:
        record('delete_facility', f'Deleted facility: {name}')
        flash('Facility deleted successfully.', 'success')
    return redirect(url_for('admin_facilities.index'))
