from flask import Blueprint, render_template, request, flash, redirect, url_for
from flask_login import login_required
from schoolsite import db
from schoolsite.models.banner import Banner
from schoolsite.services.storage_service import BANNER_IMAGE, has_file
from schoolsite.utils.helpers import admin_required, not_found, paginate, record, save_changes, search_arg
from schoolsite.utils.validators import FormValidator

bp = Blueprint('admin_banners', __name__, url_prefix='/admin/banners')

IMAGE_FOLDER = 'banners'

def _validate(form, creating):
    v = FormValidator(form)
    data = {
        'title': v.string('title', required=True, max_length=255),
        'description': v.string('description'),
        'link': v.url('link'),
        'is_active': v.boolean('is_active'),
        'order': v.integer('order', minimum=0, default=0),
    }
    if creating and not has_file(request.files.get('image')):
        v.add_error('image', 'The image field is required.')
    return data, v.errors

def _form_page(banner, errors, status=200):
    return render_template('admin/banners/form.html', banner=banner,
                           form=request.form, errors=errors), status

def _apply(banner, data, batch):
    for field, value in data.items():
        setattr(banner, field, value)
    image = request.files.get('image')
    if has_file(image):
        banner.image = batch.replace(banner.image, image, BANNER_IMAGE, IMAGE_FOLDER, field='image')

@bp.route('/')
@login_required
@admin_required
def index():
    search = search_arg()
    is_active = request.args.get('is_active', '').strip()
    query = Banner.query
    if search:
        query = query.filter(Banner.title.ilike(f"%{search}%"))
    if is_active in ('0', '1'):
        query = query.filter(Banner.is_active == (is_active == '1'))
    banners = paginate(query.order_by(Banner.order, Banner.created_at.desc()))
    return render_template('admin/banners/index.html', banners=banners,
                           filters={'search': search, 'is_active': is_active})

@bp.route('/create', methods=['GET', 'POST'])
@login_required
@admin_required
def create():
    if request.method == 'GET':
        return _form_page(None, {})

    data, errors = _validate(request.form, creating=True)
    if errors:
        return _form_page(None, errors, 422)

    banner = Banner()

    def apply(batch):
        _apply(banner, data, batch)
        db.session.add(banner)

    ok, errors = save_changes(apply, 'Error creating banner')
    if ok:
        record('create_banner', f'Created banner: {banner.title}')
        flash('Banner created successfully.', 'success')
        return redirect(url_for('admin_banners.index'))
    if errors is None:
        return redirect(url_for('admin_banners.index'))
    return _form_page(None, errors, 422)

@bp.route('/<int:banner_id>/edit', methods=['GET', 'POST'])
@login_required
@admin_required
def edit(banner_id):
    banner = db.session.get(Banner, banner_id)
    if not banner:
        return not_found('Banner not found.', 'admin_banners.index')
    if request.method == 'GET':
        return _form_page(banner, {})

    data, errors = _validate(request.form, creating=False)
    if errors:
        return _form_page(banner, errors, 422)

    ok, errors = save_changes(lambda batch: _apply(banner, data, batch), 'Error updating banner')
    if ok:
        record('update_banner', f'Updated banner: {banner.title}')
        flash('Banner updated successfully.', 'success')
        return redirect(url_for('admin_banners.index'))
    if errors is None:
        return redirect(url_for('admin_banners.index'))
    return _form_page(banner, errors, 422)

@bp.route('/<int:banner_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete(banner_id):
    banner = db.session.get(Banner, banner_id)
    if not banner:
        return not_found('Banner not found.', 'admin_banners.index')
    title = banner.title

    def apply(batch):
        batch.discard(banner.image)
        db.session.delete(banner)

    ok, _ = save_changes(apply, 'Error deleting banner')
    if ok:
        record('delete_banner', f'Deleted banner: {title}')
        flash('Banner deleted successfully.', 'success')
    return redirect(url_for('admin_banners.index'))
