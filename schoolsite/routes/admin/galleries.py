from flask import Blueprint, render_template, request, flash, redirect, url_for
from flask_login import login_required
from schoolsite import db
from schoolsite.models.gallery import Gallery, GalleryImage
from schoolsite.services.storage_service import GALLERY_IMAGE, has_file
from schoolsite.utils.helpers import not_found, paginate, record, save_changes, search_arg
from schoolsite.utils.slug import unique_slug
from schoolsite.utils.validators import FormValidator

bp = Blueprint('admin_galleries', __name__, url_prefix='/admin/galleries')

IMAGE_FOLDER = 'galleries'

def _validate(form):
    v = FormValidator(form)
    data = {
        'title': v.string('title', required=True, max_length=255),
        'description': v.string('description'),
    }
    return data, v.errors

def _form_page(gallery, errors, status=200):
    return render_template('admin/galleries/form.html', gallery=gallery,
                           form=request.form, errors=errors), status

def _attach_images(gallery, batch):
    for index, file in enumerate(request.files.getlist('images')):
        if has_file(file):
            reference = batch.store(file, GALLERY_IMAGE, IMAGE_FOLDER, field=f'images.{index}')
            gallery.images.append(GalleryImage(image=reference))

@bp.route('/')
@login_required
def index():
    search = search_arg()
    query = Gallery.query
    if search:
        query = query.filter(Gallery.title.ilike(f"%{search}%"))
    galleries = paginate(query.order_by(Gallery.created_at.desc(), Gallery.id.desc()))
    return render_template('admin/galleries/index.html', galleries=galleries, filters={'search': search})

@bp.route('/create', methods=['GET', 'POST'])
@login_required
def create():
    if request.method == 'GET':
        return _form_page(None, {})

    data, errors = _validate(request.form)
    if errors:
        return _form_page(None, errors, 422)

    gallery = Gallery(slug=unique_slug(Gallery, data['title']), **data)

    def apply(batch):
        db.session.add(gallery)
        _attach_images(gallery, batch)

    ok, errors = save_changes(apply, 'Error creating gallery')
    if ok:
        record('create_gallery', f'Created gallery: {gallery.title} ({len(gallery.images)} images)')
        flash('Gallery created successfully.', 'success')
        return redirect(url_for('admin_galleries.index'))
    if errors is None:
        return redirect(url_for('admin_galleries.index'))
    return _form_page(None, errors, 422)

@bp.route('/<slug>')
@login_required
def show(slug):
    gallery = Gallery.query.filter_by(slug=slug).first()
    if not gallery:
        return not_found('Gallery not found.', 'admin_galleries.index')
    return render_template('admin/galleries/show.html', gallery=gallery)

@bp.route('/<slug>/edit', methods=['GET', 'POST'])
@login_required
def edit(slug):
    gallery = Gallery.query.filter_by(slug=slug).first()
    if not gallery:
        return not_found('Gallery not found.', 'admin_galleries.index')
    if request.method == 'GET':
        return _form_page(gallery, {})

    data, errors = _validate(request.form)
    if errors:
        return _form_page(gallery, errors, 422)

    def apply(batch):
        if data['title'] != gallery.title:
            gallery.slug = unique_slug(Gallery, data['title'], ignore_id=gallery.id)
        gallery.title = data['title']
        gallery.description = data['description']
        _attach_images(gallery, batch)

    ok, errors = save_changes(apply, 'Error updating gallery')
    if ok:
        record('update_gallery', f'Updated gallery: {gallery.title}')
        flash('Gallery updated successfully.', 'success')
        return redirect(url_for('admin_galleries.index'))
    if errors is None:
        return redirect(url_for('admin_galleries.index'))
    return _form_page(gallery, errors, 422)

@bp.route('/<slug>/delete', methods=['POST'])
@login_required
def delete(slug):
    gallery = Gallery.query.filter_by(slug=slug).first()
    if not gallery:
        return not_found('Gallery not found.', 'admin_galleries.index')
    title = gallery.title

    def apply(batch):
        for image in gallery.images:
            batch.discard(image.image)
        db.session.delete(gallery)

    ok, _ = save_changes(apply, 'Error deleting gallery')
    if ok:
        record('delete_gallery', f'Deleted gallery: {title}')
        flash('Gallery deleted successfully.', 'success')
    return redirect(url_for('admin_galleries.index'))

@bp.route('/image/<int:image_id>/delete', methods=['POST'])
@login_required
def delete_image(image_id):
    image = db.session.get(GalleryImage, image_id)
    if not image:
        flash('Image not found.', 'error')
        return redirect(request.referrer or url_for('admin_galleries.index'))
    gallery_slug = image.gallery.slug

    def apply(batch):
        batch.discard(image.image)
        db.session.delete(image)

    ok, _ = save_changes(apply, 'Error deleting image')
    if ok:
        record('delete_gallery_image', f'Deleted an image from gallery {gallery_slug}')
        flash('Image deleted successfully.', 'success')
    return redirect(url_for('admin_galleries.edit', slug=gallery_slug))
