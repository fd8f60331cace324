from flask import Blueprint, render_template, request, flash, redirect, url_for
from flask_login import login_required
from schoolsite import db
from schoolsite.models.article import Article, Category
from schoolsite.utils.helpers import not_found, paginate, record, save_changes, search_arg
from schoolsite.utils.slug import unique_slug
from schoolsite.utils.validators import FormValidator

bp = Blueprint('admin_categories', __name__, url_prefix='/admin/categories')

def _validate(form):
    v = FormValidator(form)
    data = {'name': v.string('name', required=True, max_length=255)}
    return data, v.errors

def _form_page(category, errors, status=200):
    return render_template('admin/categories/form.html', category=category,
                           form=request.form, errors=errors), status

@bp.route('/')
@login_required
def index():
    search = search_arg()
    query = Category.query
    if search:
        query = query.filter(Category.name.ilike(f"%{search}%"))
    categories = paginate(query.order_by(Category.created_at.desc(), Category.id.desc()))
    return render_template('admin/categories/index.html', categories=categories, filters={'search': search})

@bp.route('/create', methods=['GET', 'POST'])
@login_required
def create():
    if request.method == 'GET':
        return _form_page(None, {})

    data, errors = _validate(request.form)
    if errors:
        return _form_page(None, errors, 422)

    category = Category(name=data['name'], slug=unique_slug(Category, data['name']))
    ok, errors = save_changes(lambda batch: db.session.add(category), 'Error creating category')
    if ok:
        record('create_category', f'Created category: {category.name}')
        flash('Category created successfully.', 'success')
    return redirect(url_for('admin_categories.index'))

@bp.route('/<slug>/edit', methods=['GET', 'POST'])
@login_required
def edit(slug):
    category = Category.query.filter_by(slug=slug).first()
    if not category:
        return not_found('Category not found.', 'admin_categories.index')
    if request.method == 'GET':
        return _form_page(category, {})

    data, errors = _validate(request.form)
    if errors:
        return _form_page(category, errors, 422)

    def apply(batch):
        if data['name'] != category.name:
            category.slug = unique_slug(Category, data['name'], ignore_id=category.id)
        category.name = data['name']

    ok, _ = save_changes(apply, 'Error updating category')
    if ok:
        record('update_category', f'Updated category: {category.name}')
        flash('Category updated successfully.', 'success')
    return redirect(url_for('admin_categories.index'))

@bp.route('/<slug>/delete', methods=['POST'])
@login_required
def delete(slug):
    category = Category.query.filter_by(slug=slug).first()
    if not category:
        return not_found('Category not found.', 'admin_categories.index')
    name = category.name

    def apply(batch):
        # Articles outlive their category
        Article.query.filter_by(category_id=category.id).update({'category_id': None})
        db.session.delete(category)

    ok, _ = save_changes(apply, 'Error deleting category')
    if ok:
        record('delete_category', f'Deleted category: {name}')
        flash('Category deleted successfully.', 'success')
    return redirect(url_for('admin_categories.index'))
