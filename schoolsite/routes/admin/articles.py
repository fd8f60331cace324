from flask import Blueprint, render_template, request, flash, redirect, url_for
from flask_login import login_required, current_user
from schoolsite import db
from schoolsite.models.article import Article, Category
from schoolsite.services.storage_service import THUMBNAIL, has_file
from schoolsite.utils.helpers import not_found, paginate, record, save_changes, search_arg
from schoolsite.utils.slug import unique_slug
from schoolsite.utils.validators import FormValidator

bp = Blueprint('admin_articles', __name__, url_prefix='/admin/articles')

THUMBNAIL_FOLDER = 'articles'

def _validate(form):
    v = FormValidator(form)
    data = {
        'title': v.string('title', required=True, max_length=255),
        'content': v.string('content', required=True),
        'category_id': v.integer('category_id'),
        'is_published': v.boolean('is_published'),
    }
    if data['category_id'] is not None and db.session.get(Category, data['category_id']) is None:
        v.add_error('category_id', 'The selected category is invalid.')
    return data, v.errors

def _form_page(article, errors, status=200):
    categories = Category.query.order_by(Category.name).all()
    return render_template('admin/articles/form.html', article=article, categories=categories,
                           form=request.form, errors=errors), status

@bp.route('/')
@login_required
def index():
    search = search_arg()
    category = request.args.get('category', '').strip()
    status = request.args.get('status', '').strip()

    query = Article.query
    if search:
        query = query.filter(Article.title.ilike(f"%{search}%"))
    if category:
        query = query.join(Category).filter(Category.slug == category)
    if status in ('published', 'draft'):
        query = query.filter(Article.is_published == (status == 'published'))

    articles = paginate(query.order_by(Article.created_at.desc(), Article.id.desc()))
    categories = Category.query.order_by(Category.name).all()
    return render_template('admin/articles/index.html', articles=articles, categories=categories,
                           filters={'search': search, 'category': category, 'status': status})

@bp.route('/create', methods=['GET', 'POST'])
@login_required
def create():
    if request.method == 'GET':
        return _form_page(None, {})

    data, errors = _validate(request.form)
    if errors:
        return _form_page(None, errors, 422)

    article = Article(author_id=current_user.id, slug=unique_slug(Article, data['title']), **data)

    def apply(batch):
        thumbnail = request.files.get('thumbnail')
        if has_file(thumbnail):
            article.thumbnail = batch.store(thumbnail, THUMBNAIL, THUMBNAIL_FOLDER, field='thumbnail')
        db.session.add(article)

    ok, errors = save_changes(apply, 'Error creating article')
    if ok:
        record('create_article', f'Created article: {article.title}')
        flash('Article created successfully.', 'success')
        return redirect(url_for('admin_articles.index'))
    if errors is None:
        return redirect(url_for('admin_articles.index'))
    return _form_page(None, errors, 422)

@bp.route('/<slug>')
@login_required
def show(slug):
    article = Article.query.filter_by(slug=slug).first()
    if not article:
        return not_found('Article not found.', 'admin_articles.index')
    return render_template('admin/articles/show.html', article=article)

@bp.route('/<slug>/edit', methods=['GET', 'POST'])
@login_required
def edit(slug):
    article = Article.query.filter_by(slug=slug).first()
    if not article:
        return not_found('Article not found.', 'admin_articles.index')
    if request.method == 'GET':
        return _form_page(article, {})

    data, errors = _validate(request.form)
    if errors:
        return _form_page(article, errors, 422)

    def apply(batch):
        if data['title'] != article.title:
            article.slug = unique_slug(Article, data['title'], ignore_id=article.id)
        for field, value in data.items():
            setattr(article, field, value)
        thumbnail = request.files.get('thumbnail')
        if has_file(thumbnail):
            article.thumbnail = batch.replace(article.thumbnail, thumbnail, THUMBNAIL, THUMBNAIL_FOLDER, field='thumbnail')

    ok, errors = save_changes(apply, 'Error updating article')
    if ok:
        record('update_article', f'Updated article: {article.title}')
        flash('Article updated successfully.', 'success')
        return redirect(url_for('admin_articles.index'))
    if errors is None:
        return redirect(url_for('admin_articles.index'))
    return _form_page(article, errors, 422)

@bp.route('/<slug>/status', methods=['POST', 'PUT'])
@login_required
def update_status(slug):
    article = Article.query.filter_by(slug=slug).first()
    if not article:
        return not_found('Article not found.', 'admin_articles.index')

    article.is_published = not article.is_published
    ok, _ = save_changes(lambda batch: None, 'Error updating article status')
    if ok:
        record('update_article_status', f'Article "{article.title}" is now {article.status}')
        flash('Article status updated successfully.', 'success')
    return redirect(request.referrer or url_for('admin_articles.index'))

@bp.route('/<slug>/delete', methods=['POST'])
@login_required
def delete(slug):
    article = Article.query.filter_by(slug=slug).first()
    if not article:
        return not_found('Article not found.', 'admin_articles.index')
    title = article.title

    def apply(batch):
        batch.discard(article.thumbnail)
        db.session.delete(article)

    ok, _ = save_changes(apply, 'Error deleting article')
    if ok:
        record('delete_article', f'Deleted article: {title}')
        flash('Article deleted successfully.', 'success')
    return redirect(url_for('admin_articles.index'))
