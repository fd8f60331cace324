from flask import Blueprint, render_template, request, flash, redirect, url_for
from flask_login import login_required
from schoolsite import db
from schoolsite.models.achievement import Achievement, ACHIEVEMENT_CATEGORIES
from schoolsite.services.storage_service import THUMBNAIL, has_file
from schoolsite.utils.helpers import admin_required, not_found, paginate, record, save_changes, search_arg
from schoolsite.utils.validators import FormValidator

bp = Blueprint('admin_achievements', __name__, url_prefix='/admin/achievements')

THUMBNAIL_FOLDER = 'achievements'

def _validate(form):
    v = FormValidator(form)
    data = {
        'title': v.string('title', required=True, max_length=255),
        'description': v.string('description', required=True),
        'category': v.choice('category', ACHIEVEMENT_CATEGORIES),
    }
    return data, v.errors

def _form_page(achievement, errors, status=200):
    return render_template('admin/achievements/form.html', achievement=achievement,
                           categories=ACHIEVEMENT_CATEGORIES, form=request.form, errors=errors), status

def _apply(achievement, data, batch):
    for field, value in data.items():
        setattr(achievement, field, value)
    thumbnail = request.files.get('thumbnail')
    if has_file(thumbnail):
        achievement.thumbnail = batch.replace(achievement.thumbnail, thumbnail, THUMBNAIL,
                                              THUMBNAIL_FOLDER, field='thumbnail')

@bp.route('/')
@login_required
@admin_required
def index():
    search = search_arg()
    category = request.args.get('category', '').strip()
    query = Achievement.query
    if search:
        query = query.filter(Achievement.title.ilike(f"%{search}%"))
    if category:
        query = query.filter(Achievement.category == category)
    achievements = paginate(query.order_by(Achievement.created_at.desc(), Achievement.id.desc()))
    return render_template('admin/achievements/index.html', achievements=achievements,
                           categories=ACHIEVEMENT_CATEGORIES,
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

    achievement = Achievement()

    def apply(batch):
        _apply(achievement, data, batch)
        db.session.add(achievement)

    ok, errors = save_changes(apply, 'Error creating achievement')
    if ok:
        record('create_achievement', f'Created achievement: {achievement.title}')
        flash('Achievement created successfully.', 'success')
        return redirect(url_for('admin_achievements.index'))
    if errors is None:
        return redirect(url_for('admin_achievements.index'))
    return _form_page(None, errors, 422)

@bp.route('/<int:achievement_id>/edit', methods=['GET', 'POST'])
@login_required
@admin_required
def edit(achievement_id):
    achievement = db.session.get(Achievement, achievement_id)
    if not achievement:
        return not_found('Achievement not found.', 'admin_achievements.index')
    if request.method == 'GET':
        return _form_page(achievement, {})

    data, errors = _validate(request.form)
    if errors:
        return _form_page(achievement, errors, 422)

    ok, errors = save_changes(lambda batch: _apply(achievement, data, batch), 'Error updating achievement')
    if ok:
        record('update_achievement', f'Updated achievement: {achievement.title}')
        flash('Achievement updated successfully.', 'success')
        return redirect(url_for('admin_achievements.index'))
    if errors is None:
        return redirect(url_for('admin_achievements.index'))
    return _form_page(achievement, errors, 422)

@bp.route('/<int:achievement_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete(achievement_id):
    achievement = db.session.get(Achievement, achievement_id)
    if not achievement:
        return not_found('Achievement not found.', 'admin_achievements.index')
    title = achievement.title

    def apply(batch):
        batch.discard(achievement.thumbnail)
        db.session.delete(achievement)

    ok, _ = save_changes(apply, 'Error deleting achievement')
    if ok:
        record('delete_achievement', f'Deleted achievement: {title}')
        flash('Achievement deleted successfully.', 'success')
    return redirect(url_for('admin_achievements.index'))
