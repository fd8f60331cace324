from datetime import datetime

from flask import Blueprint, render_template
from flask_login import login_required, current_user
from schoolsite import db
from schoolsite.models.achievement import Achievement
from schoolsite.models.article import Article
from schoolsite.models.employee import Employee
from schoolsite.models.gallery import Gallery
from schoolsite.models.user import User
from schoolsite.models.user_activity import UserActivity

bp = Blueprint('dashboard', __name__, url_prefix='/admin')

CHART_MONTHS = 7

def month_buckets(count=CHART_MONTHS, today=None):
    """The last ``count`` months as ``YYYY-MM`` keys, oldest first"""
    today = today or datetime.utcnow()
    year, month = today.year, today.month
    keys = []
    for _ in range(count):
        keys.append(f'{year:04d}-{month:02d}')
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))

def monthly_counts(column, buckets):
    """Rows per ``YYYY-MM`` of ``column`` for the given buckets"""
    start = datetime.strptime(buckets[0], '%Y-%m')
    counts = dict.fromkeys(buckets, 0)
    for (created_at,) in db.session.query(column).filter(column >= start).all():
        key = created_at.strftime('%Y-%m')
        if key in counts:
            counts[key] += 1
    return [counts[key] for key in buckets]

@bp.route('/')
@bp.route('/dashboard')
@login_required
def index():
    stats = {
        'articles': {
            'total': Article.query.count(),
            'draft': Article.query.filter_by(is_published=False).count(),
            'published': Article.query.filter_by(is_published=True).count(),
            'latest': Article.query.order_by(Article.created_at.desc(), Article.id.desc()).limit(3).all(),
        },
        'galleries': Gallery.query.count(),
    }

    if current_user.is_admin:
        buckets = month_buckets()
        stats.update({
            'achievements': {
                'total': Achievement.query.count(),
                'academic': Achievement.query.filter_by(category='akademik').count(),
                'non_academic': Achievement.query.filter_by(category='non_akademik').count(),
            },
            'users': {
                'total': User.query.count(),
                'admins': User.query.filter_by(is_admin=True).count(),
                'editors': User.query.filter_by(is_admin=False).count(),
                'latest': User.query.order_by(User.created_at.desc(), User.id.desc()).limit(3).all(),
            },
            'employees': Employee.query.count(),
            'recent_activity': UserActivity.recent(10),
            'chart': {
                'labels': buckets,
                'articles': monthly_counts(Article.created_at, buckets),
                'users': monthly_counts(User.created_at, buckets),
            },
        })

    return render_template('admin/dashboard.html', stats=stats)
