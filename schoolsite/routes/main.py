from flask import Blueprint, render_template, request, current_app
from schoolsite.models.achievement import Achievement, ACHIEVEMENT_CATEGORIES
from schoolsite.models.article import Article, Category
from schoolsite.models.banner import Banner
from schoolsite.models.employee import Employee
from schoolsite.models.extracurricular import Extracurricular, EXTRACURRICULAR_CATEGORIES
from schoolsite.models.facility import Facility
from schoolsite.models.gallery import Gallery
from schoolsite.models.major import Major
from schoolsite.models.school_profile import ProfileType, SchoolProfile
from schoolsite.utils.helpers import not_found, paginate, search_arg

bp = Blueprint('main', __name__)

def _public_page(query):
    return paginate(query, per_page=current_app.config.get('PUBLIC_ITEMS_PER_PAGE', 9))

@bp.route('/')
def index():
    return render_template('public/landing.html',
                           banners=Banner.active(),
                           headmaster=SchoolProfile.get(ProfileType.HEADMASTER),
                           majors=Major.query.order_by(Major.name).all(),
                           articles=Article.published().order_by(Article.created_at.desc(), Article.id.desc()).limit(2).all())

@bp.route('/majors')
def majors():
    return render_template('public/majors/index.html', majors=Major.query.order_by(Major.name).all())

@bp.route('/majors/<slug>')
def major(slug):
    item = Major.query.filter_by(slug=slug).first()
    if not item:
        return not_found('Major not found.', 'main.majors')
    return render_template('public/majors/show.html', major=item)

@bp.route('/articles')
def articles():
    search = search_arg()
    category = request.args.get('category', '').strip()
    query = Article.published()
    if search:
        query = query.filter(Article.title.ilike(f"%{search}%"))
    if category:
        query = query.join(Category).filter(Category.slug == category)
    page = _public_page(query.order_by(Article.created_at.desc(), Article.id.desc()))
    return render_template('public/articles/index.html', articles=page,
                           categories=Category.query.order_by(Category.name).all(),
                           filters={'search': search, 'category': category})

@bp.route('/articles/<slug>')
def article(slug):
    item = Article.published().filter_by(slug=slug).first()
    if not item:
        return not_found('Article not found.', 'main.articles')
    latest = Article.published().filter(Article.id != item.id)\
        .order_by(Article.created_at.desc()).limit(3).all()
    return render_template('public/articles/show.html', article=item, latest=latest)

@bp.route('/galleries')
def galleries():
    page = _public_page(Gallery.query.order_by(Gallery.created_at.desc(), Gallery.id.desc()))
    return render_template('public/galleries/index.html', galleries=page)

@bp.route('/galleries/<slug>')
def gallery(slug):
    item = Gallery.query.filter_by(slug=slug).first()
    if not item:
        return not_found('Gallery not found.', 'main.galleries')
    return render_template('public/galleries/show.html', gallery=item)

@bp.route('/achievements')
def achievements():
    category = request.args.get('category', '').strip()
    query = Achievement.query
    if category in ACHIEVEMENT_CATEGORIES:
        query = query.filter_by(category=category)
    page = _public_page(query.order_by(Achievement.created_at.desc(), Achievement.id.desc()))
    return render_template('public/achievements.html', achievements=page,
                           categories=ACHIEVEMENT_CATEGORIES, category=category)

@bp.route('/extracurriculars')
def extracurriculars():
    category = request.args.get('category', 'all').strip()
    query = Extracurricular.query
    if category != 'all':
        query = query.filter_by(category=category)
    items = query.order_by(Extracurricular.name).all()
    return render_template('public/extracurriculars.html', extracurriculars=items,
                           categories=EXTRACURRICULAR_CATEGORIES, category=category)

@bp.route('/facilities')
def facilities():
    return render_template('public/facilities/index.html',
                           facilities=Facility.query.order_by(Facility.name).all())

@bp.route('/facilities/<slug>')
def facility(slug):
    item = Facility.query.filter_by(slug=slug).first()
    if not item:
        return not_found('Facility not found.', 'main.facilities')
    return render_template('public/facilities/show.html', facility=item)

@bp.route('/guru-karyawan')
def employees():
    items = Employee.query.order_by(Employee.display_order, Employee.name).all()
    return render_template('public/employees.html', employees=items)
