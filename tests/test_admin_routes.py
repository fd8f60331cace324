import pytest

from conftest import upload
from schoolsite import db
from schoolsite.models.achievement import Achievement
from schoolsite.models.article import Article, Category
from schoolsite.models.banner import Banner
from schoolsite.models.employee import Employee
from schoolsite.models.extracurricular import Extracurricular
from schoolsite.models.facility import Facility
from schoolsite.models.gallery import Gallery
from schoolsite.models.user import User
from schoolsite.models.user_activity import UserActivity


def test_back_office_requires_login(client):
    r = client.get('/admin/articles/')
    assert r.status_code == 302
    assert '/auth/login' in r.headers['Location']


@pytest.mark.parametrize('url', [
    '/admin/dashboard', '/admin/articles/', '/admin/categories/', '/admin/galleries/',
    '/admin/majors/', '/admin/extracurriculars/', '/admin/achievements/', '/admin/banners/',
    '/admin/employees/', '/admin/facilities/', '/admin/users/', '/admin/settings/',
    '/admin/profile/', '/admin/profile/headmaster', '/admin/profile/vision-mission',
    '/admin/reports/',
])
def test_admin_pages_render(admin_client, url):
    assert admin_client.get(url).status_code == 200


@pytest.mark.parametrize('url', ['/admin/articles/create', '/admin/categories/create', '/admin/galleries/create'])
def test_editor_can_manage_content(editor_client, url):
    assert editor_client.get(url).status_code == 200


@pytest.mark.parametrize('url', ['/admin/majors/', '/admin/users/', '/admin/settings/', '/admin/banners/create'])
def test_editor_is_sent_back_from_admin_only_pages(editor_client, url):
    r = editor_client.get(url)
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/admin/dashboard')


class TestArticles:

    def test_create_with_thumbnail(self, app, admin_client, upload_dir):
        with app.app_context():
            category = Category(name='Berita', slug='berita')
            db.session.add(category)
            db.session.commit()
            category_id = category.id
        r = admin_client.post('/admin/articles/create', data={
            'title': 'Juara Lomba LKS', 'content': '<p>Selamat</p>', 'category_id': str(category_id),
            'is_published': '1', 'thumbnail': upload('thumb.png'),
        }, content_type='multipart/form-data')
        assert r.status_code == 302
        with app.app_context():
            article = Article.query.filter_by(slug='juara-lomba-lks').one()
            assert article.is_published is True
            assert article.category_id == category_id
            assert article.author.email == 'admin@school.test'
            assert (upload_dir / article.thumbnail).exists()
            assert UserActivity.query.filter_by(activity_type='create_article').count() == 1

    def test_missing_fields_are_unprocessable(self, app, admin_client):
        r = admin_client.post('/admin/articles/create', data={'title': ''})
        assert r.status_code == 422
        assert b'The title field is required.' in r.data
        assert b'The content field is required.' in r.data
        with app.app_context():
            assert Article.query.count() == 0

    def test_unknown_category_is_rejected(self, admin_client):
        r = admin_client.post('/admin/articles/create', data={'title': 'x', 'content': 'y', 'category_id': '999'})
        assert r.status_code == 422
        assert b'The selected category is invalid.' in r.data

    def test_invalid_thumbnail_leaves_nothing_behind(self, app, admin_client, upload_dir):
        r = admin_client.post('/admin/articles/create', data={
            'title': 'x', 'content': 'y', 'thumbnail': upload('bad.png', content=b'nope'),
        }, content_type='multipart/form-data')
        assert r.status_code == 422
        assert b'The file must be an image' in r.data
        with app.app_context():
            assert Article.query.count() == 0

    def test_toggle_status(self, app, editor_client):
        with app.app_context():
            db.session.add(Article(title='Draft', slug='draft', content='c'))
            db.session.commit()
        r = editor_client.post('/admin/articles/draft/status')
        assert r.status_code == 302
        with app.app_context():
            assert Article.query.filter_by(slug='draft').one().is_published is True
        editor_client.put('/admin/articles/draft/status')
        with app.app_context():
            assert Article.query.filter_by(slug='draft').one().is_published is False

    def test_unknown_slug_redirects_with_message(self, admin_client):
        r = admin_client.get('/admin/articles/missing/edit', follow_redirects=True)
        assert r.status_code == 200
        assert b'Article not found.' in r.data

    def test_filters(self, app, admin_client):
        with app.app_context():
            db.session.add_all([
                Article(title='Published one', slug='published-one', content='c', is_published=True),
                Article(title='Draft one', slug='draft-one', content='c'),
            ])
            db.session.commit()
        r = admin_client.get('/admin/articles/?status=draft')
        assert b'Draft one' in r.data
        assert b'Published one' not in r.data
        r = admin_client.get('/admin/articles/?search=published')
        assert b'Published one' in r.data
        assert b'Draft one' not in r.data

    def test_edit_renames_slug_and_delete_removes_thumbnail(self, app, admin_client, upload_dir):
        admin_client.post('/admin/articles/create', data={
            'title': 'Old title', 'content': 'c', 'thumbnail': upload(),
        }, content_type='multipart/form-data')
        with app.app_context():
            thumbnail = Article.query.one().thumbnail
        r = admin_client.post('/admin/articles/old-title/edit', data={'title': 'New title', 'content': 'c'})
        assert r.status_code == 302
        with app.app_context():
            article = Article.query.one()
            assert article.slug == 'new-title'
            assert article.thumbnail == thumbnail
        admin_client.post('/admin/articles/new-title/delete')
        with app.app_context():
            assert Article.query.count() == 0
        assert not (upload_dir / thumbnail).exists()


def test_deleting_category_keeps_articles(app, admin_client):
    with app.app_context():
        category = Category(name='Info', slug='info')
        db.session.add(category)
        db.session.flush()
        db.session.add(Article(title='A', slug='a', content='c', category_id=category.id))
        db.session.commit()
    r = admin_client.post('/admin/categories/info/delete')
    assert r.status_code == 302
    with app.app_context():
        assert Category.query.count() == 0
        assert Article.query.one().category_id is None


class TestGalleries:

    def test_create_with_images_and_remove_one(self, app, admin_client, upload_dir):
        r = admin_client.post('/admin/galleries/create', data={
            'title': 'Pentas Seni', 'images': [upload('a.png'), upload('b.png')],
        }, content_type='multipart/form-data')
        assert r.status_code == 302
        with app.app_context():
            gallery = Gallery.query.filter_by(slug='pentas-seni').one()
            references = [image.image for image in gallery.images]
            first_id = gallery.images[0].id
        assert len(references) == 2

        r = admin_client.post(f'/admin/galleries/image/{first_id}/delete')
        assert r.headers['Location'].endswith('/admin/galleries/pentas-seni/edit')
        assert not (upload_dir / references[0]).exists()
        assert (upload_dir / references[1]).exists()

    def test_delete_gallery_removes_all_images(self, app, admin_client, upload_dir):
        admin_client.post('/admin/galleries/create', data={
            'title': 'Wisuda', 'images': [upload('a.png')],
        }, content_type='multipart/form-data')
        with app.app_context():
            reference = Gallery.query.one().images[0].image
        admin_client.post('/admin/galleries/wisuda/delete')
        with app.app_context():
            assert Gallery.query.count() == 0
        assert not (upload_dir / reference).exists()


def test_banner_requires_image_on_create(app, admin_client):
    r = admin_client.post('/admin/banners/create', data={'title': 'PPDB 2025'})
    assert r.status_code == 422
    assert b'The image field is required.' in r.data

    r = admin_client.post('/admin/banners/create', data={
        'title': 'PPDB 2025', 'link': 'https://ppdb.example.sch.id', 'order': '2',
        'is_active': '1', 'image': upload('banner.jpg', fmt='JPEG'),
    }, content_type='multipart/form-data')
    assert r.status_code == 302
    with app.app_context():
        banner = Banner.query.one()
        assert banner.order == 2
        assert banner.is_active is True
        assert banner.image.endswith('.jpg')


def test_banner_link_must_be_a_url(admin_client):
    r = admin_client.post('/admin/banners/create', data={
        'title': 'x', 'link': 'not a url', 'image': upload(),
    }, content_type='multipart/form-data')
    assert r.status_code == 422
    assert b'The link must be a valid URL.' in r.data


def test_employee_category_sets_display_order(app, admin_client):
    r = admin_client.post('/admin/employees/create', data={
        'name': 'Drs. Ahmad', 'position': 'Kepala Sekolah', 'category': 'PRINCIPAL',
    })
    assert r.status_code == 302
    with app.app_context():
        employee = Employee.query.one()
        assert employee.display_order == 0
        employee_id = employee.id
    admin_client.post(f'/admin/employees/{employee_id}/edit', data={
        'name': 'Drs. Ahmad', 'position': 'Guru', 'category': 'TEACHER',
    })
    with app.app_context():
        assert db.session.get(Employee, employee_id).display_order == 3


def test_employee_category_must_be_known(admin_client):
    r = admin_client.post('/admin/employees/create', data={'name': 'x', 'position': 'y', 'category': 'JANITOR'})
    assert r.status_code == 422
    assert b'The selected category is invalid.' in r.data


def test_extracurricular_and_achievement_crud(app, admin_client):
    admin_client.post('/admin/extracurriculars/create', data={
        'name': 'Pramuka', 'description': 'Wajib', 'category': 'lainnya'})
    admin_client.post('/admin/achievements/create', data={
        'title': 'Juara 1 LKS', 'description': 'Tingkat provinsi', 'category': 'akademik'})
    with app.app_context():
        extracurricular_id = Extracurricular.query.one().id
        achievement_id = Achievement.query.one().id
    r = admin_client.get('/admin/extracurriculars/?category=lainnya')
    assert b'Pramuka' in r.data
    admin_client.post(f'/admin/extracurriculars/{extracurricular_id}/delete')
    admin_client.post(f'/admin/achievements/{achievement_id}/delete')
    with app.app_context():
        assert Extracurricular.query.count() == 0
        assert Achievement.query.count() == 0


def test_facility_slug_routes(app, admin_client):
    admin_client.post('/admin/facilities/create', data={'name': 'Lab Komputer'})
    r = admin_client.post('/admin/facilities/lab-komputer/edit', data={'name': 'Lab Komputer 1'})
    assert r.status_code == 302
    with app.app_context():
        assert Facility.query.one().slug == 'lab-komputer-1'


class TestUsers:

    def test_create_editor(self, app, admin_client):
        r = admin_client.post('/admin/users/create', data={
            'name': 'Guru Baru', 'email': 'guru@school.test', 'role': 'editor',
            'password': 'rahasia123', 'password_confirmation': 'rahasia123',
        })
        assert r.status_code == 302
        with app.app_context():
            user = User.query.filter_by(email='guru@school.test').one()
            assert user.is_admin is False
            assert user.check_password('rahasia123')

    def test_weak_password_and_duplicate_email(self, admin_client):
        r = admin_client.post('/admin/users/create', data={
            'name': 'x', 'email': 'admin@school.test', 'role': 'admin', 'password': 'short',
        })
        assert r.status_code == 422
        assert b'The email has already been taken.' in r.data
        assert b'Password must be at least 8 characters long' in r.data

    def test_edit_without_password_keeps_it(self, app, admin_client, editor_user):
        r = admin_client.post(f'/admin/users/{editor_user}/edit', data={
            'name': 'Renamed', 'email': 'editor@school.test', 'role': 'admin',
        })
        assert r.status_code == 302
        with app.app_context():
            user = db.session.get(User, editor_user)
            assert user.name == 'Renamed'
            assert user.is_admin is True
            assert user.check_password('sekolah2024')

    def test_cannot_delete_self(self, app, admin_client, admin_user):
        r = admin_client.post(f'/admin/users/{admin_user}/delete', follow_redirects=True)
        assert b'You cannot delete your own account.' in r.data
        with app.app_context():
            assert db.session.get(User, admin_user) is not None

    def test_delete_other_user(self, app, admin_client, editor_user):
        admin_client.post(f'/admin/users/{editor_user}/delete')
        with app.app_context():
            assert db.session.get(User, editor_user) is None
