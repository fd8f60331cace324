import pytest

from schoolsite import db
from schoolsite.models.achievement import Achievement
from schoolsite.models.article import Article, Category
from schoolsite.models.banner import Banner
from schoolsite.models.employee import Employee
from schoolsite.models.extracurricular import Extracurricular
from schoolsite.models.facility import Facility
from schoolsite.models.gallery import Gallery
from schoolsite.models.major import Major
from schoolsite.models.school_profile import ProfileType, SchoolProfile


@pytest.fixture()
def content(app):
    with app.app_context():
        news = Category(name='Berita', slug='berita')
        db.session.add_all([
            news,
            Major(name='Rekayasa Perangkat Lunak', slug='rpl', description='<p>Coding</p>'),
            Article(title='Artikel Terbit', slug='artikel-terbit', content='isi', is_published=True, category=news),
            Article(title='Artikel Draf', slug='artikel-draf', content='isi'),
            Banner(title='Banner Aktif', image='banners/a.png', order=1),
            Banner(title='Banner Mati', image='banners/b.png', is_active=False),
            Gallery(title='Pentas', slug='pentas'),
            Achievement(title='Juara Akademik', description='d', category='akademik'),
            Achievement(title='Juara Futsal', description='d', category='non_akademik'),
            Extracurricular(name='Futsal', description='d', category='olahraga'),
            Extracurricular(name='Paduan Suara', description='d', category='seni'),
            Facility(name='Perpustakaan', slug='perpustakaan'),
            SchoolProfile(type=ProfileType.HEADMASTER.value, title='Sambutan', content='Selamat datang'),
            SchoolProfile(type=ProfileType.VISION_MISSION.value, title='Visi Misi',
                          data={'vision': 'Unggul', 'mission': 'Berkarakter', 'motto': 'Bisa!'}),
        ])
        teacher = Employee(name='Bu Guru')
        teacher.position = 'Guru'
        teacher.apply_category('TEACHER')
        principal = Employee(name='Pak Kepala')
        principal.position = 'Kepala Sekolah'
        principal.apply_category('PRINCIPAL')
        db.session.add_all([teacher, principal])
        db.session.commit()


def test_landing_page(client, content):
    r = client.get('/')
    assert r.status_code == 200
    assert b'Banner Aktif' in r.data
    assert b'Banner Mati' not in r.data
    assert b'Sambutan' in r.data
    assert b'Rekayasa Perangkat Lunak' in r.data
    assert b'Artikel Terbit' in r.data
    assert b'Artikel Draf' not in r.data


def test_landing_page_without_any_content(client):
    assert client.get('/').status_code == 200


def test_articles_only_show_published(client, content):
    r = client.get('/articles')
    assert b'Artikel Terbit' in r.data
    assert b'Artikel Draf' not in r.data
    assert client.get('/articles?category=berita').status_code == 200
    assert client.get('/articles/artikel-terbit').status_code == 200


def test_draft_article_is_not_public(client, content):
    r = client.get('/articles/artikel-draf')
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/articles')


def test_unknown_slugs_redirect_to_listing(client, content):
    for url, listing in (('/majors/nope', '/majors'), ('/galleries/nope', '/galleries'),
                         ('/facilities/nope', '/facilities')):
        r = client.get(url)
        assert r.status_code == 302
        assert r.headers['Location'].endswith(listing)


def test_detail_pages(client, content):
    assert b'Coding' in client.get('/majors/rpl').data
    assert client.get('/galleries/pentas').status_code == 200
    assert client.get('/facilities/perpustakaan').status_code == 200


def test_achievements_category_filter(client, content):
    r = client.get('/achievements?category=akademik')
    assert b'Juara Akademik' in r.data
    assert b'Juara Futsal' not in r.data
    r = client.get('/achievements')
    assert b'Juara Futsal' in r.data


def test_extracurriculars_all_means_no_filter(client, content):
    r = client.get('/extracurriculars?category=all')
    assert b'Futsal' in r.data and b'Paduan Suara' in r.data
    r = client.get('/extracurriculars?category=seni')
    assert b'Paduan Suara' in r.data
    assert b'Futsal' not in r.data


def test_staff_listing_follows_category_order(client, content):
    r = client.get('/guru-karyawan')
    assert r.data.index(b'Pak Kepala') < r.data.index(b'Bu Guru')


def test_profile_sections(client, content):
    r = client.get('/profile/vision-mission')
    assert b'Unggul' in r.data and b'Bisa!' in r.data
    assert client.get('/profile/history').status_code == 200
    assert client.get('/profile/unknown').status_code == 404


def test_empty_organization_structure_shows_roster(client):
    r = client.get('/profile/organization-structure')
    assert r.status_code == 200
    assert b'Kepala Sekolah' in r.data
    assert r.data.count(b'data-order=') == 18
