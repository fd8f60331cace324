import pytest

from schoolsite import db
from schoolsite.models.major import Major
from schoolsite.utils.slug import slugify, unique_slug


@pytest.mark.parametrize('text, expected', [
    ('TKJ', 'tkj'),
    ('Teknik Komputer & Jaringan', 'teknik-komputer-jaringan'),
    ('  Rekayasa   Perangkat Lunak  ', 'rekayasa-perangkat-lunak'),
    ('Désain Kómunikasi Visual', 'desain-komunikasi-visual'),
    ('!!!', 'item'),
    ('', 'item'),
])
def test_slugify(text, expected):
    assert slugify(text) == expected


def _major(name, slug):
    return Major(name=name, slug=slug, description='-')


def test_collision_gets_next_free_suffix(app):
    with app.app_context():
        db.session.add_all([_major('TKJ', 'tkj'), _major('TKJ', 'tkj-1')])
        db.session.commit()
        assert unique_slug(Major, 'TKJ') == 'tkj-2'


def test_editing_a_record_keeps_its_own_slug(app):
    with app.app_context():
        major = _major('TKJ', 'tkj')
        db.session.add(major)
        db.session.commit()
        assert unique_slug(Major, 'TKJ', ignore_id=major.id) == 'tkj'
        assert unique_slug(Major, 'TKJ') == 'tkj-1'


def test_creating_major_through_admin_uses_unique_slug(app, admin_client):
    with app.app_context():
        db.session.add_all([_major('TKJ', 'tkj'), _major('TKJ', 'tkj-1')])
        db.session.commit()
    r = admin_client.post('/admin/majors/create', data={'name': 'TKJ', 'description': 'Teknik'})
    assert r.status_code == 302
    with app.app_context():
        assert Major.query.filter_by(slug='tkj-2').count() == 1


def test_slugify_cuts_to_max_length():
    assert slugify('a' * 300) == 'a' * 255
    # NFKD turns each character into three letters
    assert len(slugify('㎒' * 100)) == 255
    assert slugify('ab cd', max_length=3) == 'ab'


def test_long_colliding_name_stays_within_column(app):
    name = 'a' * 255
    with app.app_context():
        db.session.add(_major(name, unique_slug(Major, name)))
        db.session.commit()
        slug = unique_slug(Major, name)
        assert slug == 'a' * 253 + '-1'
        assert len(slug) == 255


def test_suffix_never_leaves_a_double_dash(app):
    name = 'a' * 252 + ' bbb'
    with app.app_context():
        db.session.add(_major('Long name', unique_slug(Major, name)))
        db.session.commit()
        assert unique_slug(Major, name) == 'a' * 252 + '-1'
