from conftest import upload
from schoolsite.models.school_profile import ProfileType, SchoolProfile
from schoolsite.models.setting import Setting


def test_settings_row_is_created_once(app):
    with app.app_context():
        first = Setting.instance()
        second = Setting.instance()
        assert first.id == second.id
        assert Setting.query.count() == 1


def test_current_does_not_write(app):
    with app.app_context():
        assert Setting.current().school_name is None
        assert Setting.query.count() == 0


def test_update_settings_and_logo(app, admin_client, upload_dir):
    r = admin_client.post('/admin/settings/', data={
        'school_name': 'SMK Negeri 1', 'email': 'info@smkn1.sch.id',
        'instagram': 'https://instagram.com/smkn1', 'logo': upload('logo.png'),
    }, content_type='multipart/form-data')
    assert r.status_code == 302
    with app.app_context():
        setting = Setting.query.one()
        assert setting.school_name == 'SMK Negeri 1'
        assert setting.instagram == 'https://instagram.com/smkn1'
        assert (upload_dir / setting.logo).exists()
    assert b'SMK Negeri 1' in admin_client.get('/').data


def test_invalid_settings_are_unprocessable(app, admin_client):
    r = admin_client.put('/admin/settings/', data={'school_name': '', 'email': 'nope', 'facebook': 'fb'})
    assert r.status_code == 422
    assert b'The school name field is required.' in r.data
    assert b'The email must be a valid email address.' in r.data
    assert b'The facebook must be a valid URL.' in r.data


def test_profile_section_update_or_create(app, admin_client):
    for content in ('Pertama', 'Kedua'):
        r = admin_client.post('/admin/profile/history', data={'title': 'Sejarah', 'content': content})
        assert r.status_code == 302
    with app.app_context():
        rows = SchoolProfile.query.filter_by(type=ProfileType.HISTORY.value).all()
        assert len(rows) == 1
        assert rows[0].content == 'Kedua'


def test_vision_mission_requires_both_fields(app, admin_client):
    r = admin_client.post('/admin/profile/vision-mission', data={'vision': 'Unggul'})
    assert r.status_code == 422
    r = admin_client.post('/admin/profile/vision-mission', data={'vision': 'Unggul', 'mission': 'Maju'})
    assert r.status_code == 302
    with app.app_context():
        assert SchoolProfile.get(ProfileType.VISION_MISSION).data['mission'] == 'Maju'


def test_unknown_profile_section_is_404(admin_client):
    assert admin_client.get('/admin/profile/nope').status_code == 404
