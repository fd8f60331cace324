import io

import pytest
from PIL import Image

from config import TestingConfig
from schoolsite import create_app, db
from schoolsite.models.user import User

ADMIN_EMAIL = 'admin@school.test'
EDITOR_EMAIL = 'editor@school.test'
PASSWORD = 'sekolah2024'


def image_bytes(fmt='PNG', size=(8, 8), color=(20, 120, 200)):
    im = Image.new('RGB', size, color=color)
    buf = io.BytesIO()
    im.save(buf, format=fmt)
    return buf.getvalue()


def upload(filename='photo.png', fmt='PNG', content=None):
    """A (stream, filename) pair for the test client's multipart encoder"""
    if content is None:
        content = image_bytes(fmt)
    return io.BytesIO(content), filename


@pytest.fixture()
def app(tmp_path):
    app = create_app(TestingConfig)
    app.config['UPLOAD_FOLDER'] = str(tmp_path / 'uploads')
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def upload_dir(app, tmp_path):
    return tmp_path / 'uploads'


def _create_user(app, email, name, is_admin):
    with app.app_context():
        user = User(email=email, name=name, is_admin=is_admin)
        user.set_password(PASSWORD)
        db.session.add(user)
        db.session.commit()
        return user.id


@pytest.fixture()
def admin_user(app):
    return _create_user(app, ADMIN_EMAIL, 'Admin', True)


@pytest.fixture()
def editor_user(app):
    return _create_user(app, EDITOR_EMAIL, 'Editor', False)


def login(client, email, password=PASSWORD):
    return client.post('/auth/login', data={'email': email, 'password': password})


@pytest.fixture()
def admin_client(client, admin_user):
    r = login(client, ADMIN_EMAIL)
    assert r.status_code == 302, r.data
    return client


@pytest.fixture()
def editor_client(client, editor_user):
    r = login(client, EDITOR_EMAIL)
    assert r.status_code == 302, r.data
    return client
