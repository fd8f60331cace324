import pytest
from werkzeug.datastructures import FileStorage

from conftest import image_bytes, upload
from schoolsite.services.storage_service import (
    ICON, LOGO, POSITION_IMAGE, StorageError, StorageService, UploadBatch,
    UploadValidationError, has_file,
)

SVG_LOGO = b'<?xml version="1.0"?><svg xmlns="http://www.w3.org/2000/svg" width="4" height="4"></svg>'


def _file(filename='photo.png', fmt='PNG', content=None):
    stream, name = upload(filename, fmt, content)
    return FileStorage(stream, name)


@pytest.fixture()
def ctx(app):
    with app.test_request_context():
        yield app


def test_store_writes_under_folder_with_sniffed_extension(ctx, upload_dir):
    reference = StorageService.store(_file('holiday.PNG'), POSITION_IMAGE, 'school_profiles')
    assert reference.startswith('school_profiles/')
    assert reference.endswith('.png')
    assert (upload_dir / reference).read_bytes() == image_bytes()


def test_extension_comes_from_content_not_filename(ctx):
    reference = StorageService.store(_file('disguised.png', fmt='JPEG'), POSITION_IMAGE, 'x')
    assert reference.endswith('.jpg')


def test_oversized_file_is_rejected(ctx):
    big = image_bytes(size=(1200, 1200)) + b'\0' * (2 * 1024 * 1024)
    with pytest.raises(UploadValidationError) as e:
        StorageService.store(_file(content=big), POSITION_IMAGE, 'x', field='positions.1.image')
    assert e.value.field == 'positions.1.image'
    assert 'may not be greater than 2048 KB' in e.value.message


def test_non_image_is_rejected(ctx):
    with pytest.raises(UploadValidationError) as e:
        StorageService.store(_file('notes.jpg', content=b'plain text'), POSITION_IMAGE, 'x')
    assert 'must be an image' in e.value.message


def test_empty_file_is_rejected(ctx):
    with pytest.raises(UploadValidationError):
        StorageService.store(_file(content=b''), POSITION_IMAGE, 'x')


def test_svg_only_where_allowed(ctx):
    assert StorageService.store(_file('logo.svg', content=SVG_LOGO), LOGO, 'settings').endswith('.svg')
    assert StorageService.store(_file('icon.svg', content=SVG_LOGO), ICON, 'icons').endswith('.svg')
    with pytest.raises(UploadValidationError):
        StorageService.store(_file('logo.svg', content=SVG_LOGO), POSITION_IMAGE, 'x')


def test_webp_is_not_a_logo(ctx):
    with pytest.raises(UploadValidationError):
        StorageService.store(_file('logo.webp', fmt='WEBP'), LOGO, 'settings')


def test_delete_missing_blob_is_not_an_error(ctx):
    assert StorageService.delete('nothing/here.png') is False
    assert StorageService.delete(None) is False


def test_references_cannot_escape_the_upload_folder(ctx):
    with pytest.raises(StorageError):
        StorageService._path('../../etc/passwd')
    assert StorageService.exists('../../etc/passwd') is False


def test_resolve_builds_static_url(ctx):
    assert StorageService.resolve('articles/a.png') == '/static/uploads/articles/a.png'
    assert StorageService.resolve(None) is None


def test_batch_rollback_removes_new_blobs(ctx, upload_dir):
    batch = UploadBatch()
    first = batch.store(_file(), POSITION_IMAGE, 'x')
    second = batch.store(_file(), POSITION_IMAGE, 'x')
    batch.rollback()
    assert not (upload_dir / first).exists()
    assert not (upload_dir / second).exists()


def test_batch_commit_removes_superseded_blobs_only(ctx, upload_dir):
    old = StorageService.store(_file(), POSITION_IMAGE, 'x')
    batch = UploadBatch()
    new = batch.replace(old, _file(), POSITION_IMAGE, 'x')
    assert (upload_dir / old).exists()
    batch.commit()
    assert not (upload_dir / old).exists()
    assert (upload_dir / new).exists()


def test_has_file():
    assert has_file(None) is False
    assert has_file(FileStorage(filename='')) is False
    assert has_file(_file()) is True
