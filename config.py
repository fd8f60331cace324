import os
import tempfile
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _default_db_uri() -> str:
    # PyMySQL driver, see schoolsite/__init__.py
    user = os.environ.get('MYSQL_USER', 'root')
    password = os.environ.get('MYSQL_PASSWORD', 'root')
    host = os.environ.get('MYSQL_HOST', '127.0.0.1')
    port = os.environ.get('MYSQL_PORT', '3306')
    db = os.environ.get('MYSQL_DB', 'schoolsite')
    return f"mysql+pymysql://{user}:{password}@{host}:{port}/{db}"


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'your-secret-key'
    # Use DATABASE_URL if present; else build a sensible default using PyMySQL
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or _default_db_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Blob storage for uploaded images, served from /static/<UPLOAD_URL_PREFIX>/
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(BASE_DIR, 'schoolsite', 'static', 'uploads')
    UPLOAD_URL_PREFIX = 'uploads'
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 32 * 1024 * 1024))

    ITEMS_PER_PAGE = int(os.environ.get('ITEMS_PER_PAGE', 10))
    PUBLIC_ITEMS_PER_PAGE = int(os.environ.get('PUBLIC_ITEMS_PER_PAGE', 9))

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), 'schoolsite_test_uploads')
    LOG_LEVEL = 'DEBUG'
