from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from config import Config

# Use PyMySQL as the MySQLdb driver
import pymysql
pymysql.install_as_MySQLdb()

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)

    login_manager.login_view = 'auth.login'
    login_manager.login_message = 'Please log in to access this page.'
    login_manager.login_message_category = 'info'

    with app.app_context():
        # Import models and routes here to register with the app
        from schoolsite import models  # noqa: F401
        from schoolsite.routes import auth, main, profile
        from schoolsite.routes.admin import (
            achievements, articles, banners, categories, dashboard, employees,
            extracurriculars, facilities, galleries, majors, reports, school_profile,
            settings, users,
        )

        # Register blueprints
        app.register_blueprint(main.bp)
        app.register_blueprint(profile.bp)
        app.register_blueprint(auth.bp)
        app.register_blueprint(dashboard.bp)
        app.register_blueprint(categories.bp)
        app.register_blueprint(articles.bp)
        app.register_blueprint(galleries.bp)
        app.register_blueprint(majors.bp)
        app.register_blueprint(extracurriculars.bp)
        app.register_blueprint(achievements.bp)
        app.register_blueprint(banners.bp)
        app.register_blueprint(employees.bp)
        app.register_blueprint(facilities.bp)
        app.register_blueprint(users.bp)
        app.register_blueprint(settings.bp)
        app.register_blueprint(school_profile.bp)
        app.register_blueprint(reports.bp)

        # Create all database tables (if not already created)
        db.create_all()

        register_template_helpers(app)
        register_error_handlers(app)
        register_commands(app)

    return app

def register_template_helpers(app):
    """Expose the settings record and media URLs to every template"""
    from schoolsite.models.setting import Setting
    from schoolsite.services.storage_service import StorageService

    @app.context_processor
    def inject_setting():
        return {'setting': Setting.current()}

    app.add_template_filter(StorageService.resolve, 'media_url')

def register_error_handlers(app):
    """Register global error handlers"""
    from flask import render_template

    @app.errorhandler(404)
    def not_found_error(error):
        return render_template('errors/404.html'), 404

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return render_template('errors/500.html'), 500

    @app.errorhandler(403)
    def forbidden_error(error):
        return render_template('errors/403.html'), 403

    @app.errorhandler(Exception)
    def handle_exception(e):
        # If it's an HTTP exception, return the appropriate error page
        if hasattr(e, 'code'):
            if e.code == 404:
                return render_template('errors/404.html'), 404
            elif e.code == 403:
                return render_template('errors/403.html'), 403
            elif e.code == 413:
                return render_template('errors/413.html'), 413
            elif e.code and e.code < 500:
                return e

        app.logger.error(f'Unhandled exception: {str(e)}')
        db.session.rollback()
        return render_template('errors/500.html'), 500

def register_commands(app):
    from schoolsite.commands import create_admin
    app.cli.add_command(create_admin)
