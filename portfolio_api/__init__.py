from flask import Flask
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy

from portfolio_api.config import Config

# Initialize extensions
cors = CORS()
db = SQLAlchemy()


def create_app(config_object=None, media_store=None):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    # Module loggers (portfolio_api.*) propagate to the app logger and its handler.
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Allow CORS for the frontend
    cors.init_app(app, origins=app.config['CORS_ORIGINS'], supports_credentials=True)
    db.init_app(app)

    if media_store is None:
        from portfolio_api.services.media_store import CloudinaryMediaStore
        media_store = CloudinaryMediaStore.from_config(app.config)
    app.extensions['media_store'] = media_store

    # Import all models before creating tables
    from portfolio_api.models import User, Project, Certification  # noqa: F401

    with app.app_context():
        db.create_all()

    from portfolio_api.cli import register_commands
    from portfolio_api.errors import register_error_handlers
    from portfolio_api.routes import api_bp

    register_error_handlers(app, db)
    register_commands(app)
    app.register_blueprint(api_bp, url_prefix='/api')

    return app
