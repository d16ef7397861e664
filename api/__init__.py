from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from . import cli, logger
from models import storage  # DBStorage singleton (scoped_session)
from utils import security
from utils.settings import AuthSettings

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0.0",
    "info": {
        "title": "Blog API",
        "version": "1.0.0",
        "description": "REST API for a blogging platform: accounts, posts, comments, likes, bookmarks, follows and topics.",
    },
    "basePath": "/",  # blueprints are mounted under /api/v1
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(config_name=None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    config_name is a config name (dev/test/prod) or a config class.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))

    logger.init_app(app)

    # Fail fast on bad auth configuration
    app.extensions["auth_settings"] = AuthSettings.from_config(app.config)
    security.init_app(app)

    storage.configure(app.config["DATABASE_URL"], echo=app.config.get("SQLALCHEMY_ECHO", False))
    storage.reload()

    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Uniform error envelope
    register_error_handlers(app)

    cli.init_app(app)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp
    from .posts import bp as posts_bp
    from .comments import bp as comments_bp
    from .likes import bp as likes_bp
    from .bookmarks import bp as bookmarks_bp
    from .follows import bp as follows_bp
    from .topics import bp as topics_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(auth_bp, url_prefix="/api/v1/auth")
    app.register_blueprint(users_bp, url_prefix="/api/v1")
    app.register_blueprint(posts_bp, url_prefix="/api/v1")
    app.register_blueprint(comments_bp, url_prefix="/api/v1")
    app.register_blueprint(likes_bp, url_prefix="/api/v1")
    app.register_blueprint(bookmarks_bp, url_prefix="/api/v1")
    app.register_blueprint(follows_bp, url_prefix="/api/v1")
    app.register_blueprint(topics_bp, url_prefix="/api/v1")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Blog API",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    return app
