from flask import Flask
from .config import Config
from .extensions import cors


def create_app(config_class: type[Config] = Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Extensions
    cors.init_app(app)

    # Blueprints
    from .routes.bundle_api import bp as bundle_api
    from .routes.extension_data import bp as extension_data

    app.register_blueprint(bundle_api, url_prefix="/api")
    app.register_blueprint(extension_data, url_prefix="/api")

    return app
