from flask import Flask
from dotenv import load_dotenv

load_dotenv()

from config import Config  # noqa: E402  (load_dotenv needs to run first)
from extensions import db, login_manager  # noqa: E402  (load_dotenv needs to run first)
from storage import EXTENSION_KEY, IStorage, build_storage  # noqa: E402


def create_app(config: dict | None = None, storage: IStorage | None = None) -> Flask:
    """Application factory for the transit portal.

    ``storage`` lets callers (tests, scripts) inject a ready store; otherwise
    one is built from ``STORAGE_BACKEND``. Each app owns its store.
    """

    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    from logging_middleware import add_request_logging, configure_logging
    configure_logging(app)

    # init extensions
    login_manager.init_app(app)

    # storage
    if app.config["STORAGE_BACKEND"] == "sql":
        db.init_app(app)
        with app.app_context():
            # tables must be imported before create_all()
            from storage import sql_models  # noqa: F401
            db.create_all()
    if storage is None:
        storage = build_storage(app.config)
    app.extensions[EXTENSION_KEY] = storage

    from sessions import StorageSessionInterface
    app.session_interface = StorageSessionInterface(
        lambda current: current.extensions[EXTENSION_KEY].session_store
    )

    # blueprints
    from modules.auth import bp as auth_bp
    from modules.dashboard import bp as dashboard_bp
    from modules.admin import bp as admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(admin_bp)

    if app.config["ENV"] != "production":
        from modules.dev import bp as dev_bp
        app.register_blueprint(dev_bp)

    from errors import register_error_handlers
    register_error_handlers(app)
    add_request_logging(app)

    if app.config["SEED_REFERENCE_DATA"]:
        from seed import seed_reference_data
        with app.app_context():
            seed_reference_data(storage, app.config["ADMIN_PASSWORD"])

    return app

if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
