import logging

from flask import Flask, render_template

from .config import Config
from .exceptions import NotFoundError
from .models.store import DocumentStore
from .services.auth_service import identity
from .services.favorites_service import FavoritesService
from .utils.decorators import current_auth
from .utils.filters import fmt_iso_local, money

logger = logging.getLogger(__name__)


def _log_session_change(auth):
    if auth is None:
        logger.info("Session cleared")
    else:
        logger.info("Session started for %s (%s)", auth.email, auth.role)


def create_app(config=None, config_object=Config):
    app = Flask(__name__, static_folder="static", template_folder="templates")
    app.config.from_object(config_object)
    if config:
        app.config.update(config)

    logging.basicConfig(level=app.config["LOG_LEVEL"],
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.logger.setLevel(app.config["LOG_LEVEL"])

    DocumentStore.configure(app.config["DATA_PATH"])  # load data.pkl or start empty
    identity.subscribe(_log_session_change)

    from .controllers.admin import bp as admin_bp
    from .controllers.auth import bp as auth_bp
    from .controllers.bookings import bp as bookings_bp
    from .controllers.cars import bp as cars_bp
    from .controllers.favorites import bp as favorites_bp
    from .controllers.profile import bp as profile_bp
    from .controllers.views import bp as views_bp

    app.register_blueprint(views_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(cars_bp)
    app.register_blueprint(bookings_bp)
    app.register_blueprint(favorites_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(admin_bp)

    app.jinja_env.filters["fmt_iso_local"] = fmt_iso_local
    app.jinja_env.filters["money"] = money

    @app.context_processor
    def inject_auth():
        auth = current_auth()
        return {"auth": auth, "favorites_count": FavoritesService.count(auth)}

    @app.errorhandler(NotFoundError)
    def not_found(e):
        return render_template("error.html", message=e.message), 404

    return app
