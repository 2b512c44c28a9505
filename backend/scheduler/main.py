import logging
import os
import sys

from dotenv import load_dotenv

# Get logger for this module
logger = logging.getLogger(__name__)
from flask import Flask, redirect, render_template, request, url_for  # noqa: E402
from flask_login import LoginManager, current_user  # noqa: E402

# Load environment variables conditionally
# Only load from .env when DATABASE_URL is not already defined by the environment
if not os.getenv("DATABASE_URL"):
    load_dotenv()

WEAK_SECRETS = ("dev-secret-change-me", "dev-jwt-secret-change-me", "secret123")


def _template_paths():
    """Locate ``frontend/templates`` and ``frontend/assets`` next to ``backend``."""
    script_dir = os.path.dirname(os.path.abspath(__file__))  # backend/scheduler
    backend_dir = os.path.dirname(script_dir)
    project_root = os.path.dirname(backend_dir)
    return (
        os.path.join(project_root, "frontend", "templates"),
        os.path.join(project_root, "frontend", "assets"),
    )


def _is_test_mode(app: Flask) -> bool:
    """Check if we're running in test mode (pytest/CI)."""
    testing_val = os.getenv("TESTING", "").lower().strip()
    if testing_val in ("true", "1", "yes"):
        return True
    if "pytest" in sys.modules:
        return True
    return bool(app.config.get("TESTING"))


def _company_name() -> str:
    from scheduler.db.session import SessionLocal
    from scheduler.repositories.setting_repo import SettingRepository
    from scheduler.services.settings_service import SettingsService

    try:
        with SessionLocal() as db:
            return SettingsService(SettingRepository(db)).value(
                "company_name", "Scheduler"
            )
    except Exception as e:
        logger.warning(
            "Company name unavailable", extra={"context": {"error": str(e)}}
        )
        return "Scheduler"


def create_app():  # noqa: C901
    template_folder, static_folder = _template_paths()

    # Determine environment
    env = os.getenv("FLASK_ENV", "development")
    is_production = env == "production"

    app = Flask(
        __name__,
        template_folder=template_folder,
        static_folder=static_folder,
        static_url_path="/assets",
    )

    # Set TESTING config from environment variable (before any other configuration)
    testing_env = os.getenv("TESTING", "").lower().strip()
    if testing_env in ("true", "1", "yes"):
        app.config["TESTING"] = True
    test_mode = _is_test_mode(app)

    # Configure structured logging (after app creation so we can register hooks)
    from scheduler.core.logging_config import setup_logging

    setup_logging(
        app=app,
        log_level=logging.INFO if is_production else logging.DEBUG,
        enable_sql_echo=not is_production and not test_mode,
        use_json_format=is_production,
    )
    logger.info(
        "Logging configured",
        extra={"context": {"environment": env, "json_format": is_production}},
    )

    from scheduler.core.config import (
        HEALTH_CHECK_TOKEN,
        get_api_token,
        log_api_config,
        log_timezone_config,
        log_validation_config,
    )

    log_timezone_config()
    log_api_config()
    log_validation_config()

    # Sentry error tracking, only when a DSN is configured
    sentry_dsn = os.getenv("SENTRY_DSN")
    if sentry_dsn:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration
        from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=env,
            release=os.getenv("GIT_SHA", "unknown"),
            integrations=[FlaskIntegration(), SqlalchemyIntegration()],
            traces_sample_rate=0.1,
            send_default_pii=False,
        )
        logger.info("Sentry initialized", extra={"context": {"environment": env}})
    else:
        logger.info(
            "Sentry not initialized (SENTRY_DSN not set)",
            extra={"context": {"environment": env}},
        )

    # Prometheus /metrics; MUST be initialized BEFORE limiter
    from prometheus_client import CollectorRegistry
    from prometheus_flask_exporter import PrometheusMetrics

    # A private registry per test app avoids duplicated collectors
    metrics = PrometheusMetrics(app, registry=CollectorRegistry() if test_mode else None)
    try:
        metrics.info(
            "app_info",
            "Application information",
            version=os.getenv("GIT_SHA", "unknown"),
            environment=env,
        )
    except ValueError as e:
        logger.debug(
            "app_info metric already registered",
            extra={"context": {"error": str(e)}},
        )

    # Configuration
    app.config["SECRET_KEY"] = os.getenv("FLASK_SECRET_KEY", "dev-secret-change-me")
    app.config["API_TOKEN"] = get_api_token()
    app.config["HEALTH_CHECK_TOKEN"] = HEALTH_CHECK_TOKEN

    # Rate limiting
    from scheduler.core.limiter_config import limiter

    app.config["RATELIMIT_STORAGE_URI"] = os.getenv("LIMITER_STORAGE_URI", "memory://")
    rate_limit_disabled = test_mode and os.getenv("RATE_LIMIT_ENABLED", "1") == "0"
    if rate_limit_disabled:
        app.config["RATELIMIT_ENABLED"] = False
    limiter.init_app(app)
    if rate_limit_disabled:
        limiter.enabled = False
        logger.info(
            "Rate limiting disabled for testing", extra={"context": {"test_mode": True}}
        )

    # Production validation: fail fast if weak secrets are used
    if is_production:
        secret_key = app.config["SECRET_KEY"]
        if secret_key in WEAK_SECRETS or len(secret_key) < 32:
            raise ValueError(
                "Production deployment requires strong SECRET_KEY (min 32 chars). "
                "Set FLASK_SECRET_KEY environment variable."
            )

    # Cookie and session hardening
    app.config.setdefault("SESSION_COOKIE_SECURE", is_production)
    app.config.setdefault("SESSION_COOKIE_HTTPONLY", True)
    app.config.setdefault("SESSION_COOKIE_SAMESITE", "Lax")
    app.config.setdefault("REMEMBER_COOKIE_SECURE", is_production)
    app.config.setdefault("REMEMBER_COOKIE_HTTPONLY", True)

    # CSRF protection for the backend forms (API blueprints are exempt)
    from scheduler.core.csrf_config import csrf

    app.config["WTF_CSRF_TIME_LIMIT"] = None
    app.config["WTF_CSRF_SSL_STRICT"] = is_production
    app.config["WTF_CSRF_ENABLED"] = os.getenv("WTF_CSRF_ENABLED", "1") != "0"
    csrf.init_app(app)

    # Security headers in production
    if is_production:
        from flask_talisman import Talisman

        csp = {
            "default-src": ["'self'"],
            "script-src": ["'self'"],
            "object-src": ["'none'"],
            "style-src": ["'self'"],
            "img-src": ["'self'", "data:"],
        }
        Talisman(
            app,
            content_security_policy=csp,
            force_https=True,
            strict_transport_security=True,
            strict_transport_security_max_age=63072000,
            frame_options="DENY",
            referrer_policy="no-referrer",
        )

    # Database schema and seed data
    from scheduler.db.seed import (
        ensure_admin_user,
        ensure_default_settings,
        ensure_roles,
    )
    from scheduler.db.session import SessionLocal, create_tables

    create_tables()
    ensure_roles()
    ensure_default_settings()

    admin_username = os.getenv("ADMIN_USERNAME")
    admin_password = os.getenv("ADMIN_PASSWORD")
    if admin_username and admin_password:
        ensure_admin_user(
            admin_username,
            admin_password,
            os.getenv("ADMIN_EMAIL", f"{admin_username}@example.org"),
        )

    # Flask-Login
    from scheduler.db.base import User

    login_manager = LoginManager()
    login_manager.init_app(app)
    login_manager.login_view = "auth.login"  # type: ignore[assignment]
    login_manager.login_message = "Please log in to access this page."

    @login_manager.user_loader
    def load_user(user_id):
        with SessionLocal() as db:
            return db.get(User, int(user_id))

    @app.route("/")
    def home():
        if current_user.is_authenticated:
            return redirect(url_for("backend.index"))
        return redirect(url_for("auth.login"))

    from scheduler.core.api_utils import api_response

    @app.errorhandler(404)
    def not_found(error):
        if request.path.startswith("/api/"):
            return api_response(False, "Not found", status_code=404)
        return render_template("error404.html", company_name=_company_name()), 404

    # Blueprints
    from scheduler.controllers.api_v1 import register_api_blueprints
    from scheduler.controllers.auth_controller import auth_bp
    from scheduler.controllers.backend_controller import backend_bp
    from scheduler.controllers.health_controller import health_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(backend_bp)
    app.register_blueprint(health_bp)
    register_api_blueprints(app)

    # Template helpers
    from scheduler.utils.setting_helper import setting
    from scheduler.utils.template_helpers import (
        full_name,
        render_mail_icon,
        render_map_icon,
        render_phone_icon,
    )

    app.jinja_env.globals.update(
        {
            "full_name": full_name,
            "render_map_icon": render_map_icon,
            "render_mail_icon": render_mail_icon,
            "render_phone_icon": render_phone_icon,
            "setting": setting,
        }
    )

    logger.info(
        "Application created",
        extra={"context": {"environment": env, "blueprints": list(app.blueprints)}},
    )
    return app
