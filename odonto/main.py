import logging
import os

from dotenv import load_dotenv
from flask import Flask, redirect, render_template, url_for
from flask_login import LoginManager, current_user, login_required
from flask_wtf.csrf import CSRFError

from odonto.core.config import (
    WEAK_SECRETS,
    get_secret_key,
    is_production,
    is_test_mode,
    log_timezone_config,
    log_to_file_enabled,
    metrics_enabled,
    rate_limit_enabled,
)

# Get logger for this module
logger = logging.getLogger(__name__)

# Load environment variables conditionally
# Only load from .env when DATABASE_URL is not already defined by the environment
if not os.getenv("DATABASE_URL"):
    load_dotenv()


def create_app(config_overrides=None):  # noqa: C901
    """Application factory.

    `config_overrides` is applied to `app.config` before any extension is
    initialised, so tests can switch off CSRF or mark the app as TESTING.
    """
    env = os.getenv("FLASK_ENV", "development")
    production = is_production()

    app = Flask(__name__)

    # Set TESTING config from environment variable (before any other configuration)
    if is_test_mode():
        app.config["TESTING"] = True
    if config_overrides:
        app.config.update(config_overrides)

    # Configure structured logging (after app creation so we can register hooks)
    from odonto.core.logging_config import setup_logging

    setup_logging(
        app=app,  # Pass app to register request/response hooks
        log_level=logging.INFO if production else logging.DEBUG,
        enable_sql_echo=False,
        log_to_file=log_to_file_enabled(),
        use_json_format=production,  # JSON logs in production, colored in dev
    )
    logger.info(
        "Logging configured",
        extra={"context": {"environment": env, "json_format": production}},
    )

    log_timezone_config()

    # Sentry Integration
    # Initialize Sentry for error tracking when a DSN is configured
    sentry_dsn = os.getenv("SENTRY_DSN")
    if sentry_dsn:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration
        from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=env,
            release=os.getenv("GIT_SHA", "unknown"),
            integrations=[
                FlaskIntegration(),
                SqlalchemyIntegration(),
            ],
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            send_default_pii=False,  # Don't send PII by default
        )
        logger.info("Sentry initialized", extra={"context": {"environment": env}})
    else:
        logger.info(
            "Sentry not initialized (SENTRY_DSN not set)",
            extra={"context": {"environment": env}},
        )

    # Prometheus Metrics
    # Expose /metrics endpoint for Prometheus scraping
    # MUST be initialized BEFORE limiter to avoid being rate-limited
    if metrics_enabled():
        from prometheus_client import CollectorRegistry
        from prometheus_flask_exporter import PrometheusMetrics

        # A registry per app so create_app() can run more than once per process
        metrics = PrometheusMetrics(app, registry=CollectorRegistry())
        metrics.info(
            "app_info",
            "Application information",
            version=os.getenv("GIT_SHA", "unknown"),
            environment=env,
        )
        logger.info(
            "Prometheus metrics initialized",
            extra={"context": {"metrics_endpoint": "/metrics"}},
        )

    # Configuration
    app.config.setdefault("SECRET_KEY", get_secret_key())

    # Production validation: fail fast if weak secrets are used
    if production:
        secret_key = app.config["SECRET_KEY"]
        if secret_key in WEAK_SECRETS or len(secret_key) < 32:
            raise ValueError(
                "Production deployment requires strong SECRET_KEY (min 32 chars). "
                "Set FLASK_SECRET_KEY environment variable."
            )

    # Initialize Flask-Limiter (rate limiting)
    from odonto.core.limiter_config import limiter

    app.config["RATELIMIT_STORAGE_URI"] = os.getenv("LIMITER_STORAGE_URI", "memory://")
    limiter.init_app(app)
    limiter.enabled = rate_limit_enabled()
    if not limiter.enabled:
        logger.info("Rate limiting disabled", extra={"context": {"env": env}})

    # Cookie and Session Hardening
    # In production (FLASK_ENV=production), cookies should use secure flag
    app.config.setdefault("SESSION_COOKIE_SECURE", production)
    app.config.setdefault("SESSION_COOKIE_HTTPONLY", True)
    app.config.setdefault("SESSION_COOKIE_SAMESITE", "Lax")
    app.config.setdefault("REMEMBER_COOKIE_SECURE", production)
    app.config.setdefault("REMEMBER_COOKIE_HTTPONLY", True)

    # CSRF Protection
    # Protect all forms from Cross-Site Request Forgery attacks
    from odonto.core.api_utils import api_response
    from odonto.core.csrf_config import csrf

    app.config.setdefault("WTF_CSRF_TIME_LIMIT", None)  # Tokens don't expire
    app.config.setdefault("WTF_CSRF_SSL_STRICT", production)  # HTTPS in prod
    app.config.setdefault("WTF_CSRF_ENABLED", True)
    csrf.init_app(app)

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        logger.warning(
            "CSRF validation failed",
            extra={"context": {"reason": e.description}},
        )
        return api_response(
            False, "Invalid or missing anti-forgery token", status_code=400
        )

    # HTTPS Enforcement with Talisman
    if production:
        from flask_talisman import Talisman

        Talisman(
            app,
            content_security_policy={
                "default-src": ["'self'"],
                "object-src": ["'none'"],
            },
            force_https=True,
            strict_transport_security=True,
            strict_transport_security_max_age=63072000,
            frame_options="DENY",
            referrer_policy="no-referrer",
        )

    # Ensure database tables exist early to avoid runtime failures like
    # "no such table: dentists". Idempotent across SQLite/PostgreSQL.
    from odonto.db.session import create_tables

    create_tables()

    # Initialize Flask-Login
    login_manager = LoginManager()
    login_manager.init_app(app)
    login_manager.login_view = "login_page"  # type: ignore[assignment]
    login_manager.login_message = "Please log in to access this page."

    from odonto.db.base import User
    from odonto.db.session import SessionLocal

    @login_manager.user_loader
    def load_user(user_id):
        with SessionLocal() as db:
            user = db.get(User, int(user_id))
            if user is not None and user.is_active:
                return user
        return None

    @app.route("/")
    def login_page():
        if current_user.is_authenticated:
            return redirect(url_for("index"))
        return render_template("login.html")

    @app.route("/index")
    @login_required
    def index():
        return render_template("index.html")

    # Register blueprints
    from odonto.controllers.admin_controller import admin_bp
    from odonto.controllers.auth_controller import auth_bp
    from odonto.controllers.dentist_controller import dentist_bp
    from odonto.controllers.health_controller import health_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(dentist_bp)
    app.register_blueprint(health_bp)

    # Monitoring endpoint must not be rate limited
    limiter.exempt(health_bp)

    logger.info(
        "Application created",
        extra={"context": {"environment": env, "blueprints": list(app.blueprints)}},
    )
    return app
