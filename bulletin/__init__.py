from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import logging
from logging.handlers import RotatingFileHandler
import os

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login = LoginManager()
limiter = Limiter(key_func=get_remote_address)


def create_app(config_name='development'):
    """Application factory function"""
    app = Flask(__name__)

    # Load configuration
    from config import config
    app.config.from_object(config[config_name])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login.init_app(app)
    login.login_view = 'auth.login'
    limiter.init_app(app)

    # Upload directory is created lazily on startup
    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    # Configure logging
    configure_logging(app)

    # Register template filters
    register_template_filters(app)

    # Register middleware
    register_middleware(app)

    # Register blueprints/routes
    register_routes(app)

    return app


def configure_logging(app):
    """Configure logging for the application"""
    logs_dir = os.path.join(app.instance_path, 'logs')
    os.makedirs(logs_dir, exist_ok=True)

    # Always log to file (even in debug mode)
    app_log_path = os.path.join(logs_dir, 'app.log')
    file_handler = RotatingFileHandler(app_log_path, maxBytes=10240, backupCount=10)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'))
    file_handler.setLevel(logging.INFO)
    app.logger.addHandler(file_handler)

    if app.debug:
        app.logger.setLevel(logging.DEBUG)
    else:
        app.logger.setLevel(logging.INFO)

    app.logger.info('Campus events bulletin startup')


def register_template_filters(app):
    """Register custom template filters"""

    @app.template_filter('timestamp')
    def timestamp_filter(value):
        """Format a civil datetime as YYYY-MM-DD HH:MM:SS"""
        if value is None:
            return ''
        return value.strftime('%Y-%m-%d %H:%M:%S')

    @app.template_filter('datetime_local')
    def datetime_local_filter(value):
        """Format a datetime for an <input type="datetime-local"> value"""
        if value is None:
            return ''
        return value.strftime('%Y-%m-%dT%H:%M')

    @app.template_filter('markdown')
    def markdown_filter(text):
        """Render an event description as sanitised HTML"""
        from markupsafe import Markup
        from bulletin.utils import render_description
        return Markup(render_description(text))


def register_middleware(app):
    """Register middleware functions"""

    @app.before_request
    def enforce_session_gate():
        """Admit or deny the request based on the caller's session context"""
        from flask import request, redirect, render_template
        from bulletin.auth.context import session_context, check_access
        from bulletin.auth.forms import LoginForm, SignupForm
        from bulletin.audit import audit_log_security_event

        decision = check_access(
            request.path,
            session_context(),
            app.config['PUBLIC_PATHS'],
            app.config['PUBLIC_PATH_PREFIXES'],
        )
        if decision.allowed:
            return None

        audit_log_security_event('ACCESS_DENIED', f'Blocked request to {request.path}')
        if decision.redirect_to:
            return redirect(decision.redirect_to)
        return render_template('auth/login.html',
                               form=LoginForm(formdata=None),
                               signup_form=SignupForm(formdata=None),
                               active_form='login',
                               error_message=decision.message)

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses"""
        response.headers['Content-Security-Policy'] = (
            "default-src 'self'; "
            "script-src 'self'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "connect-src 'self';"
        )
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        return response

    @app.context_processor
    def inject_session_context():
        """Make the typed session context available to all templates"""
        from bulletin.auth.context import session_context
        return dict(ctx=session_context())


def register_routes(app):
    """Register application routes via blueprints"""
    from bulletin.main import bp as main_bp
    from bulletin.auth import bp as auth_bp
    from bulletin.submissions import bp as submissions_bp
    from bulletin.admin import bp as admin_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(submissions_bp)
    app.register_blueprint(admin_bp, url_prefix='/admin')

    # Register error handlers
    from bulletin.errors import register_error_handlers
    register_error_handlers(app)

    # Import models to ensure they're loaded
    from bulletin import models
