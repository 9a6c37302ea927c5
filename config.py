import os
from urllib.parse import quote_plus

basedir = os.path.dirname(os.path.abspath(__file__))


def _database_url_from_parts():
    """Assemble a PostgreSQL URL from the individual DB_* variables."""
    user = os.environ.get('DB_USER', 'postgres')
    password = os.environ.get('DB_PASSWORD', '')
    host = os.environ.get('DB_HOST', 'localhost')
    port = os.environ.get('DB_PORT', '5432')
    name = os.environ.get('DB_NAME', 'campus_events')

    credentials = quote_plus(user)
    if password:
        credentials += ':' + quote_plus(password)

    url = f'postgresql://{credentials}@{host}:{port}/{name}'
    if os.environ.get('DB_SSL', 'false').lower() in ['true', 'on', '1', 'require']:
        url += '?sslmode=require'
    return url


class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SESSION_SECRET') or os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        raise RuntimeError(
            "SESSION_SECRET environment variable is required. "
            "Please set it in your .flaskenv file or environment. "
            "Generate a secure key with: python -c \"import secrets; print(secrets.token_hex(32))\""
        )

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True}

    # Uploaded event images live under the package's public static tree
    UPLOAD_FOLDER = os.path.join(basedir, 'bulletin', 'static', 'uploads', 'events')
    UPLOAD_URL_PREFIX = '/uploads/events'
    IMAGE_MAX_SIZE_MB = 5
    IMAGE_ALLOWED_EXTENSIONS = ['jpg', 'jpeg', 'png', 'gif']
    IMAGE_ALLOWED_MIMETYPES = ['image/jpeg', 'image/png', 'image/gif']
    # Hard transport limit, a little above the image limit to leave room for the form fields
    MAX_CONTENT_LENGTH = 6 * 1024 * 1024

    # Paths reachable without a session
    PUBLIC_PATHS = ['/', '/login', '/logout', '/events', '/signup', '/submit-event']
    PUBLIC_PATH_PREFIXES = ['/static/', '/uploads/']

    # Lookup data seeded into the eventtypes table
    DEFAULT_EVENT_TYPES = [
        'Academic',
        'Arts & Culture',
        'Athletics',
        'Career',
        'Community Service',
        'Social',
        'Other',
    ]

    # Login throttling
    LOGIN_RATE_LIMIT = '10 per minute'

    # Session cookie security configuration
    SESSION_COOKIE_SECURE = os.environ.get('SESSION_COOKIE_SECURE', 'True').lower() == 'true'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 86400  # 24 hours in seconds
    SESSION_COOKIE_NAME = 'bulletin_session'


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get('DEV_DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'app.db')
    SESSION_COOKIE_SECURE = False  # Allow HTTP in development


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    SESSION_COOKIE_SECURE = False  # Allow HTTP in testing


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or _database_url_from_parts()
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'connect_args': {
            'connect_timeout': int(os.environ.get('DB_CONNECT_TIMEOUT') or 10),
            'options': '-c statement_timeout={}'.format(
                int(os.environ.get('DB_STATEMENT_TIMEOUT_MS') or 15000)),
        },
    }
    SESSION_COOKIE_SECURE = True  # Force HTTPS in production


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
