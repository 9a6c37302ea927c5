"""
Test configuration and fixtures for the campus events bulletin.
"""
import pytest
import shutil
import tempfile
import os

# Set environment variables for testing
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['SESSION_SECRET'] = 'test-secret-key-for-testing-only'

from bulletin import create_app, db
from bulletin.models import EventType
from tests.fixtures.factories import AdminUserFactory, SubmitterFactory


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app('testing')

    # Keep uploaded test images out of the package tree
    upload_dir = tempfile.mkdtemp(prefix='bulletin-uploads-')
    app.config['UPLOAD_FOLDER'] = upload_dir

    with app.app_context():
        from bulletin import models

        db.create_all()

        import sqlalchemy as sa
        tables = sa.inspect(db.engine).get_table_names()
        if 'events' not in tables:
            raise RuntimeError(f"Database setup failed. Tables created: {tables}")

        yield app

        db.drop_all()

    shutil.rmtree(upload_dir, ignore_errors=True)


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Create test CLI runner."""
    return app.test_cli_runner()


@pytest.fixture
def db_session(app):
    """Create database session for testing."""
    with app.app_context():
        yield db.session

        # Clear all tables for a clean state between tests
        try:
            for table in reversed(db.metadata.sorted_tables):
                db.session.execute(table.delete())
            db.session.commit()
        except Exception:
            db.session.rollback()
        finally:
            db.session.remove()


@pytest.fixture
def upload_folder(app):
    """The upload folder, emptied after the test."""
    folder = app.config['UPLOAD_FOLDER']
    yield folder
    for name in os.listdir(folder):
        os.remove(os.path.join(folder, name))


@pytest.fixture
def event_types(db_session):
    """Create the standard event types."""
    types = [EventType(name=name) for name in ['Academic', 'Athletics', 'Social']]
    db_session.add_all(types)
    db_session.commit()
    return types


@pytest.fixture
def admin_user(db_session):
    """Create an admin account."""
    return AdminUserFactory.create(email='admin@example.edu', password='adminpassword123')


@pytest.fixture
def submitter_user(db_session):
    """Create a submitter account."""
    return SubmitterFactory.create(email='student@example.edu', password='submitterpass123')


@pytest.fixture
def admin_client(client, admin_user):
    """Create an authenticated admin client session."""
    with client.session_transaction() as sess:
        sess['_user_id'] = str(admin_user.id)
        sess['_fresh'] = True
    return client


@pytest.fixture
def submitter_client(client, submitter_user):
    """Create an authenticated submitter client session."""
    with client.session_transaction() as sess:
        sess['_user_id'] = str(submitter_user.id)
        sess['_fresh'] = True
    return client
