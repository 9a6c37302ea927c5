"""
Functional tests for role-based access control and the moderation workflow.
"""
import pytest
import sqlalchemy as sa
from bulletin import db
from bulletin.models import Event, EventSubmission
from tests.fixtures.factories import EventFactory, SubmissionFactory

ADMIN_ROUTES = ['/admin/dashboard', '/admin/create']
LOGIN_PROMPT = b'Please log in to access this page'


@pytest.mark.functional
@pytest.mark.auth
class TestAnonymousAccess:
    """Anonymous visitors see public pages and the login view elsewhere."""

    @pytest.mark.parametrize('path', ['/', '/events', '/login', '/signup'])
    def test_public_pages(self, client, db_session, path):
        response = client.get(path)

        assert response.status_code == 200
        assert LOGIN_PROMPT not in response.data

    @pytest.mark.parametrize('path', ADMIN_ROUTES + ['/submitter/dashboard', '/no-such-page'])
    def test_protected_pages_render_login(self, client, db_session, path):
        response = client.get(path)

        assert response.status_code == 200
        assert LOGIN_PROMPT in response.data
        assert b'name="password"' in response.data

    def test_anonymous_cannot_delete(self, client, db_session, event_types):
        event = EventFactory.create(event_type=event_types[0])

        response = client.post(f'/admin/delete/{event.id}')

        assert LOGIN_PROMPT in response.data
        assert db.session.get(Event, event.id) is not None

    def test_anonymous_cannot_approve(self, client, db_session, event_types):
        submission = SubmissionFactory.create(event_type=event_types[0])

        client.post(f'/admin/submissions/{submission.id}/approve')

        assert db.session.scalar(sa.select(sa.func.count(Event.id))) == 0


@pytest.mark.functional
@pytest.mark.auth
class TestSubmitterAccess:
    """Submitters are kept out of the admin area."""

    @pytest.mark.parametrize('path', ADMIN_ROUTES)
    def test_admin_pages_redirect_to_submitter_dashboard(self, submitter_client, path):
        response = submitter_client.get(path)

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/submitter/dashboard')

    def test_submitter_cannot_approve(self, submitter_client, event_types):
        submission = SubmissionFactory.create(event_type=event_types[0])

        response = submitter_client.post(f'/admin/submissions/{submission.id}/approve')

        assert response.status_code == 302
        assert db.session.get(EventSubmission, submission.id, populate_existing=True).status == 'pending'

    def test_submitter_pages(self, submitter_client, event_types):
        assert submitter_client.get('/submitter/dashboard').status_code == 200
        assert submitter_client.get('/submit-event').status_code == 200


@pytest.mark.functional
@pytest.mark.auth
class TestAdminAccess:
    """Admins reach the admin area but not the submitter area."""

    @pytest.mark.parametrize('path', ADMIN_ROUTES + ['/', '/events'])
    def test_admin_pages(self, admin_client, event_types, path):
        assert admin_client.get(path).status_code == 200

    def test_submitter_dashboard_redirects_admin(self, admin_client):
        response = admin_client.get('/submitter/dashboard')

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/admin/dashboard')

    def test_unknown_admin_page_is_not_found(self, admin_client):
        assert admin_client.get('/admin/no-such-page').status_code == 404


@pytest.mark.functional
class TestModerationWorkflow:
    """End to end: a submitter proposes an event and an admin publishes it."""

    def test_submit_approve_publish(self, client, admin_user, event_types):
        client.post('/signup', data={
            'email': 'organiser@example.edu',
            'password': 'organiserpass1',
            'confirmPassword': 'organiserpass1'
        })
        client.post('/submit-event', data={
            'eventName': 'Astronomy Night',
            'eventDescription': 'Telescopes on the roof',
            'startTime': '2031-09-01T20:00',
            'endTime': '2031-09-01T23:00',
            'eventLocation': 'Science Building Roof',
            'eventHost': 'Astronomy Club',
            'eventTypeID': str(event_types[0].id),
        })

        # Not public until approved
        assert b'Astronomy Night' not in client.get('/events').data

        client.get('/logout')
        client.post('/login', data={'email': 'admin@example.edu', 'password': 'adminpassword123'})

        dashboard = client.get('/admin/dashboard')
        assert b'Astronomy Night' in dashboard.data

        submission = db.session.scalar(sa.select(EventSubmission))
        client.post(f'/admin/submissions/{submission.id}/approve')

        client.get('/logout')
        listing = client.get('/events')
        assert b'Astronomy Night' in listing.data
        assert b'Telescopes on the roof' in listing.data
