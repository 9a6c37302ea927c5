"""
Unit tests for database models.
"""
import pytest
from datetime import datetime, timedelta
from sqlalchemy.exc import IntegrityError
from bulletin.models import User, Event, EventSubmission, EventType, STATUS_PENDING
from tests.fixtures.factories import (
    UserFactory, AdminUserFactory, SubmitterFactory, EventFactory, SubmissionFactory
)


@pytest.mark.unit
class TestUser:
    """Test cases for User model."""

    def test_password_hashing(self, db_session):
        user = UserFactory.create(email='hash@example.edu')
        user.set_password('mypassword123')
        db_session.commit()

        assert user.password_hash != 'mypassword123'
        assert user.check_password('mypassword123') is True
        assert user.check_password('wrongpassword') is False
        assert user.check_password('') is False
        assert user.check_password(None) is False

    def test_user_without_password_cannot_log_in(self, db_session):
        user = User(email='nopass@example.edu', role='submitter')
        db_session.add(user)
        db_session.commit()

        assert user.check_password('anything') is False

    def test_role_properties(self, db_session):
        admin = AdminUserFactory.create()
        submitter = SubmitterFactory.create()

        assert admin.is_admin is True
        assert admin.is_submitter is False
        assert submitter.is_submitter is True
        assert submitter.is_admin is False

    def test_email_is_unique(self, db_session):
        UserFactory.create(email='dup@example.edu')
        db_session.add(User(email='dup@example.edu', role='submitter'))

        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_unknown_role_is_rejected(self, db_session):
        db_session.add(User(email='odd@example.edu', role='superuser'))

        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()


@pytest.mark.unit
class TestEvent:
    """Test cases for canonical events."""

    def test_event_creation(self, db_session, event_types):
        event = EventFactory.create(name='Career Fair', event_type=event_types[0], host=None)

        assert event.id is not None
        assert event.event_type_name == 'Academic'
        assert event.host is None
        assert event.created_at is not None

    def test_end_must_follow_start(self, db_session, event_types):
        start = datetime(2030, 1, 1, 10)
        db_session.add(Event(name='Backwards', start_time=start, end_time=start,
                             location='Quad', event_type_id=event_types[0].id))

        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_is_upcoming_uses_end_time(self, db_session, event_types):
        event = EventFactory.create(event_type=event_types[0],
                                    start_time=datetime(2030, 1, 1, 9),
                                    end_time=datetime(2030, 1, 1, 17))

        assert event.is_upcoming(datetime(2030, 1, 1, 12)) is True
        assert event.is_upcoming(datetime(2030, 1, 1, 17)) is False


@pytest.mark.unit
class TestEventSubmission:
    """Test cases for submissions."""

    def test_new_submission_is_pending(self, db_session, event_types, submitter_user):
        submission = EventSubmission(
            name='Chess Tournament', start_time=datetime(2030, 2, 1, 10),
            end_time=datetime(2030, 2, 1, 16), location='Library',
            event_type_id=event_types[0].id, submitter_id=submitter_user.id)
        db_session.add(submission)
        db_session.commit()

        assert submission.status == STATUS_PENDING
        assert submission.is_pending is True
        assert submission.reviewed_at is None
        assert submission.submitter.email == submitter_user.email

    def test_unknown_status_is_rejected(self, db_session, event_types):
        submission = SubmissionFactory.build(event_type=event_types[0], status='archived',
                                             submitter=SubmitterFactory.create())
        db_session.add(submission)

        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_copy_details_to_event(self, db_session, event_types):
        submission = SubmissionFactory.create(
            event_type=event_types[1], url='https://example.edu/chess',
            link_text='Register', image_path='/uploads/events/chess-1-2.png')

        event = submission.copy_details_to(Event())

        assert event.details() == submission.details()
        assert event.image_path == '/uploads/events/chess-1-2.png'
        assert event.event_type_id == event_types[1].id

    def test_deleting_submitter_removes_submissions(self, db_session, event_types):
        submission = SubmissionFactory.create(event_type=event_types[0])
        submission_id = submission.id

        db_session.delete(submission.submitter)
        db_session.commit()

        assert db_session.get(EventSubmission, submission_id) is None

    def test_event_type_name_fallback(self):
        submission = EventSubmission(name='Loose', event_type=None)

        assert submission.event_type_name == 'Uncategorized'
