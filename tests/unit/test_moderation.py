"""
Unit tests for the submission moderation workflow.
"""
import os
import pytest
from unittest.mock import patch
from sqlalchemy.exc import OperationalError
import sqlalchemy as sa
from bulletin import db
from bulletin.models import Event, EventSubmission, STATUS_PENDING, STATUS_APPROVED, STATUS_DENIED
from bulletin.uploads import delete_event_image
from bulletin.submissions.utils import (
    approve_submission, deny_submission, get_submitter_submissions, get_submissions_by_status
)
from tests.fixtures.factories import SubmissionFactory, SubmitterFactory


IMAGE_BYTES = b'\x89PNG' + b'0' * 64


def store_image(upload_folder, filename):
    with open(os.path.join(upload_folder, filename), 'wb') as f:
        f.write(IMAGE_BYTES)


def event_count():
    return db.session.scalar(sa.select(sa.func.count(Event.id)))


def reload(submission_id):
    return db.session.get(EventSubmission, submission_id, populate_existing=True)


@pytest.mark.unit
class TestApproveSubmission:
    """Test cases for approving submissions."""

    def test_approve_publishes_copy(self, db_session, event_types, upload_folder):
        store_image(upload_folder, 'chess-1-2.png')
        submission = SubmissionFactory.create(
            event_type=event_types[2], url='https://example.edu/chess', link_text='Sign up',
            image_path='/uploads/events/chess-1-2.png')
        expected = submission.details()

        event = approve_submission(submission.id)

        assert event is not None
        assert event.id is not None
        details = event.details()
        assert details.pop('image_path').startswith('/uploads/events/chess-1-2-')
        expected.pop('image_path')
        assert details == expected
        stored = reload(submission.id)
        assert stored.status == STATUS_APPROVED
        assert stored.reviewed_at is not None
        assert event_count() == 1

    def test_approved_event_gets_its_own_image_file(self, db_session, event_types, upload_folder):
        store_image(upload_folder, 'chess-1-2.png')
        submission = SubmissionFactory.create(event_type=event_types[0],
                                              image_path='/uploads/events/chess-1-2.png')

        event = approve_submission(submission.id)

        assert event.image_path != submission.image_path
        assert sorted(os.listdir(upload_folder)) == sorted(
            ['chess-1-2.png', event.image_path.rsplit('/', 1)[1]])
        with open(os.path.join(upload_folder, event.image_path.rsplit('/', 1)[1]), 'rb') as f:
            assert f.read() == IMAGE_BYTES

        assert delete_event_image(event.image_path) is True
        assert os.listdir(upload_folder) == ['chess-1-2.png']

    def test_missing_image_file_publishes_without_image(self, db_session, event_types, upload_folder):
        submission = SubmissionFactory.create(event_type=event_types[0],
                                              image_path='/uploads/events/gone-1-2.png')

        event = approve_submission(submission.id)

        assert event is not None
        assert event.image_path is None
        assert reload(submission.id).image_path == '/uploads/events/gone-1-2.png'

    def test_approve_twice_publishes_once(self, db_session, event_types):
        submission = SubmissionFactory.create(event_type=event_types[0])

        assert approve_submission(submission.id) is not None
        assert approve_submission(submission.id) is None
        assert event_count() == 1

    def test_approve_denied_submission(self, db_session, event_types):
        submission = SubmissionFactory.create(event_type=event_types[0], status=STATUS_DENIED)

        assert approve_submission(submission.id) is None
        assert reload(submission.id).status == STATUS_DENIED
        assert event_count() == 0

    def test_approve_missing_submission(self, db_session):
        assert approve_submission(424242) is None

    def test_failed_insert_leaves_submission_pending(self, db_session, event_types):
        submission = SubmissionFactory.create(event_type=event_types[0])
        submission_id = submission.id

        with patch.object(db.session, 'commit', side_effect=OperationalError('INSERT', {}, Exception('down'))):
            with pytest.raises(OperationalError):
                approve_submission(submission_id)

        assert reload(submission_id).status == STATUS_PENDING
        assert event_count() == 0

    def test_failed_insert_removes_image_copy(self, db_session, event_types, upload_folder):
        store_image(upload_folder, 'chess-1-2.png')
        submission = SubmissionFactory.create(event_type=event_types[0],
                                              image_path='/uploads/events/chess-1-2.png')
        submission_id = submission.id

        with patch.object(db.session, 'commit', side_effect=OperationalError('INSERT', {}, Exception('down'))):
            with pytest.raises(OperationalError):
                approve_submission(submission_id)

        assert os.listdir(upload_folder) == ['chess-1-2.png']
        assert reload(submission_id).status == STATUS_PENDING

    def test_approved_event_is_independent(self, db_session, event_types):
        submission = SubmissionFactory.create(event_type=event_types[0], name='Original')
        event = approve_submission(submission.id)

        event.name = 'Edited by admin'
        db_session.commit()

        assert reload(submission.id).name == 'Original'


@pytest.mark.unit
class TestDenySubmission:
    """Test cases for denying submissions."""

    def test_deny_pending(self, db_session, event_types):
        submission = SubmissionFactory.create(event_type=event_types[0])

        assert deny_submission(submission.id) is True
        stored = reload(submission.id)
        assert stored.status == STATUS_DENIED
        assert stored.reviewed_at is not None
        assert event_count() == 0

    def test_deny_approved_is_refused(self, db_session, event_types):
        submission = SubmissionFactory.create(event_type=event_types[0])
        approve_submission(submission.id)

        assert deny_submission(submission.id) is False
        assert reload(submission.id).status == STATUS_APPROVED
        assert event_count() == 1

    def test_deny_twice(self, db_session, event_types):
        submission = SubmissionFactory.create(event_type=event_types[0])

        assert deny_submission(submission.id) is True
        assert deny_submission(submission.id) is False

    def test_deny_missing_submission(self, db_session):
        assert deny_submission(424242) is False

    def test_deny_removes_image(self, db_session, event_types, upload_folder):
        store_image(upload_folder, 'flyer-1-2.png')
        submission = SubmissionFactory.create(event_type=event_types[0],
                                              image_path='/uploads/events/flyer-1-2.png')

        assert deny_submission(submission.id) is True
        assert os.listdir(upload_folder) == []
        assert reload(submission.id).image_path is None

    def test_refused_deny_keeps_image(self, db_session, event_types, upload_folder):
        store_image(upload_folder, 'flyer-1-2.png')
        submission = SubmissionFactory.create(event_type=event_types[0], status=STATUS_APPROVED,
                                              image_path='/uploads/events/flyer-1-2.png')

        assert deny_submission(submission.id) is False
        assert os.listdir(upload_folder) == ['flyer-1-2.png']
        assert reload(submission.id).image_path == '/uploads/events/flyer-1-2.png'


@pytest.mark.unit
class TestSubmissionQueries:
    """Test cases for listing submissions."""

    def test_submitter_sees_only_own_submissions(self, db_session, event_types):
        mine = SubmitterFactory.create()
        other = SubmitterFactory.create()
        SubmissionFactory.create(event_type=event_types[0], submitter=mine, name='Mine')
        SubmissionFactory.create(event_type=event_types[0], submitter=other, name='Theirs')

        assert [s.name for s in get_submitter_submissions(mine.id)] == ['Mine']

    def test_by_status(self, db_session, event_types):
        SubmissionFactory.create(event_type=event_types[0], name='Waiting')
        SubmissionFactory.create(event_type=event_types[0], name='Rejected', status=STATUS_DENIED)

        assert [s.name for s in get_submissions_by_status(STATUS_PENDING)] == ['Waiting']
        assert [s.name for s in get_submissions_by_status(STATUS_DENIED, newest_first=True)] == ['Rejected']
