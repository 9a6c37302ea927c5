"""
Unit tests for audit logging.
"""
import logging
import pytest
from unittest.mock import patch, MagicMock
from bulletin.audit import (
    audit_log_create, audit_log_update, audit_log_delete,
    audit_log_authentication, audit_log_security_event,
    audit_log_system_event, audit_log_file_operation, get_model_changes,
    get_current_user_info
)


@pytest.fixture
def mock_logger():
    with patch('bulletin.audit.setup_audit_logger') as mock_setup:
        logger = MagicMock()
        mock_setup.return_value = logger
        yield logger


def logged(mock_logger):
    level, message = mock_logger.log.call_args[0]
    return level, message


@pytest.mark.unit
class TestAuditLogging:
    """Test audit logging functions."""

    def test_create_format(self, app, mock_logger):
        with app.test_request_context():
            audit_log_create('Event', 123, 'Created event: Career Fair', {'event_type_id': 2})

        level, message = logged(mock_logger)
        assert level == logging.INFO
        assert message.startswith('CREATE | Event | ID: 123')
        assert 'User: ANONYMOUS' in message
        assert 'Created event: Career Fair' in message
        assert 'event_type_id=2' in message

    def test_update_includes_changes(self, app, mock_logger):
        with app.test_request_context():
            audit_log_update('EventSubmission', 7, 'Approved submission', {'status': 'pending'})

        _, message = logged(mock_logger)
        assert message.startswith('UPDATE | EventSubmission | ID: 7')
        assert 'status=pending' in message

    def test_delete_format(self, app, mock_logger):
        with app.test_request_context():
            audit_log_delete('Event', 9, 'Deleted event: Mixer')

        _, message = logged(mock_logger)
        assert message.startswith('DELETE | Event | ID: 9')

    def test_authentication(self, app, mock_logger):
        with app.test_request_context():
            audit_log_authentication('LOGIN', 'admin@example.edu', False)

        _, message = logged(mock_logger)
        assert message == 'AUTH | LOGIN | FAILURE | User: admin@example.edu'

    def test_security_event_is_a_warning(self, app, mock_logger):
        with app.test_request_context():
            audit_log_security_event('ACCESS_DENIED', 'Blocked request to /admin/dashboard')

        level, message = logged(mock_logger)
        assert level == logging.WARNING
        assert 'SECURITY | ACCESS_DENIED' in message

    def test_system_event_outside_request(self, app, mock_logger):
        with app.app_context():
            audit_log_system_event('SEED', 'Created 7 event types')

        _, message = logged(mock_logger)
        assert message == 'SYSTEM | SEED | Created 7 event types'

    def test_file_operation(self, app, mock_logger):
        with app.test_request_context():
            audit_log_file_operation('UPLOAD', 'poster-1-2.png', 'Stored image from poster.png')

        _, message = logged(mock_logger)
        assert 'FILE | UPLOAD | File: poster-1-2.png' in message

    def test_user_info_outside_request(self, app):
        with app.app_context():
            assert get_current_user_info() == 'SYSTEM'

    def test_logger_failure_does_not_propagate(self, app):
        with app.test_request_context():
            with patch('bulletin.audit.setup_audit_logger', side_effect=OSError('disk full')):
                audit_log_create('Event', 1, 'Created event')

    def test_get_model_changes(self):
        class Record:
            name = 'Old name'
            location = 'Quad'
            host = None

        changes = get_model_changes(Record(), {'name': 'New name', 'location': 'Quad',
                                               'host': 'Club', 'missing': 'x'})

        assert changes == {'name': 'Old name', 'host': None}
