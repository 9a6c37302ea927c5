"""
Audit Logging for Event and Account Operations

Every change to the event catalog or the moderation queue, every
authentication event and every stored or removed image is written to
``instance/logs/audit.log`` with timestamp, acting user and details.

Usage:
    from bulletin.audit import audit_log_create, audit_log_update, audit_log_delete

    audit_log_create('Event', event.id, f'Created event: {event.name}')
    audit_log_update('EventSubmission', submission.id, 'Approved submission', {'status': 'pending'})
    audit_log_delete('Event', event_id, f'Deleted event: {name}')
"""

import logging
import os
from typing import Optional, Dict, Any, Union
from flask import current_app, has_request_context
from flask_login import current_user


def setup_audit_logger():
    """Setup and configure the audit logger with proper formatting and file handling."""
    audit_logger = logging.getLogger('audit')
    audit_logger.setLevel(logging.INFO)

    # Prevent duplicate log entries
    if audit_logger.hasHandlers():
        return audit_logger

    log_dir = os.path.join(current_app.instance_path, 'logs')
    os.makedirs(log_dir, exist_ok=True)

    file_handler = logging.FileHandler(os.path.join(log_dir, 'audit.log'), mode='a', encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    audit_logger.addHandler(file_handler)

    # Prevent propagation to root logger
    audit_logger.propagate = False

    return audit_logger


def get_current_user_info() -> str:
    """Get current user information for audit logging."""
    if not has_request_context():
        return "SYSTEM"
    if current_user.is_authenticated:
        return f"{current_user.email} (ID: {current_user.id}, role: {current_user.role})"
    return "ANONYMOUS"


def _format_details(additional_data: Optional[Dict[str, Any]]) -> str:
    if not additional_data:
        return ''
    return ' | ' + ', '.join(f'{key}={value}' for key, value in additional_data.items())


def _write(level: int, message: str, model_name: str = '', record_id: Union[int, str, None] = None):
    """Write one audit line; a failure here must never break the request."""
    try:
        setup_audit_logger().log(level, message)
    except Exception as e:
        current_app.logger.error(f"AUDIT_FAILURE | Failed to write audit entry for {model_name} {record_id}: {str(e)}")


def audit_log_create(model_name: str, record_id: Union[int, str], description: str,
                     additional_data: Optional[Dict[str, Any]] = None):
    """
    Log database record creation.

    Args:
        model_name: Name of the database model (e.g., 'Event', 'EventSubmission')
        record_id: ID of the created record
        description: Human-readable description of the operation
        additional_data: Optional additional data to include in the log
    """
    _write(logging.INFO,
           f"CREATE | {model_name} | ID: {record_id} | User: {get_current_user_info()} | "
           f"{description}{_format_details(additional_data)}",
           model_name, record_id)


def audit_log_update(model_name: str, record_id: Union[int, str], description: str,
                     changes: Optional[Dict[str, Any]] = None):
    """
    Log database record updates.

    Args:
        model_name: Name of the database model
        record_id: ID of the updated record
        description: Human-readable description of the operation
        changes: Optional dictionary of field changes {'field': 'old_value'}
    """
    _write(logging.INFO,
           f"UPDATE | {model_name} | ID: {record_id} | User: {get_current_user_info()} | "
           f"{description}{_format_details(changes)}",
           model_name, record_id)


def audit_log_delete(model_name: str, record_id: Union[int, str], description: str,
                     additional_data: Optional[Dict[str, Any]] = None):
    """Log database record deletion."""
    _write(logging.INFO,
           f"DELETE | {model_name} | ID: {record_id} | User: {get_current_user_info()} | "
           f"{description}{_format_details(additional_data)}",
           model_name, record_id)


def audit_log_authentication(event_type: str, email: str, success: bool):
    """
    Log authentication events.

    Args:
        event_type: Type of authentication event ('LOGIN', 'LOGOUT', 'SIGNUP')
        email: Account email involved in the event
        success: Whether the operation was successful
    """
    status = "SUCCESS" if success else "FAILURE"
    _write(logging.INFO, f"AUTH | {event_type} | {status} | User: {email}")


def audit_log_security_event(event_type: str, description: str):
    """Log security-related events such as denied access."""
    _write(logging.WARNING,
           f"SECURITY | {event_type} | User: {get_current_user_info()} | {description}")


def audit_log_system_event(event_type: str, description: str):
    """Log system-level events ('BOOTSTRAP', 'SEED')."""
    _write(logging.INFO, f"SYSTEM | {event_type} | {description}")


def audit_log_file_operation(operation: str, filename: str, description: str):
    """
    Log file operations.

    Args:
        operation: Type of file operation ('UPLOAD', 'COPY', 'DELETE')
        filename: Name of the file involved
        description: Human-readable description of the operation
    """
    _write(logging.INFO,
           f"FILE | {operation} | File: {filename} | User: {get_current_user_info()} | {description}")


def get_model_changes(model_instance, new_values: Dict[str, Any]) -> Dict[str, Any]:
    """
    Detect changes between a model instance and incoming values.

    Returns:
        Dictionary of changed fields mapped to their old values
    """
    changes = {}

    for field, new_value in new_values.items():
        if hasattr(model_instance, field):
            old_value = getattr(model_instance, field)
            if old_value != new_value:
                changes[field] = str(old_value) if old_value is not None else None

    return changes
