"""
Submission moderation workflow.

A submission moves ``pending -> approved`` or ``pending -> denied``; both
targets are terminal. Each transition is a single conditional UPDATE guarded
by ``status = 'pending'``, so two concurrent reviews of the same submission
cannot both succeed.
"""

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
import sqlalchemy.orm as so
from sqlalchemy.exc import SQLAlchemyError

from bulletin import db
from bulletin.events.utils import apply_event_form
from bulletin.uploads import copy_event_image, delete_event_image
from bulletin.models import (
    Event, EventSubmission, STATUS_PENDING, STATUS_APPROVED, STATUS_DENIED
)


def create_submission(submitter_id: int, form, image_path: Optional[str] = None) -> EventSubmission:
    """
    Insert a pending submission from a validated SubmissionForm.

    Raises SQLAlchemyError after rolling back when the insert fails.
    """
    submission = EventSubmission(submitter_id=submitter_id, status=STATUS_PENDING)
    apply_event_form(submission, form, image_path=image_path, keep_image=False)
    try:
        db.session.add(submission)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return submission


def _transition_from_pending(submission_id: int, new_status: str, **values) -> bool:
    """Flip a pending submission to ``new_status``; False when it was not pending."""
    result = db.session.execute(
        sa.update(EventSubmission)
        .where(EventSubmission.id == submission_id,
               EventSubmission.status == STATUS_PENDING)
        .values(status=new_status, reviewed_at=datetime.utcnow(), **values)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def approve_submission(submission_id: int) -> Optional[Event]:
    """
    Approve a pending submission, publishing a copy of it as a new Event.

    The status flip and the Event insert commit together or not at all. The
    Event gets its own copy of the submission's image file, which is removed
    again if the commit fails.

    Returns:
        The new Event, or None when the submission does not exist or is no
        longer pending.
    """
    image_copy = None
    try:
        if not _transition_from_pending(submission_id, STATUS_APPROVED):
            db.session.rollback()
            return None

        submission = db.session.get(EventSubmission, submission_id, populate_existing=True)
        event = submission.copy_details_to(Event())
        if submission.image_path:
            image_copy = copy_event_image(submission.image_path)
            event.image_path = image_copy
        db.session.add(event)
        db.session.commit()
        return event
    except (SQLAlchemyError, OSError):
        db.session.rollback()
        if image_copy:
            delete_event_image(image_copy)
        raise


def deny_submission(submission_id: int) -> bool:
    """
    Deny a pending submission and remove its stored image.

    Approved submissions stay approved, so a published event can never be
    left behind by a later denial. The image is only deleted once the denial
    has committed.

    Returns:
        True when the submission was pending and is now denied.
    """
    try:
        image_path = db.session.scalar(
            sa.select(EventSubmission.image_path).where(EventSubmission.id == submission_id)
        )
        denied = _transition_from_pending(submission_id, STATUS_DENIED, image_path=None)
        if denied:
            db.session.commit()
        else:
            db.session.rollback()
    except SQLAlchemyError:
        db.session.rollback()
        raise

    if denied and image_path:
        delete_event_image(image_path)
    return denied


def get_submitter_submissions(submitter_id: int):
    """A submitter's own submissions, newest first."""
    return db.session.scalars(
        sa.select(EventSubmission)
        .options(so.joinedload(EventSubmission.event_type))
        .where(EventSubmission.submitter_id == submitter_id)
        .order_by(EventSubmission.created_at.desc(), EventSubmission.id.desc())
    ).all()


def get_submissions_by_status(status: str, newest_first: bool = False):
    """Submissions in one status with their submitter and type loaded, for the admin dashboard."""
    order = EventSubmission.created_at.desc() if newest_first else EventSubmission.created_at.asc()
    return db.session.scalars(
        sa.select(EventSubmission)
        .options(so.joinedload(EventSubmission.submitter), so.joinedload(EventSubmission.event_type))
        .where(EventSubmission.status == status)
        .order_by(order, EventSubmission.id)
    ).all()
