"""
Helpers for event create/edit and the admin dashboard.
"""

from datetime import datetime
from typing import Optional

REQUIRED_FIELDS_MESSAGE = (
    'Please fill in all required fields '
    '(Event Name, Start Time, End Time, Location, Event Type).'
)
SUBMISSION_REQUIRED_FIELDS_MESSAGE = (
    'Please fill in all required fields '
    '(Event Name, Description, Start Time, End Time, Location, Event Type).'
)


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def apply_event_form(target, form, image_path=None, keep_image=True):
    """
    Copy validated form values onto an Event or EventSubmission.

    Blank optional values are stored as NULL. The image reference is only
    replaced when ``image_path`` is given, unless ``keep_image`` is False.
    """
    target.name = form.eventName.data.strip()
    target.description = blank_to_none(form.eventDescription.data)
    target.start_time = form.startTime.data
    target.end_time = form.endTime.data
    target.location = form.eventLocation.data.strip()
    target.host = blank_to_none(form.eventHost.data)
    target.url = blank_to_none(form.eventURL.data)
    target.link_text = blank_to_none(form.eventLinkText.data)
    target.event_type_id = form.eventTypeID.data
    if image_path is not None or not keep_image:
        target.image_path = image_path
    return target


def populate_event_form(form, event):
    """Fill an event form with the stored values of an event (GET of the edit page)."""
    form.eventName.data = event.name
    form.eventDescription.data = event.description or ''
    form.startTime.data = event.start_time
    form.endTime.data = event.end_time
    form.eventLocation.data = event.location
    form.eventHost.data = event.host or ''
    form.eventTypeID.data = event.event_type_id
    form.eventURL.data = event.url or ''
    form.eventLinkText.data = event.link_text or ''
    return form


def partition_events(events, now: Optional[datetime] = None):
    """
    Split events into (upcoming, past) by comparing end time with ``now``.

    Order within each list follows the input order.
    """
    now = now or datetime.now()
    upcoming = []
    past = []
    for event in events:
        if event.end_time is None:
            continue
        if event.end_time > now:
            upcoming.append(event)
        else:
            past.append(event)
    return upcoming, past


def form_error_message(form, required_message=REQUIRED_FIELDS_MESSAGE):
    """
    Single message describing why an event form failed validation.

    A missing required field takes precedence over other errors.
    """
    if form.missing_required_fields():
        return required_message
    for field in form:
        if field.errors:
            return field.errors[0]
    return 'Please check your input and try again.'
