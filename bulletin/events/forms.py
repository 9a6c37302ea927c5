"""
Forms for creating, editing and submitting events.

Field names match the HTML contract of the event forms (``eventName``,
``startTime`` and so on), so the attributes keep that spelling.
"""

from flask_wtf import FlaskForm
from flask_wtf.file import FileField
from wtforms import StringField, TextAreaField, SelectField, SubmitField
from wtforms.fields import DateTimeLocalField
from wtforms.validators import DataRequired, Length, Optional, URL, ValidationError
import sqlalchemy as sa

from bulletin import db
from bulletin.models import EventType
from bulletin.uploads import ImageUpload

DATETIME_LOCAL_FORMATS = ['%Y-%m-%dT%H:%M', '%Y-%m-%dT%H:%M:%S', '%Y-%m-%d %H:%M:%S', '%Y-%m-%d %H:%M']


def strip_filter(value):
    return value.strip() if isinstance(value, str) else value


def event_type_choices():
    """(id, name) pairs for the event type dropdown, ordered by name."""
    event_types = db.session.scalars(sa.select(EventType).order_by(EventType.name)).all()
    return [(event_type.id, event_type.name) for event_type in event_types]


class EventDetailsForm(FlaskForm):
    """Fields shared by the admin event form and the submission form"""
    eventName = StringField('Event Name', filters=[strip_filter], validators=[
        DataRequired(message='Event name is required'),
        Length(max=256, message='Event name must be 256 characters or less')
    ])
    eventDescription = TextAreaField('Description', filters=[strip_filter], validators=[Optional()])
    startTime = DateTimeLocalField('Start Time', format=DATETIME_LOCAL_FORMATS, validators=[
        DataRequired(message='Start time is required')
    ])
    endTime = DateTimeLocalField('End Time', format=DATETIME_LOCAL_FORMATS, validators=[
        DataRequired(message='End time is required')
    ])
    eventLocation = StringField('Location', filters=[strip_filter], validators=[
        DataRequired(message='Location is required'),
        Length(max=256)
    ])
    eventHost = StringField('Host', filters=[strip_filter], validators=[Optional(), Length(max=256)])
    eventTypeID = SelectField('Event Type', coerce=int, validators=[
        DataRequired(message='Event type is required')
    ])
    eventURL = StringField('Event Link', filters=[strip_filter], validators=[
        Optional(),
        URL(require_tld=False, message='Please enter a valid URL'),
        Length(max=512)
    ])
    eventLinkText = StringField('Link Text', filters=[strip_filter], validators=[
        Optional(),
        Length(max=128)
    ])
    eventimage = FileField('Event Image', validators=[ImageUpload()])

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.eventTypeID.choices = event_type_choices()

    def validate_endTime(self, field):
        if self.startTime.data and field.data and field.data <= self.startTime.data:
            raise ValidationError('End time must be after start time.')

    def missing_required_fields(self):
        """True when any required field failed its presence check."""
        for field in (self.eventName, self.eventDescription, self.startTime, self.endTime,
                      self.eventLocation, self.eventTypeID):
            if any(error.endswith('is required') for error in field.errors):
                return True
        return False


class EventForm(EventDetailsForm):
    """Admin form for creating and editing canonical events"""
    submit = SubmitField('Save Event')


class SubmissionForm(EventDetailsForm):
    """Submitter form proposing an event for moderation"""
    eventDescription = TextAreaField('Description', filters=[strip_filter], validators=[
        DataRequired(message='Description is required')
    ])
    submit = SubmitField('Submit for Review')
