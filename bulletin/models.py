# Standard library imports
from datetime import datetime
from typing import Optional

# Third-party imports
import sqlalchemy as sa
import sqlalchemy.orm as so
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

# Local application imports
from bulletin import db, login

ROLE_ADMIN = 'admin'
ROLE_SUBMITTER = 'submitter'
USER_ROLES = (ROLE_ADMIN, ROLE_SUBMITTER)

STATUS_PENDING = 'pending'
STATUS_APPROVED = 'approved'
STATUS_DENIED = 'denied'
SUBMISSION_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_DENIED)


class User(UserMixin, db.Model):
    __tablename__ = 'users'

    id: so.Mapped[int] = so.mapped_column(primary_key=True)
    email: so.Mapped[str] = so.mapped_column(sa.String(255), index=True, unique=True)
    password_hash: so.Mapped[Optional[str]] = so.mapped_column(sa.String(256))
    role: so.Mapped[str] = so.mapped_column(sa.String(16), nullable=False, default=ROLE_SUBMITTER)
    created_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime, default=datetime.utcnow, nullable=False)

    submissions: so.Mapped[list['EventSubmission']] = so.relationship(
        'EventSubmission', back_populates='submitter', cascade='all, delete-orphan'
    )

    __table_args__ = (
        sa.CheckConstraint("role IN ('admin', 'submitter')", name='ck_users_role'),
    )

    def __repr__(self):
        return '<User {} ({})>'.format(self.email, self.role)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if self.password_hash is None or password is None:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    @property
    def is_submitter(self):
        return self.role == ROLE_SUBMITTER


@login.user_loader
def load_user(id):
    return db.session.get(User, int(id))


class EventType(db.Model):
    __tablename__ = 'eventtypes'

    id: so.Mapped[int] = so.mapped_column(sa.Integer, primary_key=True)
    name: so.Mapped[str] = so.mapped_column(sa.String(100), nullable=False, unique=True)

    def __repr__(self):
        return f"<EventType {self.name}>"


class EventDetailsMixin:
    """
    Descriptive columns shared by canonical events and submissions.
    """
    name: so.Mapped[str] = so.mapped_column(sa.String(256), nullable=False)
    description: so.Mapped[Optional[str]] = so.mapped_column(sa.Text, nullable=True)
    start_time: so.Mapped[datetime] = so.mapped_column(sa.DateTime, nullable=False, index=True)
    end_time: so.Mapped[datetime] = so.mapped_column(sa.DateTime, nullable=False, index=True)
    location: so.Mapped[str] = so.mapped_column(sa.String(256), nullable=False)
    host: so.Mapped[Optional[str]] = so.mapped_column(sa.String(256), nullable=True)
    url: so.Mapped[Optional[str]] = so.mapped_column(sa.String(512), nullable=True)
    link_text: so.Mapped[Optional[str]] = so.mapped_column(sa.String(128), nullable=True)
    image_path: so.Mapped[Optional[str]] = so.mapped_column(sa.String(512), nullable=True)
    event_type_id: so.Mapped[int] = so.mapped_column(sa.Integer, sa.ForeignKey('eventtypes.id'), nullable=False)

    DETAIL_FIELDS = (
        'name', 'description', 'start_time', 'end_time', 'location',
        'host', 'url', 'link_text', 'image_path', 'event_type_id',
    )

    @so.declared_attr
    def event_type(cls) -> so.Mapped['EventType']:
        return so.relationship('EventType')

    def copy_details_to(self, other):
        """Copy every descriptive field, the image reference included, onto another record."""
        for field in self.DETAIL_FIELDS:
            setattr(other, field, getattr(self, field))
        return other

    def details(self):
        return {field: getattr(self, field) for field in self.DETAIL_FIELDS}

    @property
    def event_type_name(self):
        return self.event_type.name if self.event_type else 'Uncategorized'


class Event(EventDetailsMixin, db.Model):
    __tablename__ = 'events'

    id: so.Mapped[int] = so.mapped_column(sa.Integer, primary_key=True)
    created_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime, default=datetime.utcnow, nullable=False)
    updated_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        sa.CheckConstraint('end_time > start_time', name='ck_events_end_after_start'),
    )

    def __repr__(self):
        return f"<Event id={self.id}, name='{self.name}', start={self.start_time}>"

    def is_upcoming(self, now=None):
        """An event stays upcoming until its end time has passed."""
        now = now or datetime.now()
        return self.end_time > now


class EventSubmission(EventDetailsMixin, db.Model):
    """
    A submitter-proposed event awaiting admin review.

    Approval copies the details into a new Event; the two rows are
    independent afterwards.
    """
    __tablename__ = 'event_submissions'

    id: so.Mapped[int] = so.mapped_column(sa.Integer, primary_key=True)
    submitter_id: so.Mapped[int] = so.mapped_column(
        sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True
    )
    status: so.Mapped[str] = so.mapped_column(
        sa.String(16), nullable=False, default=STATUS_PENDING, index=True
    )
    created_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime, default=datetime.utcnow, nullable=False)
    reviewed_at: so.Mapped[Optional[datetime]] = so.mapped_column(sa.DateTime, nullable=True)

    submitter: so.Mapped['User'] = so.relationship('User', back_populates='submissions')

    __table_args__ = (
        sa.CheckConstraint('end_time > start_time', name='ck_event_submissions_end_after_start'),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'denied')", name='ck_event_submissions_status'
        ),
    )

    def __repr__(self):
        return f"<EventSubmission id={self.id}, name='{self.name}', status={self.status}>"

    @property
    def is_pending(self):
        return self.status == STATUS_PENDING
