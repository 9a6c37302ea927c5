"""
Public event listing: filter parsing and query construction.

``build_event_query`` is a pure function from an ``EventFilters`` value to a
SQLAlchemy ``Select``; nothing here touches the session except
``list_public_events`` and ``list_event_types``.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional

import sqlalchemy as sa
import sqlalchemy.orm as so
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from bulletin import db
from bulletin.models import Event, EventType

RANGE_START_TIME = time(0, 0, 0)
RANGE_END_TIME = time(23, 59, 59)

SORT_ASC = 'asc'
SORT_DESC = 'desc'
VIEW_FORMATS = ('grid', 'list')


def parse_date(value) -> Optional[date]:
    """Parse a YYYY-MM-DD query value; anything else counts as absent."""
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip())
    except (ValueError, AttributeError):
        return None


def parse_category_ids(values) -> frozenset:
    """Coerce category ids to integers, dropping values that are not numeric."""
    ids = set()
    for value in values:
        try:
            ids.add(int(str(value).strip()))
        except (TypeError, ValueError):
            continue
    return frozenset(ids)


@dataclass(frozen=True)
class EventFilters:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    categories: frozenset = field(default_factory=frozenset)
    # True when the visitor asked for categories at all, even if none parsed
    categories_given: bool = False
    search: str = ''
    sort: str = SORT_ASC
    view_format: str = 'grid'

    @classmethod
    def from_args(cls, args):
        """Build filters from request query arguments (a werkzeug MultiDict)."""
        raw_categories = [value for value in args.getlist('categories') if value != '']
        view_format = args.get('format', 'grid')
        return cls(
            start_date=parse_date(args.get('startDate')),
            end_date=parse_date(args.get('endDate')),
            categories=parse_category_ids(raw_categories),
            categories_given=bool(raw_categories),
            search=(args.get('search') or '').strip(),
            sort=SORT_DESC if args.get('sort') == SORT_DESC else SORT_ASC,
            view_format=view_format if view_format in VIEW_FORMATS else 'grid',
        )

    @property
    def range_start(self) -> Optional[datetime]:
        if self.start_date is None:
            return None
        return datetime.combine(self.start_date, RANGE_START_TIME)

    @property
    def range_end(self) -> Optional[datetime]:
        if self.end_date is None:
            return None
        return datetime.combine(self.end_date, RANGE_END_TIME)

    def as_template_values(self):
        """Current filter values for echoing back into the filter form."""
        return {
            'startDate': self.start_date.isoformat() if self.start_date else '',
            'endDate': self.end_date.isoformat() if self.end_date else '',
            'categories': sorted(self.categories),
            'format': self.view_format,
            'search': self.search,
            'sort': self.sort,
        }


def build_event_query(filters: EventFilters, now: Optional[datetime] = None,
                      upcoming_only: bool = True) -> sa.Select:
    """
    Build the listing query for a set of filters.

    - upcoming only: events whose end time is after ``now``
    - both dates: events overlapping [start 00:00:00, end 23:59:59]
    - start date only: events ending on or after that day
    - end date only: events starting on or before that day
    - categories: event type in the set (an unparseable set matches nothing)
    - search: case-insensitive substring of name or description
    - ordered by start time, ascending unless ``sort`` is desc
    """
    query = sa.select(Event).options(so.joinedload(Event.event_type))

    if upcoming_only:
        query = query.where(Event.end_time > (now or datetime.now()))

    range_start = filters.range_start
    range_end = filters.range_end
    if range_start is not None and range_end is not None:
        query = query.where(Event.start_time <= range_end, Event.end_time >= range_start)
    elif range_start is not None:
        query = query.where(Event.end_time >= range_start)
    elif range_end is not None:
        query = query.where(Event.start_time <= range_end)

    if filters.categories_given:
        query = query.where(Event.event_type_id.in_(sorted(filters.categories)))

    if filters.search:
        query = query.where(sa.or_(
            Event.name.icontains(filters.search, autoescape=True),
            Event.description.icontains(filters.search, autoescape=True),
        ))

    order = Event.start_time.desc() if filters.sort == SORT_DESC else Event.start_time.asc()
    return query.order_by(order, Event.id)


@dataclass
class EventListing:
    events: list
    load_failed: bool = False


def list_public_events(filters: EventFilters, now: Optional[datetime] = None) -> EventListing:
    """
    Run the public listing query.

    Storage failures are logged and reported through ``load_failed`` so the
    page can always render.
    """
    try:
        events = db.session.scalars(build_event_query(filters, now=now)).unique().all()
        return EventListing(events=list(events))
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to load events: {str(e)}")
        return EventListing(events=[], load_failed=True)


def list_event_types():
    """All event types ordered by name."""
    return db.session.scalars(sa.select(EventType).order_by(EventType.name)).all()
