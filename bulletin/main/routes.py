# Public routes: the filterable event listing and stored event images

from flask import render_template, request, current_app, send_from_directory
from sqlalchemy.exc import SQLAlchemyError

from bulletin import db
from bulletin.main import bp
from bulletin.events.query import EventFilters, list_public_events, list_event_types


@bp.route('/')
@bp.route('/events')
def index():
    """
    Public listing of upcoming events with date, category and text filters
    """
    filters = EventFilters.from_args(request.args)
    listing = list_public_events(filters)

    event_types = []
    load_failed = listing.load_failed
    if not load_failed:
        try:
            event_types = list_event_types()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Failed to load event types: {str(e)}")
            load_failed = True

    if load_failed:
        # Nothing usable was loaded; keep only the view settings
        current_filters = EventFilters(search=filters.search, sort=filters.sort,
                                       view_format=filters.view_format).as_template_values()
        return render_template('main/events.html',
                               events=[],
                               event_types=[],
                               current_filters=current_filters,
                               current_url=request.full_path,
                               error_message='Failed to load events.')

    return render_template('main/events.html',
                           events=listing.events,
                           event_types=event_types,
                           current_filters=filters.as_template_values(),
                           current_url=request.full_path,
                           error_message='')


@bp.route('/uploads/events/<path:filename>')
def uploaded_image(filename):
    """
    Serve a stored event image
    """
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)
