# Admin routes: event catalog management and submission moderation

from flask import render_template, flash, redirect, url_for, request, current_app
from flask_wtf import FlaskForm
from sqlalchemy.exc import SQLAlchemyError

from bulletin import db
from bulletin.admin import bp
from bulletin.models import Event, STATUS_PENDING, STATUS_DENIED
from bulletin.routes import admin_required
from bulletin.events.forms import EventForm
from bulletin.events.query import EventFilters, build_event_query
from bulletin.events.utils import (
    apply_event_form, populate_event_form, partition_events, form_error_message
)
from bulletin.submissions.utils import (
    approve_submission, deny_submission, get_submissions_by_status
)
from bulletin.uploads import staged_image, delete_event_image
from bulletin.audit import (
    audit_log_create, audit_log_update, audit_log_delete, get_model_changes
)


def render_event_form(form, mode, event=None, error_message=''):
    return render_template('admin/event_form.html',
                           form=form,
                           mode=mode,
                           event=event,
                           error_message=error_message)


def incoming_values(form):
    """Form values keyed by model attribute, for change auditing."""
    return {
        'name': form.eventName.data,
        'start_time': form.startTime.data,
        'end_time': form.endTime.data,
        'location': form.eventLocation.data,
        'event_type_id': form.eventTypeID.data,
    }


@bp.route('/dashboard')
@admin_required
def dashboard(ctx):
    """
    All events split into upcoming and past, plus the moderation queue
    """
    csrf_form = FlaskForm()
    try:
        events = db.session.scalars(
            build_event_query(EventFilters(), upcoming_only=False)
        ).unique().all()
        upcoming_events, past_events = partition_events(events)
        pending_submissions = get_submissions_by_status(STATUS_PENDING)
        denied_submissions = get_submissions_by_status(STATUS_DENIED, newest_first=True)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to load events or submissions: {str(e)}")
        return render_template('admin/dashboard.html',
                               upcoming_events=[],
                               past_events=[],
                               pending_submissions=[],
                               denied_submissions=[],
                               pending_count=0,
                               csrf_form=csrf_form,
                               error_message='Database error loading events.')

    return render_template('admin/dashboard.html',
                           upcoming_events=upcoming_events,
                           past_events=past_events,
                           pending_submissions=pending_submissions,
                           denied_submissions=denied_submissions,
                           pending_count=len(pending_submissions),
                           csrf_form=csrf_form,
                           error_message='')


@bp.route('/create', methods=['GET', 'POST'])
@admin_required
def create_event(ctx):
    """
    Create a canonical event, optionally with an image
    """
    try:
        form = EventForm()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to load event types: {str(e)}")
        flash('Database error loading event types.', 'error')
        return redirect(url_for('admin.dashboard'))

    if request.method == 'GET':
        return render_event_form(form, 'create')

    if not form.validate_on_submit():
        return render_event_form(form, 'create', error_message=form_error_message(form))

    event = Event()
    try:
        with staged_image(form.eventimage.data) as image_path:
            apply_event_form(event, form, image_path=image_path, keep_image=False)
            db.session.add(event)
            db.session.commit()
    except (SQLAlchemyError, OSError) as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to create event: {str(e)}")
        return render_event_form(
            form, 'create',
            error_message='Failed to create event. Please check your input and try again.')

    audit_log_create('Event', event.id, f'Created event: {event.name}',
                     {'event_type_id': event.event_type_id, 'image': event.image_path or 'none'})
    flash(f'Event "{event.name}" created successfully!', 'success')
    return redirect(url_for('admin.dashboard'))


@bp.route('/edit/<int:event_id>', methods=['GET', 'POST'])
@admin_required
def edit_event(ctx, event_id):
    """
    Edit a canonical event; a new image replaces (and removes) the old one
    """
    try:
        event = db.session.get(Event, event_id)
        if event is None:
            flash('Event not found.', 'error')
            return redirect(url_for('admin.dashboard'))
        form = EventForm()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to load event {event_id}: {str(e)}")
        flash('Database error loading event.', 'error')
        return redirect(url_for('admin.dashboard'))

    if request.method == 'GET':
        populate_event_form(form, event)
        return render_event_form(form, 'edit', event=event)

    if not form.validate_on_submit():
        return render_event_form(form, 'edit', event=event, error_message=form_error_message(form))

    old_image_path = event.image_path
    changes = get_model_changes(event, incoming_values(form))
    try:
        with staged_image(form.eventimage.data) as new_image_path:
            apply_event_form(event, form, image_path=new_image_path)
            db.session.commit()
    except (SQLAlchemyError, OSError) as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to update event {event_id}: {str(e)}")
        return render_event_form(
            form, 'edit', event=event,
            error_message='Failed to update event. Please check your input and try again.')

    # The old file goes only once the new reference is committed
    if new_image_path and old_image_path and old_image_path != new_image_path:
        delete_event_image(old_image_path)
        changes['image_path'] = old_image_path

    audit_log_update('Event', event_id, f'Updated event: {event.name}', changes)
    flash(f'Event "{event.name}" updated successfully!', 'success')
    return redirect(url_for('admin.dashboard'))


@bp.route('/delete/<int:event_id>', methods=['POST'])
@admin_required
def delete_event(ctx, event_id):
    """
    Delete a canonical event and its stored image
    """
    csrf_form = FlaskForm()
    if not csrf_form.validate_on_submit():
        flash('Invalid request. Please try again.', 'error')
        return redirect(url_for('admin.dashboard'))

    try:
        event = db.session.get(Event, event_id)
        if event is None:
            flash('Event not found.', 'error')
            return redirect(url_for('admin.dashboard'))

        event_name = event.name
        image_path = event.image_path
        db.session.delete(event)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to delete event {event_id}: {str(e)}")
        flash('An error occurred while deleting the event.', 'error')
        return redirect(url_for('admin.dashboard'))

    if image_path:
        delete_event_image(image_path)

    audit_log_delete('Event', event_id, f'Deleted event: {event_name}')
    flash(f'Event "{event_name}" deleted.', 'success')
    return redirect(url_for('admin.dashboard'))


@bp.route('/submissions/<int:submission_id>/approve', methods=['POST'])
@admin_required
def approve(ctx, submission_id):
    """
    Publish a pending submission as a canonical event
    """
    csrf_form = FlaskForm()
    if not csrf_form.validate_on_submit():
        flash('Invalid request. Please try again.', 'error')
        return redirect(url_for('admin.dashboard'))

    try:
        event = approve_submission(submission_id)
    except (SQLAlchemyError, OSError) as e:
        current_app.logger.error(f"Approve submission {submission_id} failed: {str(e)}")
        flash('Unable to approve the submission right now.', 'error')
        return redirect(url_for('admin.dashboard'))

    if event is None:
        current_app.logger.info(f"Submission {submission_id} not available for approval")
        flash('Submission not available for approval.', 'warning')
        return redirect(url_for('admin.dashboard'))

    audit_log_update('EventSubmission', submission_id, 'Approved submission', {'status': STATUS_PENDING})
    audit_log_create('Event', event.id, f'Published approved submission {submission_id}: {event.name}')
    flash(f'Approved "{event.name}".', 'success')
    return redirect(url_for('admin.dashboard'))


@bp.route('/submissions/<int:submission_id>/deny', methods=['POST'])
@admin_required
def deny(ctx, submission_id):
    """
    Deny a pending submission
    """
    csrf_form = FlaskForm()
    if not csrf_form.validate_on_submit():
        flash('Invalid request. Please try again.', 'error')
        return redirect(url_for('admin.dashboard'))

    try:
        denied = deny_submission(submission_id)
    except SQLAlchemyError as e:
        current_app.logger.error(f"Deny submission {submission_id} failed: {str(e)}")
        flash('Unable to deny the submission right now.', 'error')
        return redirect(url_for('admin.dashboard'))

    if not denied:
        flash('Only pending submissions can be denied.', 'warning')
        return redirect(url_for('admin.dashboard'))

    audit_log_update('EventSubmission', submission_id, 'Denied submission', {'status': STATUS_PENDING})
    flash('Submission denied.', 'success')
    return redirect(url_for('admin.dashboard'))
