# Submitter routes: propose events and follow their review status

from flask import render_template, redirect, url_for, request, current_app, flash
from sqlalchemy.exc import SQLAlchemyError

from bulletin import db
from bulletin.submissions import bp
from bulletin.auth.context import session_context, Admin, Submitter
from bulletin.events.forms import SubmissionForm
from bulletin.events.utils import form_error_message, SUBMISSION_REQUIRED_FIELDS_MESSAGE
from bulletin.routes import submitter_required
from bulletin.submissions.utils import create_submission, get_submitter_submissions
from bulletin.uploads import staged_image
from bulletin.audit import audit_log_create

SUCCESS_MESSAGE = "Thanks! We'll review your submission shortly."


def render_submit_event(ctx, form=None, error_message='', success_message=''):
    """Render the submission form together with the submitter's previous submissions."""
    try:
        form = form or SubmissionForm()
        submissions = get_submitter_submissions(ctx.user_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to load submit-event data: {str(e)}")
        return render_template('submissions/submit_event.html',
                               form=form,
                               submissions=[],
                               error_message='Unable to load event types. Please try again later.',
                               success_message='')

    return render_template('submissions/submit_event.html',
                           form=form,
                           submissions=submissions,
                           error_message=error_message,
                           success_message=success_message)


@bp.route('/submit-event', methods=['GET', 'POST'])
def submit_event():
    """
    Submitter form proposing an event for moderation
    """
    ctx = session_context()
    if isinstance(ctx, Admin):
        return redirect(url_for('admin.dashboard'))
    if not isinstance(ctx, Submitter):
        return redirect(url_for('auth.signup'))

    if request.method == 'GET':
        success_message = SUCCESS_MESSAGE if request.args.get('success') else ''
        return render_submit_event(ctx, success_message=success_message)

    try:
        form = SubmissionForm()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to load event types for submission: {str(e)}")
        return render_submit_event(ctx)

    if not form.validate_on_submit():
        return render_submit_event(
            ctx, form=form,
            error_message=form_error_message(form, SUBMISSION_REQUIRED_FIELDS_MESSAGE))

    try:
        with staged_image(form.eventimage.data) as image_path:
            submission = create_submission(ctx.user_id, form, image_path=image_path)
    except (SQLAlchemyError, OSError) as e:
        current_app.logger.error(f"Failed to save submission: {str(e)}")
        return render_submit_event(
            ctx, form=form,
            error_message='Unable to submit your event. Please try again later.')

    audit_log_create('EventSubmission', submission.id, f'Submitted event: {submission.name}')
    return redirect(url_for('submissions.dashboard', success=1))


@bp.route('/submitter/dashboard')
@submitter_required
def dashboard(ctx):
    """
    The submitter's own submissions with their review status
    """
    success_message = SUCCESS_MESSAGE if request.args.get('success') else ''
    try:
        submissions = get_submitter_submissions(ctx.user_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to load submitter dashboard: {str(e)}")
        flash('Unable to load your submissions right now.', 'error')
        submissions = []
        success_message = ''

    return render_template('submissions/dashboard.html',
                           submissions=submissions,
                           submitter_email=ctx.email,
                           success_message=success_message)
