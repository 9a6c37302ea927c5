# Credential routes: login, logout and submitter signup

from flask import render_template, redirect, request, url_for, current_app
from flask_login import login_user, logout_user, current_user
from urllib.parse import urlsplit
import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError

from bulletin import db, limiter
from bulletin.auth import bp
from bulletin.auth.context import session_context, home_for
from bulletin.auth.forms import LoginForm, SignupForm
from bulletin.models import User, ROLE_ADMIN, ROLE_SUBMITTER
from bulletin.audit import audit_log_authentication, audit_log_create


def render_login_view(login_form=None, signup_form=None, error_message='',
                      signup_error_message='', active_form='login'):
    """Render the combined login/signup page with the given messages."""
    return render_template('auth/login.html',
                           form=login_form or LoginForm(formdata=None),
                           signup_form=signup_form or SignupForm(formdata=None),
                           error_message=error_message,
                           signup_error_message=signup_error_message,
                           active_form=active_form)


def first_form_error(form):
    """Return the first validation message of a form, in field order."""
    for field in form:
        if field.errors:
            return field.errors[0]
    return ''


def login_rate_limit():
    return current_app.config.get('LOGIN_RATE_LIMIT', '10 per minute')


@bp.route('/login', methods=['GET', 'POST'])
@limiter.limit(login_rate_limit, methods=['POST'])
def login():
    """
    Log an admin or submitter in by email and password
    """
    if current_user.is_authenticated:
        return redirect(home_for(session_context()))

    form = LoginForm()
    if request.method == 'GET':
        return render_login_view(login_form=form)

    if not form.validate_on_submit():
        return render_login_view(login_form=form, error_message=first_form_error(form))

    try:
        user = db.session.scalar(sa.select(User).where(User.email == form.email.data))
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Login lookup failed: {str(e)}")
        return render_login_view(login_form=form,
                                 error_message='An error occurred during login. Please try again.')

    if user is None or not user.check_password(form.password.data):
        audit_log_authentication('LOGIN', form.email.data, False)
        return render_login_view(login_form=form, error_message='Invalid login')

    login_user(user)
    audit_log_authentication('LOGIN', user.email, True)

    if user.role == ROLE_ADMIN:
        return redirect(url_for('admin.dashboard'))
    return redirect(url_for('submissions.dashboard'))


@bp.route('/logout')
def logout():
    """
    End the session and return to a local page (``next``) or the listing
    """
    requested_return = request.args.get('next', '')
    # Only local absolute paths; "//host" would be protocol-relative
    if requested_return.startswith('/') and not requested_return.startswith('//') \
            and urlsplit(requested_return).netloc == '':
        redirect_target = requested_return
    else:
        redirect_target = '/'

    if current_user.is_authenticated:
        audit_log_authentication('LOGOUT', current_user.email, True)
        logout_user()

    return redirect(redirect_target)


@bp.route('/signup', methods=['GET', 'POST'])
@limiter.limit(login_rate_limit, methods=['POST'])
def signup():
    """
    Create a submitter account and sign it in
    """
    if request.method == 'GET':
        return render_login_view(active_form='signup')

    form = SignupForm()
    if not form.validate_on_submit():
        return render_login_view(signup_form=form, active_form='signup',
                                 signup_error_message=first_form_error(form))

    try:
        existing = db.session.scalar(sa.select(User).where(User.email == form.email.data))
        if existing is not None:
            audit_log_authentication('SIGNUP', form.email.data, False)
            return render_login_view(signup_form=form, active_form='signup',
                                     signup_error_message='That email is already registered.')

        user = User(email=form.email.data, role=ROLE_SUBMITTER)
        user.set_password(form.password.data)
        db.session.add(user)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Signup failed for {form.email.data}: {str(e)}")
        return render_login_view(signup_form=form, active_form='signup',
                                 signup_error_message='Unable to create account.')

    login_user(user)
    audit_log_create('User', user.id, f'Submitter signed up: {user.email}')
    audit_log_authentication('SIGNUP', user.email, True)
    return redirect(url_for('submissions.submit_event'))
