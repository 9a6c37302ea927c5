# Route decorators shared by the blueprints.
# The before_request gate already enforces the path policy; these decorators
# hand the typed session context to the view and re-check the role.

from functools import wraps
from flask import abort
from bulletin.auth.context import session_context, Admin, Submitter
from bulletin.audit import audit_log_security_event


def _require(context_type, label):
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            ctx = session_context()
            if not isinstance(ctx, context_type):
                audit_log_security_event('ACCESS_DENIED',
                                         f'Non-{label} session reached a {label}-only view {f.__name__}')
                abort(403)
            return f(*args, ctx=ctx, **kwargs)
        return decorated_function
    return decorator


def admin_required(f):
    """
    Decorator to restrict a view to admins.
    The view receives the ``Admin`` context as the ``ctx`` keyword argument.
    """
    return _require(Admin, 'admin')(f)


def submitter_required(f):
    """
    Decorator to restrict a view to submitters.
    The view receives the ``Submitter`` context as the ``ctx`` keyword argument.
    """
    return _require(Submitter, 'submitter')(f)
