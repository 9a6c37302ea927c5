"""
Typed session context and the per-request access policy.

Views never read ad hoc session flags. The signed-in user (via Flask-Login)
is turned into exactly one of ``Anonymous``, ``Submitter`` or ``Admin`` and
the gate and route decorators work from that value.
"""

from dataclasses import dataclass
from typing import Optional, Union

from flask_login import current_user


@dataclass(frozen=True)
class Anonymous:
    is_authenticated = False
    role = None


@dataclass(frozen=True)
class Submitter:
    user_id: int
    email: str

    is_authenticated = True
    role = 'submitter'


@dataclass(frozen=True)
class Admin:
    user_id: int
    email: str

    is_authenticated = True
    role = 'admin'


SessionContext = Union[Anonymous, Submitter, Admin]

ADMIN_HOME = '/admin/dashboard'
SUBMITTER_HOME = '/submitter/dashboard'
LOGIN_REQUIRED_MESSAGE = 'Please log in to access this page'


def context_for_user(user) -> SessionContext:
    """Build the session context for a user object (or None)."""
    if user is None or not getattr(user, 'is_authenticated', False):
        return Anonymous()
    if user.role == 'admin':
        return Admin(user_id=user.id, email=user.email)
    if user.role == 'submitter':
        return Submitter(user_id=user.id, email=user.email)
    return Anonymous()


def session_context() -> SessionContext:
    """Session context of the current request."""
    return context_for_user(current_user)


def home_for(ctx: SessionContext) -> str:
    """Landing page for a session context."""
    if isinstance(ctx, Admin):
        return ADMIN_HOME
    if isinstance(ctx, Submitter):
        return SUBMITTER_HOME
    return '/'


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    redirect_to: Optional[str] = None
    message: str = ''


ALLOW = AccessDecision(allowed=True)


def is_public_path(path, public_paths, public_prefixes) -> bool:
    if path in public_paths:
        return True
    return any(path.startswith(prefix) for prefix in public_prefixes)


def check_access(path, ctx: SessionContext, public_paths, public_prefixes) -> AccessDecision:
    """
    Decide whether a request for ``path`` may proceed.

    Public paths are always allowed. ``/submitter`` paths need a submitter
    session and everything else needs an admin session. A signed-in user of
    the other role is sent to their own dashboard; an anonymous visitor gets
    the login view in place.
    """
    if is_public_path(path, public_paths, public_prefixes):
        return ALLOW

    if path == '/submitter' or path.startswith('/submitter/'):
        if isinstance(ctx, Submitter):
            return ALLOW
        if isinstance(ctx, Admin):
            return AccessDecision(allowed=False, redirect_to=ADMIN_HOME)
        return AccessDecision(allowed=False, message=LOGIN_REQUIRED_MESSAGE)

    if isinstance(ctx, Admin):
        return ALLOW
    if isinstance(ctx, Submitter):
        return AccessDecision(allowed=False, redirect_to=SUBMITTER_HOME)
    return AccessDecision(allowed=False, message=LOGIN_REQUIRED_MESSAGE)
