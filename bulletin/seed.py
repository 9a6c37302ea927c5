# Seed data for a fresh installation: event types and the first admin account

from typing import Optional

import sqlalchemy as sa
from flask import current_app

from bulletin import db
from bulletin.models import EventType, User, ROLE_ADMIN
from bulletin.audit import audit_log_system_event


def create_event_types(names) -> list:
    """
    Create any of the given event types that do not exist yet.

    Returns:
        list: Names of the event types that were created.
    """
    existing = set(db.session.scalars(sa.select(EventType.name)).all())

    created = []
    for name in names:
        if name in existing or name in created:
            continue
        db.session.add(EventType(name=name))
        created.append(name)

    db.session.commit()
    if created:
        current_app.logger.info(f"Seeded event types: {', '.join(created)}")
        audit_log_system_event('SEED', f'Created {len(created)} event types')
    return created


def get_existing_admin() -> Optional[User]:
    return db.session.scalar(
        sa.select(User).where(User.role == ROLE_ADMIN).order_by(User.id).limit(1)
    )


def create_bootstrap_admin(email: str, password: str) -> Optional[User]:
    """
    Create the first admin account.

    Submitter accounts do not count: the admin is created as long as no
    admin exists yet. An email already registered to another account is
    never taken over.

    Returns:
        The new admin, or None when an admin already exists or the email is taken.
    """
    email = email.strip().lower()

    admin = get_existing_admin()
    if admin is not None:
        current_app.logger.info(f"Bootstrap skipped, admin {admin.email} already exists")
        return None

    if db.session.scalar(sa.select(User.id).where(User.email == email)) is not None:
        current_app.logger.warning(f"Bootstrap skipped, {email} is already registered")
        return None

    user = User(email=email, role=ROLE_ADMIN)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    audit_log_system_event('BOOTSTRAP', f'Created admin account {email} (ID: {user.id})')
    return user
