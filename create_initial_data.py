#!/usr/bin/env python3
"""
Initial Data Population Script

Seeds a fresh installation with the standard event types and, when
BOOTSTRAP_ADMIN_EMAIL and BOOTSTRAP_ADMIN_PASSWORD are set, the first
admin account. Run this after `flask db upgrade`.

Usage:
    BOOTSTRAP_ADMIN_EMAIL=events@example.edu BOOTSTRAP_ADMIN_PASSWORD=... \
        python create_initial_data.py
"""

import os
import sys

import sqlalchemy as sa

from campus_events import app
from bulletin import db
from bulletin.seed import create_event_types, create_bootstrap_admin, get_existing_admin

EXPECTED_TABLES = ['users', 'eventtypes', 'events', 'event_submissions']


def verify_database_structure():
    """Verify that all expected tables exist."""
    print("Verifying database structure...")
    existing_tables = sa.inspect(db.engine).get_table_names()

    missing_tables = [table for table in EXPECTED_TABLES if table not in existing_tables]
    for table in EXPECTED_TABLES:
        print(f"  {'ok' if table in existing_tables else 'MISSING'}: {table}")

    if missing_tables:
        print(f"\nERROR: Missing tables: {missing_tables}")
        print("Please run the database migration first:")
        print("  flask db upgrade")
        return False
    return True


def main():
    print("=" * 60)
    print("CAMPUS EVENTS - Initial Data Setup")
    print("=" * 60)

    with app.app_context():
        if not verify_database_structure():
            sys.exit(1)

        print("Creating event types...")
        created = create_event_types(app.config['DEFAULT_EVENT_TYPES'])
        for name in app.config['DEFAULT_EVENT_TYPES']:
            print(f"  - {'Created' if name in created else 'Already exists'}: {name}")

        admin_email = os.environ.get('BOOTSTRAP_ADMIN_EMAIL')
        admin_password = os.environ.get('BOOTSTRAP_ADMIN_PASSWORD')
        print("\nAdmin account...")
        if admin_email and admin_password:
            existing_admin = get_existing_admin()
            if existing_admin is not None:
                print(f"  - Admin {existing_admin.email} already exists, no bootstrap needed")
            elif create_bootstrap_admin(admin_email, admin_password) is None:
                print(f"  - {admin_email} is already registered, choose another BOOTSTRAP_ADMIN_EMAIL")
            else:
                print(f"  - Created admin account: {admin_email.strip().lower()}")
        else:
            print("  - BOOTSTRAP_ADMIN_EMAIL / BOOTSTRAP_ADMIN_PASSWORD not set, skipping")

        print("\n" + "=" * 60)
        print("SETUP COMPLETE!")
        print(f"Event types created: {len(created)}")
        print("=" * 60)


if __name__ == '__main__':
    main()
