"""initial schema: users, event types, events and submissions

Revision ID: 3f9a1c2b7d40
Revises:
Create Date: 2026-10-18 10:12:44.318902

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f9a1c2b7d40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=256), nullable=True),
        sa.Column('role', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("role IN ('admin', 'submitter')", name='ck_users_role'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_users_email'), ['email'], unique=True)

    op.create_table('eventtypes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    op.create_table('events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=256), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=False),
        sa.Column('location', sa.String(length=256), nullable=False),
        sa.Column('host', sa.String(length=256), nullable=True),
        sa.Column('url', sa.String(length=512), nullable=True),
        sa.Column('link_text', sa.String(length=128), nullable=True),
        sa.Column('image_path', sa.String(length=512), nullable=True),
        sa.Column('event_type_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('end_time > start_time', name='ck_events_end_after_start'),
        sa.ForeignKeyConstraint(['event_type_id'], ['eventtypes.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('events', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_events_start_time'), ['start_time'], unique=False)
        batch_op.create_index(batch_op.f('ix_events_end_time'), ['end_time'], unique=False)

    op.create_table('event_submissions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=256), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=False),
        sa.Column('location', sa.String(length=256), nullable=False),
        sa.Column('host', sa.String(length=256), nullable=True),
        sa.Column('url', sa.String(length=512), nullable=True),
        sa.Column('link_text', sa.String(length=128), nullable=True),
        sa.Column('image_path', sa.String(length=512), nullable=True),
        sa.Column('event_type_id', sa.Integer(), nullable=False),
        sa.Column('submitter_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('end_time > start_time', name='ck_event_submissions_end_after_start'),
        sa.CheckConstraint("status IN ('pending', 'approved', 'denied')", name='ck_event_submissions_status'),
        sa.ForeignKeyConstraint(['event_type_id'], ['eventtypes.id'], ),
        sa.ForeignKeyConstraint(['submitter_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('event_submissions', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_event_submissions_start_time'), ['start_time'], unique=False)
        batch_op.create_index(batch_op.f('ix_event_submissions_end_time'), ['end_time'], unique=False)
        batch_op.create_index(batch_op.f('ix_event_submissions_submitter_id'), ['submitter_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_event_submissions_status'), ['status'], unique=False)


def downgrade():
    with op.batch_alter_table('event_submissions', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_event_submissions_status'))
        batch_op.drop_index(batch_op.f('ix_event_submissions_submitter_id'))
        batch_op.drop_index(batch_op.f('ix_event_submissions_end_time'))
        batch_op.drop_index(batch_op.f('ix_event_submissions_start_time'))
    op.drop_table('event_submissions')

    with op.batch_alter_table('events', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_events_end_time'))
        batch_op.drop_index(batch_op.f('ix_events_start_time'))
    op.drop_table('events')

    op.drop_table('eventtypes')

    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_users_email'))
    op.drop_table('users')
