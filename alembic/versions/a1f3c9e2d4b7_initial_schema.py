"""initial_schema

Revision ID: a1f3c9e2d4b7
Revises:
Create Date: 2025-02-10 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1f3c9e2d4b7'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('college', sa.String(length=200), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('idx_users_role', 'users', ['role'])

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('slug', sa.String(length=80), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('venue', sa.String(length=200), nullable=False),
        sa.Column('registration_fee_per_member', sa.Numeric(10, 2), nullable=False),
        sa.Column('min_team_size', sa.Integer(), nullable=False),
        sa.Column('max_team_size', sa.Integer(), nullable=False),
        sa.Column('max_teams', sa.Integer(), nullable=True),
        sa.Column('canteen_token', sa.String(length=200), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('registration_open', sa.Boolean(), nullable=False),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('min_team_size >= 1', name='ck_events_min_team_size'),
        sa.CheckConstraint('max_team_size >= min_team_size', name='ck_events_team_size_bounds'),
        sa.CheckConstraint('registration_fee_per_member >= 0', name='ck_events_fee_non_negative'),
    )
    op.create_index('ix_events_slug', 'events', ['slug'], unique=True)
    op.create_index('ix_events_canteen_token', 'events', ['canteen_token'], unique=True)
    op.create_index('idx_events_type_active', 'events', ['type', 'is_active'])

    op.create_table(
        'teams',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('team_name', sa.String(length=200), nullable=False),
        sa.Column('lead_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('lead_email', sa.String(length=254), nullable=False),
        sa.Column('lead_name', sa.String(length=200), nullable=False),
        sa.Column('lead_phone', sa.String(length=20), nullable=True),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('event_id', 'lead_user_id', name='uq_team_event_lead'),
        sa.UniqueConstraint('event_id', 'team_name', name='uq_team_event_name'),
    )
    op.create_index('idx_teams_event', 'teams', ['event_id'])
    op.create_index('idx_teams_lead', 'teams', ['lead_user_id'])

    op.create_table(
        'members',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('team_id', sa.Integer(), sa.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('college', sa.String(length=200), nullable=False),
        sa.Column('roll_number', sa.String(length=50), nullable=False),
        sa.Column('qr_token', sa.String(length=200), nullable=False),
        sa.Column('is_checked_in', sa.Boolean(), nullable=False),
        sa.Column('check_in_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('checked_in_by', sa.Integer(), nullable=True),
        sa.UniqueConstraint('team_id', 'email', name='uq_member_team_email'),
    )
    op.create_index('ix_members_qr_token', 'members', ['qr_token'], unique=True)
    op.create_index('idx_members_team', 'members', ['team_id'])
    op.create_index('idx_members_email', 'members', ['email'])

    # Ledgers: no foreign keys, rows outlive the members they describe
    op.create_table(
        'attendance_logs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('event_id', sa.Integer(), nullable=True),
        sa.Column('team_id', sa.Integer(), nullable=True),
        sa.Column('member_id', sa.Integer(), nullable=True),
        sa.Column('team_name', sa.String(length=200), nullable=True),
        sa.Column('member_name', sa.String(length=200), nullable=False),
        sa.Column('member_email', sa.String(length=254), nullable=False),
        sa.Column('qr_token', sa.String(length=200), nullable=False),
        sa.Column('scanned_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('scanned_by', sa.Integer(), nullable=True),
        sa.Column('scanned_by_name', sa.String(length=200), nullable=True),
        sa.Column('success', sa.Boolean(), nullable=False),
        sa.Column('already_checked_in', sa.Boolean(), nullable=False),
        sa.Column('reason', sa.String(length=40), nullable=True),
        sa.Column('error_message', sa.String(length=255), nullable=True),
    )
    op.create_index('idx_attendance_event_scanned', 'attendance_logs', ['event_id', 'scanned_at'])
    op.create_index('idx_attendance_team', 'attendance_logs', ['team_id'])
    op.create_index('idx_attendance_token', 'attendance_logs', ['qr_token'])
    op.create_index('idx_attendance_scanned_by', 'attendance_logs', ['scanned_by'])

    op.create_table(
        'food_logs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('event_id', sa.Integer(), nullable=True),
        sa.Column('team_id', sa.Integer(), nullable=True),
        sa.Column('member_id', sa.Integer(), nullable=True),
        sa.Column('team_name', sa.String(length=200), nullable=True),
        sa.Column('member_name', sa.String(length=200), nullable=False),
        sa.Column('member_email', sa.String(length=254), nullable=False),
        sa.Column('member_qr_token', sa.String(length=200), nullable=False),
        sa.Column('event_canteen_qr', sa.String(length=200), nullable=False),
        sa.Column('eligible', sa.Boolean(), nullable=False),
        sa.Column('reason', sa.String(length=40), nullable=True),
        sa.Column('meal_type', sa.String(length=50), nullable=True),
        sa.Column('scanned_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('scanned_by', sa.Integer(), nullable=True),
        sa.Column('scanned_by_name', sa.String(length=200), nullable=True),
    )
    op.create_index('idx_food_event_scanned', 'food_logs', ['event_id', 'scanned_at'])
    op.create_index('idx_food_team', 'food_logs', ['team_id'])
    op.create_index('idx_food_token', 'food_logs', ['member_qr_token'])
    op.create_index('idx_food_eligible', 'food_logs', ['eligible'])


def downgrade():
    op.drop_table('food_logs')
    op.drop_table('attendance_logs')
    op.drop_table('members')
    op.drop_table('teams')
    op.drop_table('events')
    op.drop_table('users')
