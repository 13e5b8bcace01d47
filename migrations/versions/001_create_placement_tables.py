"""Create users, joint ventures, candidates and lifecycle tables

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def upgrade():
    """Create the placement schema"""

    op.create_table(
        'joint_ventures',
        sa.Column('id', sa.Integer(), primary_key=True),
        *_timestamps(),
        sa.Column('name', sa.String(200), nullable=False, unique=True),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        *_timestamps(),
        sa.Column('email', sa.String(120), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('name', sa.String(200), nullable=True),
        # HQ_ADMIN or JV_PARTNER
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('jv_id', sa.Integer(), sa.ForeignKey('joint_ventures.id', ondelete='SET NULL'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])
    op.create_index('ix_users_jv_id', 'users', ['jv_id'])
    op.create_index('idx_user_role_jv', 'users', ['role', 'jv_id'])

    op.create_table(
        'candidates',
        sa.Column('id', sa.Integer(), primary_key=True),
        *_timestamps(),

        # Descriptive fields
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('resume_url', sa.String(1000), nullable=True),
        sa.Column('function_role', sa.String(200), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('interview_notes', sa.Text(), nullable=True),
        sa.Column('expected_salary', sa.Integer(), nullable=True),
        sa.Column('interview_date', sa.DateTime(), nullable=True),

        # Lifecycle
        sa.Column('status', sa.String(30), nullable=False, server_default='NEW'),
        sa.Column('current_jv_id', sa.Integer(), sa.ForeignKey('joint_ventures.id'), nullable=True),
        sa.Column('pending_jv_id', sa.Integer(), sa.ForeignKey('joint_ventures.id'), nullable=True),
        sa.Column('status_note', sa.Text(), nullable=True),
        sa.Column('last_status_update', sa.DateTime(), nullable=True),
        sa.Column('expected_start_date', sa.Date(), nullable=True),

        # Performance
        sa.Column('performance_rating', sa.Integer(), nullable=True),
        sa.Column('performance_notes', sa.Text(), nullable=True),

        # Optimistic concurrency counter
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
    )
    op.create_index('ix_candidates_email', 'candidates', ['email'])
    op.create_index('ix_candidates_status', 'candidates', ['status'])
    op.create_index('ix_candidates_current_jv_id', 'candidates', ['current_jv_id'])
    op.create_index('ix_candidates_pending_jv_id', 'candidates', ['pending_jv_id'])
    op.create_index('ix_candidates_last_status_update', 'candidates', ['last_status_update'])
    op.create_index('idx_candidate_pending', 'candidates', ['pending_jv_id', 'status'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        *_timestamps(),
        sa.Column('actor_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('entity_type', sa.String(100), nullable=False),
        sa.Column('entity_id', sa.Integer(), nullable=False),
        sa.Column('action', sa.String(50), nullable=False),
        sa.Column('before', sa.JSON(), nullable=True),
        sa.Column('after', sa.JSON(), nullable=True),
    )
    op.create_index('ix_audit_logs_actor_id', 'audit_logs', ['actor_id'])
    op.create_index('ix_audit_logs_entity_type', 'audit_logs', ['entity_type'])
    op.create_index('ix_audit_logs_entity_id', 'audit_logs', ['entity_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('idx_audit_entity', 'audit_logs', ['entity_type', 'entity_id'])

    op.create_table(
        'performance_reviews',
        sa.Column('id', sa.Integer(), primary_key=True),
        *_timestamps(),
        sa.Column('candidate_id', sa.Integer(), sa.ForeignKey('candidates.id', ondelete='CASCADE'), nullable=False),
        sa.Column('reviewer_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('summary', sa.Text(), nullable=True),
        sa.Column('need_hq_intervention', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('review_date', sa.Date(), nullable=False),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_review_rating_range'),
    )
    op.create_index('ix_performance_reviews_candidate_id', 'performance_reviews', ['candidate_id'])
    op.create_index('ix_performance_reviews_reviewer_id', 'performance_reviews', ['reviewer_id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('idx_notification_user_read', 'notifications', ['user_id', 'read_at'])
    op.create_index('idx_notification_type', 'notifications', ['type'])

    op.create_table(
        'allocation_records',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('candidate_id', sa.Integer(), sa.ForeignKey('candidates.id', ondelete='CASCADE'), nullable=False),
        sa.Column('jv_id', sa.Integer(), sa.ForeignKey('joint_ventures.id', ondelete='CASCADE'), nullable=False),
        sa.Column('actor_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        # ALLOCATE, ACCEPT, REJECT, RETURN, WITHDRAW, EXPIRE
        sa.Column('action', sa.String(20), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_allocation_records_candidate_id', 'allocation_records', ['candidate_id'])
    op.create_index('ix_allocation_records_jv_id', 'allocation_records', ['jv_id'])

    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), primary_key=True),
        *_timestamps(),
        sa.Column('candidate_id', sa.Integer(), sa.ForeignKey('candidates.id', ondelete='CASCADE'), nullable=False),
        sa.Column('author_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
    )
    op.create_index('ix_comments_candidate_id', 'comments', ['candidate_id'])


def downgrade():
    """Drop the placement schema"""
    op.drop_table('comments')
    op.drop_table('allocation_records')
    op.drop_table('notifications')
    op.drop_table('performance_reviews')
    op.drop_table('audit_logs')
    op.drop_table('candidates')
    op.drop_table('users')
    op.drop_table('joint_ventures')
