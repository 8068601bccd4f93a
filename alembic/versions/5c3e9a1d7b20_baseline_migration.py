"""baseline_migration

Revision ID: 5c3e9a1d7b20
Revises:
Create Date: 2026-10-19 10:12:41.118204

Creates the user, profile, resume, activity and mock interview tables.
Tables that already exist (e.g. created by create_all in development) are skipped.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '5c3e9a1d7b20'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('full_name', sa.String(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)

    if not table_exists('user_profiles'):
        op.create_table('user_profiles',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('headline', sa.String(), nullable=True),
            sa.Column('current_role', sa.String(), nullable=True),
            sa.Column('location', sa.String(), nullable=True),
            sa.Column('skills', sa.JSON(), nullable=False),
            sa.Column('experience_years', sa.Integer(), nullable=True),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_user_profiles_id'), 'user_profiles', ['id'], unique=False)
        op.create_index(op.f('ix_user_profiles_user_id'), 'user_profiles', ['user_id'], unique=True)

    if not table_exists('resumes'):
        op.create_table('resumes',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('original_file', sa.String(), nullable=True),
            sa.Column('parsed_text', sa.Text(), nullable=False),
            sa.Column('is_primary', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_resume_user_primary', 'resumes', ['user_id', 'is_primary'], unique=False)
        op.create_index(op.f('ix_resumes_id'), 'resumes', ['id'], unique=False)
        op.create_index(op.f('ix_resumes_user_id'), 'resumes', ['user_id'], unique=False)

    if not table_exists('activity_logs'):
        op.create_table('activity_logs',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('type', sa.String(), nullable=False),
            sa.Column('meta', sa.JSON(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_activity_user_created', 'activity_logs', ['user_id', 'created_at'], unique=False)
        op.create_index(op.f('ix_activity_logs_created_at'), 'activity_logs', ['created_at'], unique=False)
        op.create_index(op.f('ix_activity_logs_id'), 'activity_logs', ['id'], unique=False)
        op.create_index(op.f('ix_activity_logs_type'), 'activity_logs', ['type'], unique=False)
        op.create_index(op.f('ix_activity_logs_user_id'), 'activity_logs', ['user_id'], unique=False)

    if not table_exists('interview_sessions'):
        op.create_table('interview_sessions',
            sa.Column('id', sa.String(length=32), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('target_role', sa.String(), nullable=False),
            sa.Column('mode', sa.Enum('HR', 'TECHNICAL', 'BEHAVIORAL', name='interviewmode'), nullable=False),
            sa.Column('settings', sa.JSON(), nullable=False),
            sa.Column('answer_count', sa.Integer(), nullable=False),
            sa.Column('overall_score', sa.Integer(), nullable=True),
            sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_interview_user_completed', 'interview_sessions', ['user_id', 'completed_at'], unique=False)
        op.create_index(op.f('ix_interview_sessions_completed_at'), 'interview_sessions', ['completed_at'], unique=False)
        op.create_index(op.f('ix_interview_sessions_user_id'), 'interview_sessions', ['user_id'], unique=False)

    if not table_exists('interview_questions'):
        op.create_table('interview_questions',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('session_id', sa.String(length=32), nullable=False),
            sa.Column('position', sa.Integer(), nullable=False),
            sa.Column('question', sa.Text(), nullable=False),
            sa.Column('asked_at', sa.DateTime(timezone=True), nullable=False),
            sa.ForeignKeyConstraint(['session_id'], ['interview_sessions.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('session_id', 'position', name='uq_question_session_position')
        )
        op.create_index(op.f('ix_interview_questions_id'), 'interview_questions', ['id'], unique=False)
        op.create_index(op.f('ix_interview_questions_session_id'), 'interview_questions', ['session_id'], unique=False)

    if not table_exists('interview_answers'):
        op.create_table('interview_answers',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('session_id', sa.String(length=32), nullable=False),
            sa.Column('question_index', sa.Integer(), nullable=False),
            sa.Column('answer', sa.Text(), nullable=False),
            sa.Column('score', sa.Integer(), nullable=False),
            sa.Column('feedback', sa.Text(), nullable=False),
            sa.Column('strengths', sa.JSON(), nullable=False),
            sa.Column('improvements', sa.JSON(), nullable=False),
            sa.Column('via_voice', sa.Boolean(), nullable=False),
            sa.Column('answered_at', sa.DateTime(timezone=True), nullable=False),
            sa.ForeignKeyConstraint(['session_id'], ['interview_sessions.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('session_id', 'question_index', name='uq_answer_session_index')
        )
        op.create_index(op.f('ix_interview_answers_id'), 'interview_answers', ['id'], unique=False)
        op.create_index(op.f('ix_interview_answers_session_id'), 'interview_answers', ['session_id'], unique=False)


def downgrade() -> None:
    op.drop_table('interview_answers')
    op.drop_table('interview_questions')
    op.drop_table('interview_sessions')
    sa.Enum(name='interviewmode').drop(op.get_bind(), checkfirst=True)
    op.drop_table('activity_logs')
    op.drop_table('resumes')
    op.drop_table('user_profiles')
    op.drop_table('users')
