"""create assembly voting schema

Revision ID: 3a9d0c4e5b71
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3a9d0c4e5b71"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('users',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('username', sa.String(length=80), nullable=False),
    sa.Column('password_hash', sa.String(length=255), nullable=False),
    sa.Column('role', sa.String(length=32), nullable=False),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('username')
    )
    op.create_table('voters',
    sa.Column('national_id', sa.String(length=32), nullable=False),
    sa.Column('apartment', sa.String(length=32), nullable=False),
    sa.Column('attendance_apartment', sa.String(length=32), nullable=True),
    sa.PrimaryKeyConstraint('national_id')
    )
    op.create_index('ix_voters_apartment', 'voters', ['apartment'])
    op.create_table('attendance',
    sa.Column('national_id', sa.String(length=32), nullable=False),
    sa.Column('apartment', sa.String(length=32), nullable=False),
    sa.Column('enabled', sa.Boolean(), nullable=False),
    sa.Column('registered_at', sa.DateTime(), nullable=False),
    sa.PrimaryKeyConstraint('national_id')
    )
    op.create_table('apartment_weights',
    sa.Column('apartment', sa.String(length=32), nullable=False),
    sa.Column('weight', sa.Float(), nullable=False),
    sa.PrimaryKeyConstraint('apartment')
    )
    op.create_table('questions',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('title', sa.String(length=200), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_table('question_options',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('question_id', sa.Integer(), nullable=False),
    sa.Column('position', sa.Integer(), nullable=False),
    sa.Column('label', sa.String(length=200), nullable=False),
    sa.Column('key', sa.String(length=200), nullable=False),
    sa.ForeignKeyConstraint(['question_id'], ['questions.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_table('voting_sessions',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('active', sa.Boolean(), nullable=False),
    sa.Column('question_id', sa.Integer(), nullable=True),
    sa.Column('started_at', sa.DateTime(), nullable=True),
    sa.Column('ended_at', sa.DateTime(), nullable=True),
    sa.Column('results_visible', sa.Boolean(), nullable=False),
    sa.Column('round', sa.Integer(), nullable=False),
    sa.ForeignKeyConstraint(['question_id'], ['questions.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_table('ballots',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('national_id', sa.String(length=32), nullable=False),
    sa.Column('apartment', sa.String(length=32), nullable=False),
    sa.Column('option', sa.String(length=200), nullable=False),
    sa.Column('option_label', sa.String(length=200), nullable=False),
    sa.Column('weight', sa.Float(), nullable=False),
    sa.Column('cast_at', sa.DateTime(), nullable=False),
    sa.Column('session_round', sa.Integer(), nullable=False),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('national_id', 'session_round', name='uq_ballot_voter_round')
    )
    op.create_index('ix_ballots_session_round', 'ballots', ['session_round'])


def downgrade():
    op.drop_index('ix_ballots_session_round', table_name='ballots')
    op.drop_table('ballots')
    op.drop_table('voting_sessions')
    op.drop_table('question_options')
    op.drop_table('questions')
    op.drop_table('apartment_weights')
    op.drop_table('attendance')
    op.drop_index('ix_voters_apartment', table_name='voters')
    op.drop_table('voters')
    op.drop_table('users')
