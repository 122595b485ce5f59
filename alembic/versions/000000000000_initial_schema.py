"""initial_schema

Revision ID: 000000000000
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '000000000000'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    ]


def upgrade() -> None:
    # Create applicants table
    op.create_table(
        'applicants',
        sa.Column('id', sa.String(length=36), nullable=False, comment='Immutable record identifier'),
        sa.Column('full_name', sa.String(length=255), nullable=False, comment='Applicant full name as entered'),
        sa.Column('phone_number', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('property_address', sa.String(length=255), nullable=False, comment='Street address as entered'),
        sa.Column('property_city', sa.String(length=100), nullable=True),
        sa.Column('property_county', sa.String(length=100), nullable=False),
        sa.Column('property_zip', sa.String(length=10), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=False, comment='pending / contacted / in-progress / closed / ...'),
        sa.Column('assigned_to', sa.String(length=36), nullable=True, comment='Assigned field worker'),
        sa.Column('comments', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_applicants_status', 'applicants', ['status'], unique=False)
    op.create_index('idx_applicants_created_at', 'applicants', ['created_at'], unique=False)
    op.create_index('idx_applicants_full_name', 'applicants', ['full_name'], unique=False)

    # Child tables: foreign keys without ON DELETE CASCADE
    op.create_table(
        'field_visits',
        sa.Column('id', sa.String(length=36), nullable=False, comment='Immutable record identifier'),
        sa.Column('applicant_id', sa.String(length=36), nullable=False, comment='References applicants table'),
        sa.Column('visit_date', sa.Date(), nullable=True),
        sa.Column('visit_outcome', sa.String(length=20), nullable=True, comment='attempt or engagement'),
        sa.Column('staff_member', sa.String(length=36), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['applicant_id'], ['applicants.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_field_visits_applicant_id', 'field_visits', ['applicant_id'], unique=False)

    op.create_table(
        'case_events',
        sa.Column('id', sa.String(length=36), nullable=False, comment='Immutable record identifier'),
        sa.Column('applicant_id', sa.String(length=36), nullable=False, comment='References applicants table'),
        sa.Column('event_type', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['applicant_id'], ['applicants.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_case_events_applicant_id', 'case_events', ['applicant_id'], unique=False)

    op.create_table(
        'application_documents',
        sa.Column('id', sa.String(length=36), nullable=False, comment='Immutable record identifier'),
        sa.Column('application_id', sa.String(length=36), nullable=False, comment='References applicants table'),
        sa.Column('document_type', sa.String(length=50), nullable=True),
        sa.Column('file_name', sa.String(length=255), nullable=True),
        sa.Column('storage_path', sa.String(length=500), nullable=True, comment='Object key in the document store'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['application_id'], ['applicants.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_application_documents_application_id', 'application_documents', ['application_id'], unique=False)

    op.create_table(
        'clients',
        sa.Column('id', sa.String(length=36), nullable=False, comment='Immutable record identifier'),
        sa.Column('applicant_id', sa.String(length=36), nullable=False, comment='References applicants table (1:1)'),
        sa.Column('enrolled_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['applicant_id'], ['applicants.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('applicant_id'),
    )


def downgrade() -> None:
    op.drop_table('clients')
    op.drop_table('application_documents')
    op.drop_table('case_events')
    op.drop_table('field_visits')
    op.drop_table('applicants')
