"""create_users_and_patient_records

Revision ID: 3b1f6c2a9d40
Revises:
Create Date: 2026-10-18 09:12:03.418220

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b1f6c2a9d40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role_enum = sa.Enum('PATIENT', 'COUNSELOR', 'DOCTOR', 'ADMIN', name='userrole')
record_status_enum = sa.Enum(
    'NO_RECORD', 'ASSESSMENT_PENDING', 'COUNSELOR_IN_PROGRESS', 'DOCTOR_IN_PROGRESS', 'CLOSED',
    name='patientrecordstatus'
)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('city', sa.String(), nullable=False),
        sa.Column('province', sa.String(), nullable=False),
        sa.Column('country', sa.String(), nullable=False),
        sa.Column('phone_number', sa.String(), nullable=False),
        sa.Column('registration_number', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted', sa.Boolean(), nullable=False),
        sa.Column('password_auto_generated', sa.Boolean(), nullable=False),
        sa.Column('last_password_reset_date', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=False)
    op.create_index(
        'uq_users_email_active', 'users', ['email'], unique=True,
        sqlite_where=sa.text('deleted = 0'), postgresql_where=sa.text('deleted = false')
    )
    op.create_index(
        'uq_users_registration_number_active', 'users', ['registration_number'], unique=True,
        sqlite_where=sa.text('deleted = 0'), postgresql_where=sa.text('deleted = false')
    )

    op.create_table(
        'user_authorities',
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('authority', user_role_enum, nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('user_id', 'authority')
    )

    op.create_table(
        'patient_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('status', record_status_enum, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['patient_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_patient_records_id'), 'patient_records', ['id'], unique=False)
    op.create_index(op.f('ix_patient_records_patient_id'), 'patient_records', ['patient_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_patient_records_patient_id'), table_name='patient_records')
    op.drop_index(op.f('ix_patient_records_id'), table_name='patient_records')
    op.drop_table('patient_records')
    op.drop_table('user_authorities')
    op.drop_index('uq_users_registration_number_active', table_name='users')
    op.drop_index('uq_users_email_active', table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')
    record_status_enum.drop(op.get_bind(), checkfirst=True)
    user_role_enum.drop(op.get_bind(), checkfirst=True)
