"""initial approval schema

Revision ID: 3c1a9e7b52d0
Revises:
Create Date: 2026-10-18 09:12:44.118203
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = '3c1a9e7b52d0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

USER_ROLE = sa.Enum(
    'SUPER_ADMIN', 'ORG_ADMIN', 'HR_ADMIN', 'HR_ASSISTANT', 'MANAGER', 'EMPLOYEE',
    name='userrole'
)
RESPONSIBLE_SCOPE = sa.Enum('ORGANIZATION', 'DEPARTMENT', 'COST_CENTER', 'TEAM', name='responsiblescope')
GROUP_MEMBERSHIP_STATUS = sa.Enum('PENDING', 'ACTIVE', 'REJECTED', name='groupmembershipstatus')
EXPENSE_STATUS = sa.Enum('DRAFT', 'SUBMITTED', 'APPROVED', 'REJECTED', 'REIMBURSED', name='expensestatus')
APPROVAL_DECISION = sa.Enum('PENDING', 'APPROVED', 'REJECTED', name='approvaldecision')


def audit_columns():
    return [
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('updated_by', sa.Integer(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'organizations',
        *audit_columns(),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('approval_settings', sa.JSON(), nullable=True),
        sa.Column('group_hr_approvals_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    op.create_table(
        'users',
        *audit_columns(),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('role', USER_ROLE, nullable=False),
        sa.Column('org_id', sa.Integer(), sa.ForeignKey('organizations.id'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_org_id', 'users', ['org_id'])

    op.create_table(
        'user_organizations',
        *audit_columns(),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('org_id', sa.Integer(), sa.ForeignKey('organizations.id'), nullable=False),
        sa.Column('role', USER_ROLE, nullable=False),
        sa.Column('assigned_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.UniqueConstraint('user_id', 'org_id', name='uq_user_organization'),
    )
    op.create_index('ix_user_organizations_user_id', 'user_organizations', ['user_id'])
    op.create_index('ix_user_organizations_org_id', 'user_organizations', ['org_id'])

    op.create_table(
        'departments',
        *audit_columns(),
        sa.Column('org_id', sa.Integer(), sa.ForeignKey('organizations.id'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
    )

    op.create_table(
        'cost_centers',
        *audit_columns(),
        sa.Column('org_id', sa.Integer(), sa.ForeignKey('organizations.id'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('code', sa.String(length=30), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
    )

    op.create_table(
        'teams',
        *audit_columns(),
        sa.Column('org_id', sa.Integer(), sa.ForeignKey('organizations.id'), nullable=False),
        sa.Column('cost_center_id', sa.Integer(), sa.ForeignKey('cost_centers.id'), nullable=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
    )

    op.create_table(
        'organization_groups',
        *audit_columns(),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )

    op.create_table(
        'organization_group_organizations',
        *audit_columns(),
        sa.Column('group_id', sa.Integer(), sa.ForeignKey('organization_groups.id'), nullable=False),
        sa.Column('org_id', sa.Integer(), sa.ForeignKey('organizations.id'), nullable=False),
        sa.Column('status', GROUP_MEMBERSHIP_STATUS, nullable=False),
        sa.UniqueConstraint('group_id', 'org_id', name='uq_group_organization'),
    )

    op.create_table(
        'organization_group_users',
        *audit_columns(),
        sa.Column('group_id', sa.Integer(), sa.ForeignKey('organization_groups.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('role', USER_ROLE, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.UniqueConstraint('group_id', 'user_id', name='uq_group_user'),
    )

    op.create_table(
        'employees',
        *audit_columns(),
        sa.Column('org_id', sa.Integer(), sa.ForeignKey('organizations.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('team_id', sa.Integer(), sa.ForeignKey('teams.id'), nullable=True),
        sa.Column('employee_number', sa.String(length=20), nullable=True),
        sa.Column('first_name', sa.String(length=50), nullable=False),
        sa.Column('last_name', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=True),
        sa.Column('hire_date', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
    )
    op.create_index('ix_employees_org_id', 'employees', ['org_id'])

    op.create_table(
        'employment_contracts',
        *audit_columns(),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('manager_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=True),
        sa.Column('department_id', sa.Integer(), sa.ForeignKey('departments.id'), nullable=True),
        sa.Column('cost_center_id', sa.Integer(), sa.ForeignKey('cost_centers.id'), nullable=True),
        sa.Column('contract_type', sa.String(length=50), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_employment_contracts_employee_id', 'employment_contracts', ['employee_id'])

    op.create_table(
        'area_responsibles',
        *audit_columns(),
        sa.Column('org_id', sa.Integer(), sa.ForeignKey('organizations.id'), nullable=False),
        sa.Column('scope', RESPONSIBLE_SCOPE, nullable=False),
        sa.Column('scope_id', sa.Integer(), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('permissions', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_area_responsibles_org_id', 'area_responsibles', ['org_id'])
    op.create_index('ix_area_responsibles_scope_id', 'area_responsibles', ['scope_id'])

    op.create_table(
        'expenses',
        *audit_columns(),
        sa.Column('org_id', sa.Integer(), sa.ForeignKey('organizations.id'), nullable=False),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('expense_date', sa.Date(), nullable=True),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', EXPENSE_STATUS, nullable=False),
    )
    op.create_index('ix_expenses_employee_id', 'expenses', ['employee_id'])

    op.create_table(
        'expense_approvals',
        *audit_columns(),
        sa.Column('expense_id', sa.Integer(), sa.ForeignKey('expenses.id'), nullable=False),
        sa.Column('approver_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('decision', APPROVAL_DECISION, nullable=False),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('decided_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('expense_id', 'level', name='uq_expense_approval_level'),
    )
    op.create_index('ix_expense_approvals_expense_id', 'expense_approvals', ['expense_id'])
    print("✓ [3c1a9e7b52d0] Created approval schema")


def downgrade() -> None:
    for table in (
        'expense_approvals', 'expenses', 'area_responsibles', 'employment_contracts',
        'employees', 'organization_group_users', 'organization_group_organizations',
        'organization_groups', 'teams', 'cost_centers', 'departments',
        'user_organizations', 'users', 'organizations',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_type in (APPROVAL_DECISION, EXPENSE_STATUS, GROUP_MEMBERSHIP_STATUS, RESPONSIBLE_SCOPE, USER_ROLE):
        enum_type.drop(bind, checkfirst=True)
