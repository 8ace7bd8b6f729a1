from hr_approvals.models.auth.user import User
from hr_approvals.models.auth.user_organization import UserOrganization
from hr_approvals.models.organization.organization import Organization
from hr_approvals.models.organization.department import Department
from hr_approvals.models.organization.cost_center import CostCenter
from hr_approvals.models.organization.team import Team
from hr_approvals.models.organization.organization_group import (
    OrganizationGroup,
    OrganizationGroupOrganization,
    OrganizationGroupUser,
)
from hr_approvals.models.hr.employee import Employee
from hr_approvals.models.hr.employment_contract import EmploymentContract
from hr_approvals.models.approval.area_responsible import AreaResponsible
from hr_approvals.models.expense.expense import Expense
from hr_approvals.models.expense.expense_approval import ExpenseApproval


__all__ = [
    "User",
    "UserOrganization",
    "Organization",
    "Department",
    "CostCenter",
    "Team",
    "OrganizationGroup",
    "OrganizationGroupOrganization",
    "OrganizationGroupUser",
    "Employee",
    "EmploymentContract",
    "AreaResponsible",
    "Expense",
    "ExpenseApproval",
]
