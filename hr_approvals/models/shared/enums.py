from enum import Enum

# region Organization Enums

class UserRole(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ORG_ADMIN = "ORG_ADMIN"
    HR_ADMIN = "HR_ADMIN"
    HR_ASSISTANT = "HR_ASSISTANT"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"

class ResponsibleScope(str, Enum):
    ORGANIZATION = "ORGANIZATION"
    DEPARTMENT = "DEPARTMENT"
    COST_CENTER = "COST_CENTER"
    TEAM = "TEAM"

class Permission(str, Enum):
    VIEW_EMPLOYEES = "VIEW_EMPLOYEES"
    MANAGE_EMPLOYEES = "MANAGE_EMPLOYEES"
    VIEW_TIME_ENTRIES = "VIEW_TIME_ENTRIES"
    MANAGE_TIME_ENTRIES = "MANAGE_TIME_ENTRIES"
    VIEW_ALERTS = "VIEW_ALERTS"
    RESOLVE_ALERTS = "RESOLVE_ALERTS"
    VIEW_SCHEDULES = "VIEW_SCHEDULES"
    MANAGE_SCHEDULES = "MANAGE_SCHEDULES"
    VIEW_PTO_REQUESTS = "VIEW_PTO_REQUESTS"
    APPROVE_PTO_REQUESTS = "APPROVE_PTO_REQUESTS"
    APPROVE_EXPENSES = "APPROVE_EXPENSES"

class GroupMembershipStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    REJECTED = "REJECTED"

# endregion

# region Approval System Enums

class ApprovalRequestType(str, Enum):
    PTO = "PTO"
    MANUAL_TIME_ENTRY = "MANUAL_TIME_ENTRY"
    TIME_BANK = "TIME_BANK"
    EXPENSE = "EXPENSE"

class ApprovalMode(str, Enum):
    HIERARCHY = "HIERARCHY"
    LIST = "LIST"

class ApprovalCriterion(str, Enum):
    DIRECT_MANAGER = "DIRECT_MANAGER"
    TEAM_RESPONSIBLE = "TEAM_RESPONSIBLE"
    DEPARTMENT_RESPONSIBLE = "DEPARTMENT_RESPONSIBLE"
    COST_CENTER_RESPONSIBLE = "COST_CENTER_RESPONSIBLE"
    HR_ADMIN = "HR_ADMIN"
    GROUP_HR = "GROUP_HR"

class ApproverSource(str, Enum):
    DIRECT_MANAGER = "DIRECT_MANAGER"
    TEAM_RESPONSIBLE = "TEAM_RESPONSIBLE"
    DEPARTMENT_RESPONSIBLE = "DEPARTMENT_RESPONSIBLE"
    COST_CENTER_RESPONSIBLE = "COST_CENTER_RESPONSIBLE"
    APPROVER_LIST = "APPROVER_LIST"
    GROUP_HR = "GROUP_HR"
    HR_ADMIN = "HR_ADMIN"
    ORG_ADMIN = "ORG_ADMIN"

class ApprovalDecision(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

class ExpenseStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    REIMBURSED = "REIMBURSED"

# endregion

HR_ROLES = frozenset({UserRole.HR_ADMIN, UserRole.HR_ASSISTANT})
ORG_ADMIN_ROLES = frozenset({UserRole.ORG_ADMIN})
