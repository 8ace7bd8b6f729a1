import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_approvals.core.config import settings
from hr_approvals.core.exceptions import NotFoundError
from hr_approvals.models.auth.user import User
from hr_approvals.models.hr.employee import Employee
from hr_approvals.models.hr.employment_contract import EmploymentContract
from hr_approvals.models.shared.enums import (
    ApprovalCriterion, ApprovalMode, ApprovalRequestType, ApproverSource,
    Permission, ResponsibleScope, UserRole
)
from hr_approvals.schemas.approval.authorized_approver_schema import (
    AuthorizedApprover, PrimaryApproverResponse
)
from hr_approvals.services.approval.approval_settings_service import ApprovalSettingsService
from hr_approvals.services.approval.group_hr_service import GroupHrService
from hr_approvals.services.approval.role_membership_service import RoleMember, RoleMembershipService
from hr_approvals.services.approval.scope_responsible_service import ScopeResponsibleService

logger = logging.getLogger(__name__)

REQUEST_TYPE_PERMISSIONS: Dict[ApprovalRequestType, Permission] = {
    ApprovalRequestType.PTO: Permission.APPROVE_PTO_REQUESTS,
    ApprovalRequestType.MANUAL_TIME_ENTRY: Permission.MANAGE_TIME_ENTRIES,
    ApprovalRequestType.TIME_BANK: Permission.APPROVE_PTO_REQUESTS,
    ApprovalRequestType.EXPENSE: Permission.APPROVE_EXPENSES,
}

# Method names, looked up per call
CRITERION_RESOLVERS: Dict[ApprovalCriterion, str] = {
    ApprovalCriterion.DIRECT_MANAGER: "_resolve_direct_manager",
    ApprovalCriterion.TEAM_RESPONSIBLE: "_resolve_team_responsible",
    ApprovalCriterion.DEPARTMENT_RESPONSIBLE: "_resolve_department_responsible",
    ApprovalCriterion.COST_CENTER_RESPONSIBLE: "_resolve_cost_center_responsible",
    ApprovalCriterion.HR_ADMIN: "_resolve_hr_admin",
    ApprovalCriterion.GROUP_HR: "_resolve_group_hr",
}

APPROVER_SOURCE_LABELS: Dict[ApproverSource, str] = {
    ApproverSource.DIRECT_MANAGER: "Direct manager",
    ApproverSource.TEAM_RESPONSIBLE: "Team responsible",
    ApproverSource.DEPARTMENT_RESPONSIBLE: "Department responsible",
    ApproverSource.COST_CENTER_RESPONSIBLE: "Cost center responsible",
    ApproverSource.APPROVER_LIST: "Approver list",
    ApproverSource.GROUP_HR: "Group HR",
    ApproverSource.HR_ADMIN: "HR",
    ApproverSource.ORG_ADMIN: "Administration",
}

CLOSEST_LEVEL = 1


@dataclass(frozen=True)
class EmployeeApprovalContext:
    employee_id: int
    org_id: int
    team_id: Optional[int] = None
    manager_user_id: Optional[int] = None
    department_id: Optional[int] = None
    cost_center_id: Optional[int] = None


def build_approvers(
    members: Iterable[Tuple[User, UserRole]],
    source: ApproverSource,
    level: int
) -> List[AuthorizedApprover]:
    """Convert (user, role) pairs, dropping super admins and repeated users."""
    approvers: List[AuthorizedApprover] = []
    seen_ids = set()
    for user, role in members:
        if role == UserRole.SUPER_ADMIN or user.role == UserRole.SUPER_ADMIN:
            continue
        if user.id in seen_ids:
            continue
        seen_ids.add(user.id)
        approvers.append(
            AuthorizedApprover(
                user_id=user.id,
                name=user.full_name,
                email=user.email,
                role=role,
                source=source,
                level=level,
            )
        )
    return approvers


class ApproverResolutionService:
    """
    Decides who may approve a request for an employee.

    Every call re-reads the organization; nothing is cached between calls.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings_service = ApprovalSettingsService(session)
        self.role_membership = RoleMembershipService(session)
        self.scope_responsibles = ScopeResponsibleService(session)
        self.group_hr = GroupHrService(session)

    # region ========== Employee Context ==========

    async def get_employee(self, employee_id: int) -> Employee:
        result = await self.session.execute(
            select(Employee).where(Employee.id == employee_id)
        )
        employee = result.scalar_one_or_none()
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found")
        return employee

    async def build_employee_context(
        self,
        employee_id: int,
        org_id: Optional[int] = None
    ) -> EmployeeApprovalContext:
        """Team, manager, department and cost center from the latest active contract."""
        employee = await self.get_employee(employee_id)

        result = await self.session.execute(
            select(EmploymentContract)
            .where(
                EmploymentContract.employee_id == employee.id,
                EmploymentContract.active == True
            )
            .order_by(EmploymentContract.start_date.desc(), EmploymentContract.id.desc())
            .limit(1)
        )
        contract = result.scalar_one_or_none()

        manager_user_id = None
        if contract and contract.manager_id:
            manager_result = await self.session.execute(
                select(Employee.user_id).where(Employee.id == contract.manager_id)
            )
            manager_user_id = manager_result.scalar_one_or_none()

        return EmployeeApprovalContext(
            employee_id=employee.id,
            org_id=org_id if org_id is not None else employee.org_id,
            team_id=employee.team_id,
            manager_user_id=manager_user_id,
            department_id=contract.department_id if contract else None,
            cost_center_id=contract.cost_center_id if contract else None,
        )

    # endregion

    # region ========== Resolution ==========

    async def _build_approvers(
        self,
        members: Iterable[Tuple[User, UserRole]],
        source: ApproverSource,
        level: int
    ) -> List[AuthorizedApprover]:
        """build_approvers, also dropping users who are super admin through any membership row."""
        members = list(members)
        super_admin_ids = await self.role_membership.get_super_admin_ids(user.id for user, _ in members)
        return build_approvers(
            [(user, role) for user, role in members if user.id not in super_admin_ids],
            source,
            level
        )

    async def resolve_approver_users(
        self,
        employee_id: int,
        org_id: int,
        request_type: ApprovalRequestType
    ) -> List[AuthorizedApprover]:
        """
        Ordered approvers for a request.

        A non-empty static list wins outright. Otherwise the configured criteria
        are tried in order and the first non-empty result is returned as is.
        When every criterion comes back empty, local HR, then group HR, then
        organization admins are tried. An empty list means nobody is configured.
        """
        workflow = await self.settings_service.get_workflow_config(org_id, request_type)

        if workflow.mode == ApprovalMode.LIST:
            approvers = await self.resolve_approver_list(org_id, workflow.approver_list)
            if approvers:
                return approvers
            logger.warning(
                f"Approver list for {request_type.value} in org {org_id} has no active users, "
                f"falling back to hierarchy"
            )

        context = await self.build_employee_context(employee_id, org_id)
        permission = REQUEST_TYPE_PERMISSIONS[request_type]

        for criterion in workflow.criteria_order:
            resolver = getattr(self, CRITERION_RESOLVERS[criterion])
            approvers = await resolver(context, permission)
            if approvers:
                logger.debug(
                    f"{request_type.value} for employee {employee_id} resolved by {criterion.value}: "
                    f"{[a.user_id for a in approvers]}"
                )
                return approvers

        approvers = await self.resolve_fallback(org_id)
        if not approvers:
            logger.warning(
                f"No approver resolvable for {request_type.value} of employee {employee_id} in org {org_id}"
            )
        return approvers

    async def get_authorized_approvers(
        self,
        employee_id: int,
        request_type: ApprovalRequestType
    ) -> List[AuthorizedApprover]:
        """Same as resolve_approver_users, using the employee's own organization."""
        employee = await self.get_employee(employee_id)
        return await self.resolve_approver_users(employee.id, employee.org_id, request_type)

    async def get_primary_approver(
        self,
        employee_id: int,
        request_type: ApprovalRequestType
    ) -> Optional[PrimaryApproverResponse]:
        approvers = await self.get_authorized_approvers(employee_id, request_type)
        if not approvers:
            return None

        approver = approvers[0]
        return PrimaryApproverResponse(
            user_id=approver.user_id,
            name=approver.name or approver.email,
            email=approver.email,
            source=approver.source,
            label=APPROVER_SOURCE_LABELS[approver.source],
        )

    async def resolve_approver_list(self, org_id: int, approver_ids: List[int]) -> List[AuthorizedApprover]:
        """Configured approvers who are still active members, in configured order."""
        if not approver_ids:
            return []

        members = await self.role_membership.get_active_members(org_id, approver_ids)
        super_admin_ids = await self.role_membership.get_super_admin_ids(members)
        active_ids = [
            user_id for user_id in approver_ids
            if user_id in members and user_id not in super_admin_ids
        ]

        approvers = []
        for position, user_id in enumerate(active_ids, start=1):
            approvers.extend(build_approvers([members[user_id]], ApproverSource.APPROVER_LIST, position))
        return approvers

    async def resolve_fallback(self, org_id: int) -> List[AuthorizedApprover]:
        """Local HR, then group HR, then organization admins; first non-empty tier wins."""
        level = settings.APPROVAL_FALLBACK_LEVEL

        hr_users = await self.role_membership.get_local_hr_users(org_id)
        approvers = await self._build_approvers(hr_users, ApproverSource.HR_ADMIN, level)
        if approvers:
            return approvers

        group_hr_users = await self.group_hr.get_group_hr_users(org_id)
        approvers = await self._build_approvers(group_hr_users, ApproverSource.GROUP_HR, level)
        if approvers:
            return approvers

        admins = await self.role_membership.get_org_admin_users(org_id)
        return await self._build_approvers(admins, ApproverSource.ORG_ADMIN, level)

    # endregion

    # region ========== Criterion Resolvers ==========

    async def _resolve_direct_manager(
        self,
        context: EmployeeApprovalContext,
        permission: Permission
    ) -> List[AuthorizedApprover]:
        if context.manager_user_id is None:
            return []

        result = await self.session.execute(
            select(User).where(
                User.id == context.manager_user_id,
                User.is_active == True
            )
        )
        manager = result.scalar_one_or_none()
        if not manager:
            return []
        return await self._build_approvers(
            [RoleMember(manager, manager.role)], ApproverSource.DIRECT_MANAGER, CLOSEST_LEVEL
        )

    async def _resolve_scope(
        self,
        context: EmployeeApprovalContext,
        permission: Permission,
        scope: ResponsibleScope,
        scope_id: Optional[int],
        source: ApproverSource
    ) -> List[AuthorizedApprover]:
        users = await self.scope_responsibles.get_responsibles(context.org_id, scope, scope_id, permission)
        return await self._build_approvers([RoleMember(user, user.role) for user in users], source, CLOSEST_LEVEL)

    async def _resolve_team_responsible(self, context, permission):
        return await self._resolve_scope(
            context, permission, ResponsibleScope.TEAM, context.team_id,
            ApproverSource.TEAM_RESPONSIBLE
        )

    async def _resolve_department_responsible(self, context, permission):
        return await self._resolve_scope(
            context, permission, ResponsibleScope.DEPARTMENT, context.department_id,
            ApproverSource.DEPARTMENT_RESPONSIBLE
        )

    async def _resolve_cost_center_responsible(self, context, permission):
        return await self._resolve_scope(
            context, permission, ResponsibleScope.COST_CENTER, context.cost_center_id,
            ApproverSource.COST_CENTER_RESPONSIBLE
        )

    async def _resolve_hr_admin(self, context, permission):
        hr_users = await self.role_membership.get_local_hr_users(context.org_id)
        return await self._build_approvers(hr_users, ApproverSource.HR_ADMIN, settings.APPROVAL_FALLBACK_LEVEL)

    async def _resolve_group_hr(self, context, permission):
        group_hr_users = await self.group_hr.get_group_hr_users(context.org_id)
        return await self._build_approvers(group_hr_users, ApproverSource.GROUP_HR, settings.APPROVAL_FALLBACK_LEVEL)

    # endregion
