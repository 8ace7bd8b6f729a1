import logging
from typing import Iterable, List
from sqlalchemy.ext.asyncio import AsyncSession

from hr_approvals.models.shared.enums import ApprovalRequestType, HR_ROLES
from hr_approvals.services.approval.approver_resolution_service import ApproverResolutionService

logger = logging.getLogger(__name__)


class ApprovalAuthorizationService:
    """Answers whether a given user may act on a given employee's request."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.resolver = ApproverResolutionService(session)
        self.role_membership = self.resolver.role_membership
        self.group_hr = self.resolver.group_hr

    async def has_hr_approval_access(self, user_id: int, org_id: int) -> bool:
        """Local HR, or group HR for a user who is otherwise a member of the organization."""
        if await self.role_membership.has_role_in_org(user_id, org_id, HR_ROLES):
            return True

        if not await self.role_membership.has_active_membership(user_id, org_id):
            return False

        return await self.group_hr.is_group_hr_for_org(user_id, org_id)

    async def can_user_approve(
        self,
        approver_user_id: int,
        employee_id: int,
        request_type: ApprovalRequestType
    ) -> bool:
        employee = await self.resolver.get_employee(employee_id)

        if await self.has_hr_approval_access(approver_user_id, employee.org_id):
            logger.debug(f"User {approver_user_id} approves for org {employee.org_id} through HR access")
            return True

        approvers = await self.resolver.resolve_approver_users(employee.id, employee.org_id, request_type)
        return any(approver.user_id == approver_user_id for approver in approvers)

    async def filter_approvable_employee_ids(
        self,
        approver_user_id: int,
        employee_ids: Iterable[int],
        request_type: ApprovalRequestType
    ) -> List[int]:
        """Employees whose requests of this type the user may act on, in input order."""
        approvable = []
        for employee_id in employee_ids:
            if await self.can_user_approve(approver_user_id, employee_id, request_type):
                approvable.append(employee_id)
        return approvable
