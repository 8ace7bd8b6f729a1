import logging
from typing import List, Set
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from hr_approvals.models.auth.user import User
from hr_approvals.models.organization.organization import Organization
from hr_approvals.models.organization.organization_group import (
    OrganizationGroup, OrganizationGroupOrganization, OrganizationGroupUser
)
from hr_approvals.models.shared.enums import GroupMembershipStatus, HR_ROLES, UserRole
from hr_approvals.services.approval.role_membership_service import RoleMember

logger = logging.getLogger(__name__)


class GroupHrService:
    """HR staff shared between organizations of the same group."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def is_enabled_for_org(self, org_id: int) -> bool:
        result = await self.session.execute(
            select(Organization.group_hr_approvals_enabled).where(Organization.id == org_id)
        )
        enabled = result.scalar_one_or_none()
        return bool(enabled)

    async def get_active_group_ids(self, org_id: int) -> List[int]:
        """Active groups in which the organization is an approved member."""
        result = await self.session.execute(
            select(OrganizationGroupOrganization.group_id)
            .join(OrganizationGroup, OrganizationGroup.id == OrganizationGroupOrganization.group_id)
            .where(
                OrganizationGroupOrganization.org_id == org_id,
                OrganizationGroupOrganization.status == GroupMembershipStatus.ACTIVE,
                OrganizationGroup.is_active == True
            )
            .order_by(OrganizationGroupOrganization.group_id)
        )
        return list(result.scalars().all())

    async def get_group_hr_users(self, org_id: int) -> List[RoleMember]:
        """
        HR-role group members whose home organization is a different, active
        member of one of the organization's active groups.

        Returns nothing when the organization has group HR approvals disabled
        or belongs to no active group.
        """
        if not await self.is_enabled_for_org(org_id):
            logger.debug(f"Group HR approvals disabled for org {org_id}")
            return []

        group_ids = await self.get_active_group_ids(org_id)
        if not group_ids:
            return []

        home_link = aliased(OrganizationGroupOrganization)
        result = await self.session.execute(
            select(OrganizationGroupUser, User)
            .join(User, User.id == OrganizationGroupUser.user_id)
            .join(
                home_link,
                and_(
                    home_link.group_id == OrganizationGroupUser.group_id,
                    home_link.org_id == User.org_id
                )
            )
            .join(Organization, Organization.id == User.org_id)
            .where(
                OrganizationGroupUser.group_id.in_(group_ids),
                OrganizationGroupUser.is_active == True,
                OrganizationGroupUser.role.in_(list(HR_ROLES)),
                home_link.status == GroupMembershipStatus.ACTIVE,
                Organization.is_active == True,
                User.is_active == True,
                User.org_id != org_id,
                User.role != UserRole.SUPER_ADMIN
            )
            .order_by(OrganizationGroupUser.id)
        )

        members: List[RoleMember] = []
        seen_ids = set()
        for group_user, user in result.all():
            if user.id in seen_ids:
                continue
            seen_ids.add(user.id)
            members.append(RoleMember(user=user, role=group_user.role))

        logger.debug(f"{len(members)} group HR users available for org {org_id}")
        return members

    async def is_group_hr_for_org(self, user_id: int, org_id: int) -> bool:
        members = await self.get_group_hr_users(org_id)
        return any(member.user.id == user_id for member in members)

    async def get_group_member_user_ids(self, org_id: int) -> Set[int]:
        """Users from other organizations who belong to any group the organization is in."""
        result = await self.session.execute(
            select(OrganizationGroupUser.user_id)
            .join(User, User.id == OrganizationGroupUser.user_id)
            .join(
                OrganizationGroupOrganization,
                OrganizationGroupOrganization.group_id == OrganizationGroupUser.group_id
            )
            .where(
                OrganizationGroupOrganization.org_id == org_id,
                User.org_id != org_id
            )
        )
        return set(result.scalars().all())
