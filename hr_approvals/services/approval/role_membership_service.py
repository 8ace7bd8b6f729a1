import logging
from typing import Dict, Iterable, List, NamedTuple, Optional, Set
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_approvals.models.auth.user import User
from hr_approvals.models.auth.user_organization import UserOrganization
from hr_approvals.models.shared.enums import HR_ROLES, ORG_ADMIN_ROLES, UserRole

logger = logging.getLogger(__name__)


class RoleMember(NamedTuple):
    user: User
    role: UserRole


def is_super_admin(member: RoleMember) -> bool:
    return member.role == UserRole.SUPER_ADMIN or member.user.role == UserRole.SUPER_ADMIN


class RoleMembershipProvider:
    """A source of (user, role) pairs for an organization."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_members(
        self,
        org_id: int,
        roles: Optional[Iterable[UserRole]] = None,
        user_ids: Optional[Iterable[int]] = None
    ) -> List[RoleMember]:
        raise NotImplementedError


class MembershipRoleProvider(RoleMembershipProvider):
    """Roles stored in the user_organizations join table."""

    async def find_members(
        self,
        org_id: int,
        roles: Optional[Iterable[UserRole]] = None,
        user_ids: Optional[Iterable[int]] = None
    ) -> List[RoleMember]:
        conditions = [
            UserOrganization.org_id == org_id,
            UserOrganization.is_active == True,
            User.is_active == True,
        ]
        if roles is not None:
            conditions.append(UserOrganization.role.in_(list(roles)))
        if user_ids is not None:
            conditions.append(UserOrganization.user_id.in_(list(user_ids)))

        result = await self.session.execute(
            select(UserOrganization, User)
            .join(User, User.id == UserOrganization.user_id)
            .where(*conditions)
            .order_by(UserOrganization.id)
        )
        return [RoleMember(user=user, role=membership.role) for membership, user in result.all()]

    async def known_user_ids(self, org_id: int, user_ids: Iterable[int]) -> Set[int]:
        """Users with any membership row in the organization, active or not."""
        user_ids = list(user_ids)
        if not user_ids:
            return set()
        result = await self.session.execute(
            select(UserOrganization.user_id).where(
                UserOrganization.org_id == org_id,
                UserOrganization.user_id.in_(user_ids)
            )
        )
        return set(result.scalars().all())


class LegacyRoleProvider(RoleMembershipProvider):
    """Role and home organization stored directly on the user row."""

    async def find_members(
        self,
        org_id: int,
        roles: Optional[Iterable[UserRole]] = None,
        user_ids: Optional[Iterable[int]] = None
    ) -> List[RoleMember]:
        conditions = [
            User.org_id == org_id,
            User.is_active == True,
        ]
        if roles is not None:
            conditions.append(User.role.in_(list(roles)))
        if user_ids is not None:
            conditions.append(User.id.in_(list(user_ids)))

        result = await self.session.execute(
            select(User).where(*conditions).order_by(User.id)
        )
        return [RoleMember(user=user, role=user.role) for user in result.scalars().all()]


class RoleMembershipService:
    """
    Merged view over both membership representations.

    Membership rows win over legacy rows: once a user has any row in
    user_organizations for an organization, their legacy role there is ignored.
    Super admins are never returned.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.membership_provider = MembershipRoleProvider(session)
        self.legacy_provider = LegacyRoleProvider(session)

    async def _merged_members(
        self,
        org_id: int,
        roles: Optional[Iterable[UserRole]] = None,
        user_ids: Optional[Iterable[int]] = None
    ) -> List[RoleMember]:
        if roles is not None:
            roles = list(roles)
        if user_ids is not None:
            user_ids = list(user_ids)

        modern = await self.membership_provider.find_members(org_id, roles=roles, user_ids=user_ids)
        legacy = await self.legacy_provider.find_members(org_id, roles=roles, user_ids=user_ids)
        migrated = await self.membership_provider.known_user_ids(
            org_id, [member.user.id for member in legacy]
        )

        merged: Dict[int, RoleMember] = {}
        for member in modern:
            merged.setdefault(member.user.id, member)
        for member in legacy:
            if member.user.id in migrated:
                continue
            merged.setdefault(member.user.id, member)

        return [member for member in merged.values() if not is_super_admin(member)]

    async def get_users_with_roles(self, org_id: int, roles: Iterable[UserRole]) -> List[RoleMember]:
        roles = sorted(roles, key=lambda role: role.value)
        members = await self._merged_members(org_id, roles=roles)
        logger.debug(f"Found {len(members)} users with roles {[r.value for r in roles]} in org {org_id}")
        return members

    async def get_local_hr_users(self, org_id: int) -> List[RoleMember]:
        return await self.get_users_with_roles(org_id, HR_ROLES)

    async def get_org_admin_users(self, org_id: int) -> List[RoleMember]:
        return await self.get_users_with_roles(org_id, ORG_ADMIN_ROLES)

    async def get_active_members(self, org_id: int, user_ids: Iterable[int]) -> Dict[int, RoleMember]:
        """Active, non-super-admin members of the organization among `user_ids`, keyed by user id."""
        user_ids = list(user_ids)
        if not user_ids:
            return {}
        members = await self._merged_members(org_id, user_ids=user_ids)
        return {member.user.id: member for member in members}

    async def get_active_member(self, org_id: int, user_id: int) -> Optional[RoleMember]:
        members = await self.get_active_members(org_id, [user_id])
        return members.get(user_id)

    async def has_active_membership(self, user_id: int, org_id: int) -> bool:
        return await self.get_active_member(org_id, user_id) is not None

    async def has_role_in_org(self, user_id: int, org_id: int, roles: Iterable[UserRole]) -> bool:
        member = await self.get_active_member(org_id, user_id)
        return member is not None and member.role in set(roles)

    async def get_super_admin_ids(self, user_ids: Iterable[int]) -> Set[int]:
        """Users holding SUPER_ADMIN anywhere, as legacy role or in any membership row."""
        user_ids = list(user_ids)
        if not user_ids:
            return set()

        legacy_result = await self.session.execute(
            select(User.id).where(
                User.id.in_(user_ids),
                User.role == UserRole.SUPER_ADMIN
            )
        )
        membership_result = await self.session.execute(
            select(UserOrganization.user_id).where(
                UserOrganization.user_id.in_(user_ids),
                UserOrganization.role == UserRole.SUPER_ADMIN
            )
        )
        return set(legacy_result.scalars().all()) | set(membership_result.scalars().all())
