import pytest

from hr_approvals.models.shared.enums import GroupMembershipStatus, UserRole
from hr_approvals.services.approval.group_hr_service import GroupHrService
from hr_approvals.services.approval.role_membership_service import RoleMembershipService


@pytest.mark.asyncio
class TestRoleMembership:
    """Merged view of membership rows and legacy user roles"""

    async def test_legacy_role_used_without_membership_rows(self, session, factory):
        org = await factory.organization()
        hr_user = await factory.user(org, role=UserRole.HR_ADMIN)

        members = await RoleMembershipService(session).get_local_hr_users(org.id)

        assert [m.user.id for m in members] == [hr_user.id]

    async def test_membership_row_overrides_legacy_role(self, session, factory):
        org = await factory.organization()
        demoted = await factory.user(org, role=UserRole.HR_ADMIN)
        await factory.membership(demoted, org, role=UserRole.EMPLOYEE)

        members = await RoleMembershipService(session).get_local_hr_users(org.id)

        assert members == []

    async def test_inactive_membership_hides_legacy_role(self, session, factory):
        org = await factory.organization()
        removed = await factory.user(org, role=UserRole.HR_ADMIN)
        await factory.membership(removed, org, role=UserRole.HR_ADMIN, is_active=False)

        service = RoleMembershipService(session)

        assert await service.get_local_hr_users(org.id) == []
        assert await service.has_active_membership(removed.id, org.id) is False

    async def test_membership_in_other_org(self, session, factory):
        home = await factory.organization("Home")
        other = await factory.organization("Other")
        user = await factory.user(home)
        await factory.membership(user, other, role=UserRole.HR_ASSISTANT)

        service = RoleMembershipService(session)

        assert await service.has_role_in_org(user.id, other.id, {UserRole.HR_ASSISTANT}) is True
        assert await service.has_role_in_org(user.id, home.id, {UserRole.HR_ASSISTANT}) is False

    async def test_inactive_users_and_super_admins_excluded(self, session, factory):
        org = await factory.organization()
        await factory.user(org, role=UserRole.ORG_ADMIN, is_active=False)
        super_admin = await factory.user(org, role=UserRole.SUPER_ADMIN)
        await factory.membership(super_admin, org, role=UserRole.ORG_ADMIN)
        admin = await factory.user(org, role=UserRole.ORG_ADMIN)

        members = await RoleMembershipService(session).get_org_admin_users(org.id)

        assert [m.user.id for m in members] == [admin.id]


@pytest.mark.asyncio
class TestGroupHr:
    """HR staff shared across a group of organizations"""

    async def test_sibling_hr_available(self, session, factory):
        org = await factory.organization("Subsidiary")
        sibling = await factory.organization("Sibling")
        group = await factory.group(org, sibling)
        group_hr = await factory.user(sibling, role=UserRole.HR_ADMIN)
        await factory.group_user(group, group_hr, role=UserRole.HR_ASSISTANT)

        members = await GroupHrService(session).get_group_hr_users(org.id)

        assert [(m.user.id, m.role) for m in members] == [(group_hr.id, UserRole.HR_ASSISTANT)]

    async def test_disabled_toggle_hides_group_hr(self, session, factory):
        org = await factory.organization("Subsidiary", group_hr_enabled=False)
        sibling = await factory.organization("Sibling")
        group = await factory.group(org, sibling)
        group_hr = await factory.user(sibling, role=UserRole.HR_ADMIN)
        await factory.group_user(group, group_hr)

        assert await GroupHrService(session).get_group_hr_users(org.id) == []

    async def test_pending_group_membership_ignored(self, session, factory):
        org = await factory.organization("Subsidiary")
        sibling = await factory.organization("Sibling")
        group = await factory.group(org, sibling, status=GroupMembershipStatus.PENDING)
        group_hr = await factory.user(sibling, role=UserRole.HR_ADMIN)
        await factory.group_user(group, group_hr)

        assert await GroupHrService(session).get_group_hr_users(org.id) == []

    async def test_own_org_staff_not_group_hr(self, session, factory):
        org = await factory.organization("Subsidiary")
        sibling = await factory.organization("Sibling")
        group = await factory.group(org, sibling)
        local_hr = await factory.user(org, role=UserRole.HR_ADMIN)
        await factory.group_user(group, local_hr)

        assert await GroupHrService(session).get_group_hr_users(org.id) == []

    async def test_non_hr_group_role_ignored(self, session, factory):
        org = await factory.organization("Subsidiary")
        sibling = await factory.organization("Sibling")
        group = await factory.group(org, sibling)
        manager = await factory.user(sibling, role=UserRole.HR_ADMIN)
        await factory.group_user(group, manager, role=UserRole.MANAGER)

        assert await GroupHrService(session).get_group_hr_users(org.id) == []
