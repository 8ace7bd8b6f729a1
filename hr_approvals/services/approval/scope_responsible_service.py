import logging
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_approvals.models.approval.area_responsible import AreaResponsible
from hr_approvals.models.auth.user import User
from hr_approvals.models.shared.enums import Permission, ResponsibleScope, UserRole

logger = logging.getLogger(__name__)


class ScopeResponsibleService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_responsibles(
        self,
        org_id: int,
        scope: ResponsibleScope,
        scope_id: Optional[int],
        permission: Permission
    ) -> List[User]:
        """Active users holding `permission` over the given team, department or cost center."""
        if scope_id is None:
            return []

        result = await self.session.execute(
            select(AreaResponsible, User)
            .join(User, User.id == AreaResponsible.user_id)
            .where(
                AreaResponsible.org_id == org_id,
                AreaResponsible.scope == scope,
                AreaResponsible.scope_id == scope_id,
                AreaResponsible.is_active == True,
                User.is_active == True
            )
            .order_by(AreaResponsible.id)
        )

        users: List[User] = []
        seen_ids = set()
        for responsible, user in result.all():
            if permission.value not in (responsible.permissions or []):
                continue
            if user.role == UserRole.SUPER_ADMIN or user.id in seen_ids:
                continue
            seen_ids.add(user.id)
            users.append(user)

        logger.debug(
            f"{len(users)} {scope.value} responsibles with {permission.value} "
            f"for scope {scope_id} in org {org_id}"
        )
        return users
