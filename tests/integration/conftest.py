import pytest
from datetime import date
from typing import AsyncGenerator, Iterable, Optional
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from hr_approvals.main import app
from hr_approvals.core.database import get_async_session
from hr_approvals.models.base import Base
from hr_approvals.models import (
    AreaResponsible,
    CostCenter,
    Department,
    Employee,
    EmploymentContract,
    Expense,
    Organization,
    OrganizationGroup,
    OrganizationGroupOrganization,
    OrganizationGroupUser,
    Team,
    User,
    UserOrganization,
)
from hr_approvals.models.shared.enums import (
    ExpenseStatus,
    GroupMembershipStatus,
    Permission,
    ResponsibleScope,
    UserRole,
)

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    """Fresh in-memory database per test"""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as db_session:
        yield db_session


@pytest.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the test database"""
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as db_session:
            yield db_session

    app.dependency_overrides[get_async_session] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class DataFactory:
    """Creates committed rows for tests"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._counter = 0

    async def _save(self, obj):
        self.session.add(obj)
        await self.session.commit()
        return obj

    async def organization(self, name: str = "Org", group_hr_enabled: bool = True, **kwargs) -> Organization:
        return await self._save(
            Organization(name=name, group_hr_approvals_enabled=group_hr_enabled, is_active=True, **kwargs)
        )

    async def user(
        self,
        org: Optional[Organization] = None,
        role: UserRole = UserRole.EMPLOYEE,
        is_active: bool = True,
        name: Optional[str] = None
    ) -> User:
        self._counter += 1
        return await self._save(
            User(
                email=f"user{self._counter}@example.com",
                full_name=name or f"User {self._counter}",
                role=role,
                org_id=org.id if org else None,
                is_active=is_active,
            )
        )

    async def membership(
        self,
        user: User,
        org: Organization,
        role: UserRole = UserRole.EMPLOYEE,
        is_active: bool = True
    ) -> UserOrganization:
        return await self._save(UserOrganization(user_id=user.id, org_id=org.id, role=role, is_active=is_active))

    async def department(self, org: Organization, name: str = "Operations") -> Department:
        return await self._save(Department(org_id=org.id, name=name))

    async def cost_center(self, org: Organization, name: str = "Overhead") -> CostCenter:
        return await self._save(CostCenter(org_id=org.id, name=name))

    async def team(self, org: Organization, name: str = "Team A") -> Team:
        return await self._save(Team(org_id=org.id, name=name))

    async def employee(
        self,
        org: Organization,
        user: Optional[User] = None,
        team: Optional[Team] = None
    ) -> Employee:
        self._counter += 1
        return await self._save(
            Employee(
                org_id=org.id,
                user_id=user.id if user else None,
                team_id=team.id if team else None,
                first_name="Emp",
                last_name=str(self._counter),
            )
        )

    async def contract(
        self,
        employee: Employee,
        manager: Optional[Employee] = None,
        department: Optional[Department] = None,
        cost_center: Optional[CostCenter] = None,
        start_date: date = date(2024, 1, 1),
        active: bool = True
    ) -> EmploymentContract:
        return await self._save(
            EmploymentContract(
                employee_id=employee.id,
                manager_id=manager.id if manager else None,
                department_id=department.id if department else None,
                cost_center_id=cost_center.id if cost_center else None,
                start_date=start_date,
                active=active,
            )
        )

    async def responsible(
        self,
        org: Organization,
        user: User,
        scope: ResponsibleScope,
        scope_id: int,
        permissions: Iterable[Permission] = (Permission.APPROVE_PTO_REQUESTS,)
    ) -> AreaResponsible:
        return await self._save(
            AreaResponsible(
                org_id=org.id,
                scope=scope,
                scope_id=scope_id,
                user_id=user.id,
                permissions=[p.value for p in permissions],
            )
        )

    async def group(
        self,
        *orgs: Organization,
        status: GroupMembershipStatus = GroupMembershipStatus.ACTIVE
    ) -> OrganizationGroup:
        group = await self._save(OrganizationGroup(name="Holding", is_active=True))
        for org in orgs:
            await self._save(OrganizationGroupOrganization(group_id=group.id, org_id=org.id, status=status))
        return group

    async def group_user(
        self,
        group: OrganizationGroup,
        user: User,
        role: UserRole = UserRole.HR_ADMIN
    ) -> OrganizationGroupUser:
        return await self._save(OrganizationGroupUser(group_id=group.id, user_id=user.id, role=role))

    async def expense(self, org: Organization, employee: Employee, created_by: Optional[int] = None) -> Expense:
        return await self._save(
            Expense(
                org_id=org.id,
                employee_id=employee.id,
                total_amount=125,
                status=ExpenseStatus.SUBMITTED,
                created_by=created_by,
            )
        )


@pytest.fixture
def factory(session) -> DataFactory:
    return DataFactory(session)
