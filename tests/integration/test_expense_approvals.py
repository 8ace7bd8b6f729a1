import pytest
from unittest.mock import patch
from sqlalchemy import func, select

from hr_approvals.core.exceptions import NoApproverAvailableError, NotFoundError
from hr_approvals.models.expense.expense_approval import ExpenseApproval
from hr_approvals.models.shared.enums import ApprovalDecision, ApprovalRequestType, UserRole
from hr_approvals.schemas.approval.approval_settings_schema import default_approval_settings
from hr_approvals.services.approval.expense_approval_service import ExpenseApprovalService


def expense_list_settings(*approver_ids):
    data = default_approval_settings().model_dump(mode="json")
    data["workflows"][ApprovalRequestType.EXPENSE.value] = {
        "mode": "LIST",
        "criteria_order": ["DIRECT_MANAGER"],
        "approver_list": list(approver_ids),
    }
    return data


@pytest.mark.asyncio
class TestExpenseApprovalChain:
    """Approval records created for submitted expenses"""

    async def test_static_list_becomes_ordered_chain(self, session, factory):
        org = await factory.organization()
        first = await factory.user(org)
        second = await factory.user(org, role=UserRole.MANAGER)
        org.approval_settings = expense_list_settings(first.id, second.id)
        await session.commit()
        submitter = await factory.user(org)
        employee = await factory.employee(org, user=submitter)
        expense = await factory.expense(org, employee, created_by=submitter.id)

        records, created = await ExpenseApprovalService(session).create_approval_records(expense.id)

        assert created is True
        assert [(r.approver_id, r.level, r.decision) for r in records] == [
            (first.id, 1, ApprovalDecision.PENDING),
            (second.id, 2, ApprovalDecision.PENDING),
        ]

    async def test_submitter_excluded_from_chain(self, session, factory):
        org = await factory.organization()
        submitter = await factory.user(org)
        other = await factory.user(org)
        org.approval_settings = expense_list_settings(submitter.id, other.id)
        await session.commit()
        employee = await factory.employee(org, user=submitter)
        expense = await factory.expense(org, employee, created_by=submitter.id)

        chain = await ExpenseApprovalService(session).build_approval_chain(expense)

        assert chain == [other.id]

    async def test_chain_created_once(self, session, factory):
        org = await factory.organization()
        hr_user = await factory.user(org, role=UserRole.HR_ADMIN)
        employee = await factory.employee(org)
        expense = await factory.expense(org, employee)

        service = ExpenseApprovalService(session)
        first_records, first_created = await service.create_approval_records(expense.id)
        second_records, second_created = await service.create_approval_records(expense.id)

        count = await session.scalar(
            select(func.count(ExpenseApproval.id)).where(ExpenseApproval.expense_id == expense.id)
        )
        assert first_created is True
        assert second_created is False
        assert [r.id for r in second_records] == [r.id for r in first_records]
        assert [r.approver_id for r in first_records] == [hr_user.id]
        assert count == 1

    async def test_no_approver_available(self, session, factory):
        org = await factory.organization()
        hr_user = await factory.user(org, role=UserRole.HR_ADMIN)
        employee = await factory.employee(org, user=hr_user)
        expense = await factory.expense(org, employee, created_by=hr_user.id)

        service = ExpenseApprovalService(session)
        with pytest.raises(NoApproverAvailableError) as exc_info:
            await service.create_approval_records(expense.id)

        assert exc_info.value.status_code == 409
        assert exc_info.value.detail == "No approver available. Contact HR."
        assert await service.get_approval_records(expense.id) == []

    async def test_unknown_expense(self, session):
        with pytest.raises(NotFoundError):
            await ExpenseApprovalService(session).create_approval_records(12345)

    async def test_pending_approvers_follow_decisions(self, session, factory):
        org = await factory.organization()
        first = await factory.user(org)
        second = await factory.user(org)
        org.approval_settings = expense_list_settings(first.id, second.id)
        await session.commit()
        employee = await factory.employee(org)
        expense = await factory.expense(org, employee)

        service = ExpenseApprovalService(session)
        assert await service.get_current_pending_approvers(expense.id) == (None, [])

        records, _ = await service.create_approval_records(expense.id)
        assert await service.get_current_pending_approvers(expense.id) == (1, [first.id])

        records[0].decision = ApprovalDecision.APPROVED
        await session.commit()
        assert await service.get_current_pending_approvers(expense.id) == (2, [second.id])

        records[1].decision = ApprovalDecision.APPROVED
        await session.commit()
        assert await service.get_current_pending_approvers(expense.id) == (None, [])

    async def test_concurrent_chain_with_different_approvers_is_rejected(self, session, factory):
        org = await factory.organization()
        first_hr = await factory.user(org, role=UserRole.HR_ADMIN)
        employee = await factory.employee(org)
        expense = await factory.expense(org, employee)
        expense_id, first_hr_id = expense.id, first_hr.id

        await ExpenseApprovalService(session).create_approval_records(expense_id)

        # The chain changes before a second submission that has not seen the first one's rows
        first_hr.is_active = False
        await session.commit()
        await factory.user(org, role=UserRole.HR_ADMIN)

        service = ExpenseApprovalService(session)
        read_records = service.get_approval_records
        reads = []

        async def stale_first_read(requested_id):
            reads.append(requested_id)
            if len(reads) == 1:
                return []
            return await read_records(requested_id)

        with patch.object(service, "get_approval_records", side_effect=stale_first_read):
            records, created = await service.create_approval_records(expense_id)

        count = await session.scalar(
            select(func.count(ExpenseApproval.id)).where(ExpenseApproval.expense_id == expense_id)
        )
        assert created is False
        assert [(r.approver_id, r.level) for r in records] == [(first_hr_id, 1)]
        assert count == 1
