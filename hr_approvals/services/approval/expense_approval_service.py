import logging
from typing import List, Optional, Tuple
from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_approvals.core.exceptions import NoApproverAvailableError, NotFoundError
from hr_approvals.models.expense.expense import Expense
from hr_approvals.models.expense.expense_approval import ExpenseApproval
from hr_approvals.models.hr.employee import Employee
from hr_approvals.models.shared.enums import ApprovalDecision, ApprovalRequestType
from hr_approvals.schemas.approval.authorized_approver_schema import ApprovalChain
from hr_approvals.services.approval.approver_resolution_service import ApproverResolutionService

logger = logging.getLogger(__name__)


class ExpenseApprovalService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.resolver = ApproverResolutionService(session)

    async def get_expense(self, expense_id: int) -> Expense:
        result = await self.session.execute(
            select(Expense).where(Expense.id == expense_id)
        )
        expense = result.scalar_one_or_none()
        if not expense:
            raise NotFoundError("Expense not found")
        return expense

    async def get_approval_records(self, expense_id: int) -> List[ExpenseApproval]:
        result = await self.session.execute(
            select(ExpenseApproval)
            .where(ExpenseApproval.expense_id == expense_id)
            .order_by(ExpenseApproval.level, ExpenseApproval.id)
        )
        return list(result.scalars().all())

    async def build_approval_chain(self, expense: Expense) -> List[int]:
        """
        Approver user ids for an expense, closest first.

        The submitter never approves their own expense. Raises
        NoApproverAvailableError when nobody else is left.
        """
        excluded_ids = {expense.created_by}
        owner_result = await self.session.execute(
            select(Employee.user_id).where(Employee.id == expense.employee_id)
        )
        excluded_ids.add(owner_result.scalar_one_or_none())
        excluded_ids.discard(None)

        approvers = await self.resolver.resolve_approver_users(
            expense.employee_id, expense.org_id, ApprovalRequestType.EXPENSE
        )

        approver_ids: List[int] = []
        for approver in approvers:
            if approver.user_id in excluded_ids or approver.user_id in approver_ids:
                continue
            approver_ids.append(approver.user_id)

        if not approver_ids:
            logger.warning(f"No approver available for expense {expense.id} in org {expense.org_id}")
            raise NoApproverAvailableError()

        return ApprovalChain(approver_ids=approver_ids).approver_ids

    async def create_approval_records(self, expense_id: int) -> Tuple[List[ExpenseApproval], bool]:
        """
        Create one PENDING approval per chain level, once per expense.

        Returns the records and whether they were created by this call.
        """
        expense = await self.get_expense(expense_id)
        created_by = expense.created_by

        existing = await self.get_approval_records(expense_id)
        if existing:
            logger.info(f"Approval chain for expense {expense_id} already exists, skipping")
            return existing, False

        chain = ApprovalChain(approver_ids=await self.build_approval_chain(expense))

        try:
            records = [
                ExpenseApproval(
                    expense_id=expense_id,
                    approver_id=link.approver_id,
                    level=link.level,
                    decision=ApprovalDecision.PENDING,
                    created_by=created_by,
                )
                for link in chain.links
            ]
            self.session.add_all(records)
            await self.session.commit()

        except IntegrityError:
            # Another submission created the chain first
            await self.session.rollback()
            logger.info(f"Approval chain for expense {expense_id} created concurrently, reusing it")
            return await self.get_approval_records(expense_id), False
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error creating approval chain for expense {expense_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error creating expense approvals"
            )

        logger.info(
            f"Approval chain created for expense {expense_id}: "
            f"{[(link.level, link.approver_id) for link in chain.links]}"
        )
        return await self.get_approval_records(expense_id), True

    async def get_current_pending_approvers(self, expense_id: int) -> Tuple[Optional[int], List[int]]:
        """
        Lowest level that is not approved yet and its pending approvers.

        Returns (None, []) when the expense has no chain or is fully approved.
        """
        records = await self.get_approval_records(expense_id)
        if not records:
            return None, []

        current = next((r for r in records if r.decision != ApprovalDecision.APPROVED), None)
        if current is None:
            return None, []

        approver_ids = [
            r.approver_id for r in records
            if r.level == current.level and r.decision == ApprovalDecision.PENDING
        ]
        return current.level, approver_ids
