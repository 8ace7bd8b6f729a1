import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from hr_approvals.core.database import get_async_session
from hr_approvals.models.shared.enums import ApprovalRequestType
from hr_approvals.schemas.approval.approval_settings_schema import (
    ApprovalSettingsResponse,
    ApprovalSettingsUpdate
)
from hr_approvals.schemas.approval.authorized_approver_schema import (
    AuthorizedApprover,
    CanApproveResponse,
    HrAccessResponse,
    PrimaryApproverResponse
)
from hr_approvals.schemas.approval.expense_approval_schema import (
    ExpenseApprovalChainResponse,
    ExpenseApprovalResponse,
    PendingApproversResponse
)
from hr_approvals.services.approval.approval_authorization_service import ApprovalAuthorizationService
from hr_approvals.services.approval.approval_settings_service import ApprovalSettingsService
from hr_approvals.services.approval.approver_resolution_service import ApproverResolutionService
from hr_approvals.services.approval.expense_approval_service import ExpenseApprovalService

router = APIRouter()
logger = logging.getLogger(__name__)

# region ========== Approval Settings ==========

@router.get("/settings/{org_id}", response_model=ApprovalSettingsResponse)
async def get_approval_settings(
    org_id: int = Path(...),
    session: AsyncSession = Depends(get_async_session)
):
    """Get the approval workflows of an organization (defaults when unset or invalid)"""
    service = ApprovalSettingsService(session)
    return await service.get_settings_response(org_id)

@router.put("/settings/{org_id}", response_model=ApprovalSettingsResponse)
async def update_approval_settings(
    data: ApprovalSettingsUpdate,
    org_id: int = Path(...),
    updated_by: Optional[int] = Query(None, description="User performing the change"),
    session: AsyncSession = Depends(get_async_session)
):
    """Replace the approval workflows and optionally toggle group HR approvals"""
    service = ApprovalSettingsService(session)
    return await service.update_approval_settings(org_id, data, updated_by)

# endregion

# region ========== Approver Resolution ==========

@router.get("/employees/{employee_id}/approvers", response_model=List[AuthorizedApprover])
async def get_authorized_approvers(
    employee_id: int = Path(...),
    request_type: ApprovalRequestType = Query(..., description="Type of request to approve"),
    session: AsyncSession = Depends(get_async_session)
):
    """Ordered list of users allowed to approve the employee's request"""
    service = ApproverResolutionService(session)
    return await service.get_authorized_approvers(employee_id, request_type)

@router.get("/employees/{employee_id}/primary-approver", response_model=PrimaryApproverResponse)
async def get_primary_approver(
    employee_id: int = Path(...),
    request_type: ApprovalRequestType = Query(...),
    session: AsyncSession = Depends(get_async_session)
):
    """First approver of the employee's request, with a readable source label"""
    service = ApproverResolutionService(session)
    approver = await service.get_primary_approver(employee_id, request_type)

    if not approver:
        raise HTTPException(status_code=404, detail="No approver available. Contact HR.")

    return approver

@router.get("/employees/{employee_id}/can-approve", response_model=CanApproveResponse)
async def can_user_approve(
    employee_id: int = Path(...),
    approver_user_id: int = Query(...),
    request_type: ApprovalRequestType = Query(...),
    session: AsyncSession = Depends(get_async_session)
):
    """Check whether a user may approve or reject the employee's request"""
    service = ApprovalAuthorizationService(session)
    allowed = await service.can_user_approve(approver_user_id, employee_id, request_type)
    return CanApproveResponse(
        approver_user_id=approver_user_id,
        employee_id=employee_id,
        can_approve=allowed
    )

@router.get("/organizations/{org_id}/hr-access/{user_id}", response_model=HrAccessResponse)
async def has_hr_approval_access(
    org_id: int = Path(...),
    user_id: int = Path(...),
    session: AsyncSession = Depends(get_async_session)
):
    """Check whether a user approves any request of the organization as HR"""
    service = ApprovalAuthorizationService(session)
    return HrAccessResponse(
        user_id=user_id,
        org_id=org_id,
        has_hr_access=await service.has_hr_approval_access(user_id, org_id)
    )

# endregion

# region ========== Expense Approvals ==========

@router.post("/expenses/{expense_id}/approval-chain", response_model=ExpenseApprovalChainResponse)
async def create_expense_approval_chain(
    expense_id: int = Path(...),
    session: AsyncSession = Depends(get_async_session)
):
    """Create the expense's approval records; returns the existing chain on repeat calls"""
    service = ExpenseApprovalService(session)
    records, created = await service.create_approval_records(expense_id)
    return ExpenseApprovalChainResponse(
        expense_id=expense_id,
        approvals=[ExpenseApprovalResponse.model_validate(r, from_attributes=True) for r in records],
        created=created
    )

@router.get("/expenses/{expense_id}/pending-approvers", response_model=PendingApproversResponse)
async def get_pending_approvers(
    expense_id: int = Path(...),
    session: AsyncSession = Depends(get_async_session)
):
    """Approvers expected to act next on the expense"""
    service = ExpenseApprovalService(session)
    await service.get_expense(expense_id)
    level, approver_ids = await service.get_current_pending_approvers(expense_id)
    return PendingApproversResponse(expense_id=expense_id, level=level, approver_ids=approver_ids)

# endregion
