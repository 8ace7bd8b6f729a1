from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from hr_approvals.models.shared.enums import ApprovalDecision

class ExpenseApprovalResponse(BaseModel):
    id: int
    expense_id: int
    approver_id: int
    level: int
    decision: ApprovalDecision
    comments: Optional[str] = None
    decided_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ExpenseApprovalChainResponse(BaseModel):
    expense_id: int
    approvals: List[ExpenseApprovalResponse]
    created: bool  # False when the chain already existed

class PendingApproversResponse(BaseModel):
    expense_id: int
    level: Optional[int] = None
    approver_ids: List[int] = []
