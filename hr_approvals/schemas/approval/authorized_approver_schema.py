from pydantic import BaseModel, validator
from typing import Optional, List
from hr_approvals.models.shared.enums import ApproverSource, UserRole

class AuthorizedApprover(BaseModel):
    user_id: int
    name: Optional[str] = None
    email: str
    role: UserRole
    source: ApproverSource
    level: int  # 1 = closest, 5 = organization-wide

    class Config:
        from_attributes = True

class PrimaryApproverResponse(BaseModel):
    user_id: int
    name: str
    email: str
    source: ApproverSource
    label: str

class CanApproveResponse(BaseModel):
    approver_user_id: int
    employee_id: int
    can_approve: bool

class HrAccessResponse(BaseModel):
    user_id: int
    org_id: int
    has_hr_access: bool

class ApprovalChainLink(BaseModel):
    approver_id: int
    level: int

class ApprovalChain(BaseModel):
    """Ordered approvers; level is always the 1-based position in the chain."""
    approver_ids: List[int]

    @validator('approver_ids')
    def validate_approver_ids(cls, v):
        if not v:
            raise ValueError('An approval chain needs at least one approver')
        if len(set(v)) != len(v):
            raise ValueError('An approver can appear only once in a chain')
        return v

    @property
    def links(self) -> List[ApprovalChainLink]:
        return [
            ApprovalChainLink(approver_id=approver_id, level=position)
            for position, approver_id in enumerate(self.approver_ids, start=1)
        ]
