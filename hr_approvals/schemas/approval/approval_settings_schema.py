from pydantic import BaseModel, validator
from typing import Optional, List
from datetime import datetime
from hr_approvals.models.shared.enums import ApprovalCriterion, ApprovalMode, ApprovalRequestType

CURRENT_SETTINGS_VERSION = 1

DEFAULT_CRITERIA_ORDER = [
    ApprovalCriterion.DIRECT_MANAGER,
    ApprovalCriterion.TEAM_RESPONSIBLE,
    ApprovalCriterion.DEPARTMENT_RESPONSIBLE,
    ApprovalCriterion.COST_CENTER_RESPONSIBLE,
]

class ApprovalWorkflowConfig(BaseModel):
    mode: ApprovalMode = ApprovalMode.HIERARCHY
    criteria_order: List[ApprovalCriterion]
    approver_list: List[int] = []  # kept in HIERARCHY mode so switching modes is lossless

    class Config:
        extra = "forbid"

    @validator('criteria_order')
    def validate_criteria_order(cls, v):
        if not v:
            raise ValueError('At least one approval criterion is required')
        if len(set(v)) != len(v):
            raise ValueError('Approval criteria must not repeat')
        return v

    @validator('approver_list')
    def validate_approver_list(cls, v):
        # Ordered set: keep first occurrence
        unique_ids = []
        for user_id in v:
            if user_id not in unique_ids:
                unique_ids.append(user_id)
        return unique_ids

class ApprovalWorkflows(BaseModel):
    """One workflow per request type; every type must be present."""
    PTO: ApprovalWorkflowConfig
    MANUAL_TIME_ENTRY: ApprovalWorkflowConfig
    TIME_BANK: ApprovalWorkflowConfig
    EXPENSE: ApprovalWorkflowConfig

    class Config:
        extra = "forbid"

    def for_request_type(self, request_type: ApprovalRequestType) -> ApprovalWorkflowConfig:
        return getattr(self, request_type.value)

class ApprovalSettingsSchema(BaseModel):
    version: int = CURRENT_SETTINGS_VERSION
    workflows: ApprovalWorkflows

    class Config:
        extra = "forbid"

    @validator('version')
    def validate_version(cls, v):
        if v != CURRENT_SETTINGS_VERSION:
            raise ValueError(f'Unsupported approval settings version: {v}')
        return v

def default_workflow_config() -> ApprovalWorkflowConfig:
    return ApprovalWorkflowConfig(
        mode=ApprovalMode.HIERARCHY,
        criteria_order=list(DEFAULT_CRITERIA_ORDER),
        approver_list=[],
    )

def default_approval_settings() -> ApprovalSettingsSchema:
    """Hard-coded settings used whenever an organization has none or invalid ones."""
    return ApprovalSettingsSchema(
        version=CURRENT_SETTINGS_VERSION,
        workflows=ApprovalWorkflows(
            **{request_type.value: default_workflow_config() for request_type in ApprovalRequestType}
        ),
    )

class ApprovalSettingsUpdate(BaseModel):
    settings: ApprovalSettingsSchema
    group_hr_approvals_enabled: Optional[bool] = None

class ApprovalSettingsResponse(BaseModel):
    org_id: int
    settings: ApprovalSettingsSchema
    group_hr_approvals_enabled: bool
    updated_at: Optional[datetime] = None
