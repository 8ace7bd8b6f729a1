import logging
from typing import Any, Optional, Set
from datetime import datetime, timezone
from fastapi import HTTPException, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_approvals.core.exceptions import NotFoundError
from hr_approvals.models.organization.organization import Organization
from hr_approvals.models.shared.enums import ApprovalCriterion, ApprovalRequestType
from hr_approvals.schemas.approval.approval_settings_schema import (
    DEFAULT_CRITERIA_ORDER,
    ApprovalSettingsResponse,
    ApprovalSettingsSchema,
    ApprovalSettingsUpdate,
    ApprovalWorkflowConfig,
    ApprovalWorkflows,
    default_approval_settings,
)
from hr_approvals.services.approval.group_hr_service import GroupHrService

logger = logging.getLogger(__name__)


def load_approval_settings(raw: Any, org_id: Optional[int] = None) -> ApprovalSettingsSchema:
    """
    Validate a stored settings blob, or fall back to the defaults.

    Validation is all-or-nothing: a single bad workflow discards the whole
    blob. Never raises.
    """
    if raw is None:
        return default_approval_settings()

    try:
        return ApprovalSettingsSchema.model_validate(raw)
    except PydanticValidationError as e:
        logger.warning(
            f"Invalid approval settings for org {org_id}, using defaults: "
            f"{e.error_count()} validation error(s)"
        )
        return default_approval_settings()


def strip_group_hr(settings: ApprovalSettingsSchema, group_user_ids: Set[int]) -> ApprovalSettingsSchema:
    """Remove GROUP_HR criteria and cross-organization approvers from every workflow."""
    workflows = {}
    for request_type in ApprovalRequestType:
        workflow = settings.workflows.for_request_type(request_type)
        criteria = [c for c in workflow.criteria_order if c != ApprovalCriterion.GROUP_HR]
        workflows[request_type.value] = ApprovalWorkflowConfig(
            mode=workflow.mode,
            criteria_order=criteria or list(DEFAULT_CRITERIA_ORDER),
            approver_list=[user_id for user_id in workflow.approver_list if user_id not in group_user_ids],
        )
    return ApprovalSettingsSchema(version=settings.version, workflows=ApprovalWorkflows(**workflows))


class ApprovalSettingsService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.group_hr = GroupHrService(session)

    async def get_organization(self, org_id: int) -> Optional[Organization]:
        result = await self.session.execute(
            select(Organization).where(Organization.id == org_id)
        )
        return result.scalar_one_or_none()

    async def get_approval_settings_for_org(self, org_id: int) -> ApprovalSettingsSchema:
        """Current settings for the organization; defaults when missing or invalid."""
        result = await self.session.execute(
            select(Organization.approval_settings).where(Organization.id == org_id)
        )
        raw = result.scalar_one_or_none()
        return load_approval_settings(raw, org_id)

    async def get_workflow_config(
        self,
        org_id: int,
        request_type: ApprovalRequestType
    ) -> ApprovalWorkflowConfig:
        settings = await self.get_approval_settings_for_org(org_id)
        return settings.workflows.for_request_type(request_type)

    async def get_settings_response(self, org_id: int) -> ApprovalSettingsResponse:
        organization = await self.get_organization(org_id)
        if not organization:
            raise NotFoundError("Organization not found")

        return ApprovalSettingsResponse(
            org_id=organization.id,
            settings=load_approval_settings(organization.approval_settings, organization.id),
            group_hr_approvals_enabled=organization.group_hr_approvals_enabled,
            updated_at=organization.updated_at,
        )

    async def update_approval_settings(
        self,
        org_id: int,
        data: ApprovalSettingsUpdate,
        updated_by: Optional[int] = None
    ) -> ApprovalSettingsResponse:
        """Persist new settings and, optionally, the group HR toggle."""
        try:
            organization = await self.get_organization(org_id)
            if not organization:
                raise NotFoundError("Organization not found")

            group_enabled = organization.group_hr_approvals_enabled
            if data.group_hr_approvals_enabled is not None:
                group_enabled = data.group_hr_approvals_enabled

            settings = data.settings
            if not group_enabled:
                group_user_ids = await self.group_hr.get_group_member_user_ids(org_id)
                settings = strip_group_hr(settings, group_user_ids)

            organization.approval_settings = settings.model_dump(mode="json")
            organization.group_hr_approvals_enabled = group_enabled
            organization.updated_by = updated_by
            organization.updated_at = datetime.now(timezone.utc)

            await self.session.commit()
            await self.session.refresh(organization)

            logger.info(
                f"Approval settings updated for org {org_id} by user {updated_by} "
                f"(group HR {'enabled' if group_enabled else 'disabled'})"
            )
            return ApprovalSettingsResponse(
                org_id=organization.id,
                settings=settings,
                group_hr_approvals_enabled=organization.group_hr_approvals_enabled,
                updated_at=organization.updated_at,
            )

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating approval settings for org {org_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error updating approval settings"
            )
