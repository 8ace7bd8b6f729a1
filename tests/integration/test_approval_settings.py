import pytest
from pydantic import ValidationError

from hr_approvals.core.exceptions import NotFoundError
from hr_approvals.models.shared.enums import (
    ApprovalCriterion,
    ApprovalMode,
    ApprovalRequestType,
    UserRole,
)
from hr_approvals.schemas.approval.approval_settings_schema import (
    DEFAULT_CRITERIA_ORDER,
    ApprovalSettingsSchema,
    ApprovalSettingsUpdate,
    ApprovalWorkflowConfig,
    default_approval_settings,
)
from hr_approvals.services.approval.approval_settings_service import (
    ApprovalSettingsService,
    load_approval_settings,
)


class TestApprovalSettingsSchema:
    """Validation of stored workflow blobs"""

    def test_defaults_cover_every_request_type(self):
        defaults = default_approval_settings()
        for request_type in ApprovalRequestType:
            workflow = defaults.workflows.for_request_type(request_type)
            assert workflow.mode == ApprovalMode.HIERARCHY
            assert workflow.criteria_order == DEFAULT_CRITERIA_ORDER
            assert workflow.approver_list == []

    def test_repeated_criteria_rejected(self):
        with pytest.raises(ValidationError):
            ApprovalWorkflowConfig(criteria_order=["DIRECT_MANAGER", "DIRECT_MANAGER"])

    def test_empty_criteria_rejected(self):
        with pytest.raises(ValidationError):
            ApprovalWorkflowConfig(criteria_order=[])

    def test_approver_list_deduplicated_in_order(self):
        workflow = ApprovalWorkflowConfig(criteria_order=["HR_ADMIN"], approver_list=[3, 1, 3, 2, 1])
        assert workflow.approver_list == [3, 1, 2]

    def test_unknown_fields_rejected(self):
        data = default_approval_settings().model_dump(mode="json")
        data["workflows"]["PTO"]["escalate"] = True
        with pytest.raises(ValidationError):
            ApprovalSettingsSchema.model_validate(data)


class TestLoadApprovalSettings:
    """Stored settings fall back to defaults instead of failing"""

    def test_missing_settings(self):
        assert load_approval_settings(None) == default_approval_settings()

    def test_wrong_version(self):
        data = default_approval_settings().model_dump(mode="json")
        data["version"] = 2
        assert load_approval_settings(data) == default_approval_settings()

    def test_missing_workflow_discards_everything(self):
        data = default_approval_settings().model_dump(mode="json")
        data["workflows"]["PTO"]["mode"] = "LIST"
        del data["workflows"]["EXPENSE"]
        assert load_approval_settings(data) == default_approval_settings()

    def test_not_a_mapping(self):
        assert load_approval_settings("HIERARCHY") == default_approval_settings()

    def test_valid_settings_kept(self):
        data = default_approval_settings().model_dump(mode="json")
        data["workflows"]["EXPENSE"] = {"mode": "LIST", "criteria_order": ["HR_ADMIN"], "approver_list": [7, 8]}

        loaded = load_approval_settings(data)

        expense = loaded.workflows.for_request_type(ApprovalRequestType.EXPENSE)
        assert expense.mode == ApprovalMode.LIST
        assert expense.approver_list == [7, 8]


@pytest.mark.asyncio
class TestApprovalSettingsService:
    """Reading and updating organization settings"""

    async def test_settings_response_for_unconfigured_org(self, session, factory):
        org = await factory.organization()

        response = await ApprovalSettingsService(session).get_settings_response(org.id)

        assert response.settings == default_approval_settings()
        assert response.group_hr_approvals_enabled is True

    async def test_unknown_organization(self, session):
        with pytest.raises(NotFoundError):
            await ApprovalSettingsService(session).get_settings_response(404)

    async def test_update_persists_settings(self, session, factory):
        org = await factory.organization()
        admin = await factory.user(org, role=UserRole.ORG_ADMIN)
        new_settings = default_approval_settings()
        new_settings.workflows.PTO.criteria_order = [ApprovalCriterion.HR_ADMIN]

        service = ApprovalSettingsService(session)
        await service.update_approval_settings(
            org.id, ApprovalSettingsUpdate(settings=new_settings), updated_by=admin.id
        )
        workflow = await service.get_workflow_config(org.id, ApprovalRequestType.PTO)

        assert workflow.criteria_order == [ApprovalCriterion.HR_ADMIN]

    async def test_disabling_group_hr_strips_group_entries(self, session, factory):
        org = await factory.organization("Subsidiary")
        sibling = await factory.organization("Sibling")
        group = await factory.group(org, sibling)
        group_hr = await factory.user(sibling, role=UserRole.HR_ADMIN)
        await factory.group_user(group, group_hr)
        local = await factory.user(org)

        data = default_approval_settings().model_dump(mode="json")
        data["workflows"]["PTO"] = {
            "mode": "LIST",
            "criteria_order": ["GROUP_HR"],
            "approver_list": [group_hr.id, local.id],
        }
        data["workflows"]["EXPENSE"]["criteria_order"] = ["DIRECT_MANAGER", "GROUP_HR", "HR_ADMIN"]
        update = ApprovalSettingsUpdate(
            settings=ApprovalSettingsSchema.model_validate(data),
            group_hr_approvals_enabled=False,
        )

        response = await ApprovalSettingsService(session).update_approval_settings(org.id, update)

        pto = response.settings.workflows.PTO
        assert pto.approver_list == [local.id]
        assert pto.criteria_order == DEFAULT_CRITERIA_ORDER
        assert response.settings.workflows.EXPENSE.criteria_order == [
            ApprovalCriterion.DIRECT_MANAGER,
            ApprovalCriterion.HR_ADMIN,
        ]
        assert response.group_hr_approvals_enabled is False

    async def test_group_entries_kept_while_enabled(self, session, factory):
        org = await factory.organization()
        data = default_approval_settings().model_dump(mode="json")
        data["workflows"]["PTO"]["criteria_order"] = ["GROUP_HR"]
        update = ApprovalSettingsUpdate(settings=ApprovalSettingsSchema.model_validate(data))

        response = await ApprovalSettingsService(session).update_approval_settings(org.id, update)

        assert response.settings.workflows.PTO.criteria_order == [ApprovalCriterion.GROUP_HR]
        assert response.group_hr_approvals_enabled is True
