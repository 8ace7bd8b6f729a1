from fastapi import APIRouter
from hr_approvals.api.v1.endpoints.approval import approvals

api_router = APIRouter()

# Approval routes
api_router.include_router(approvals.router, prefix="/approvals", tags=["Approvals"])
