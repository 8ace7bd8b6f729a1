from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from hr_approvals.core.config import settings
from hr_approvals.core.logging_config import setup_logging
from hr_approvals.api.v1.api import api_router
from hr_approvals.middleware.logging import AccessLogMiddleware
import hr_approvals.models  # noqa: F401  registers every mapper


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    yield


app_config = {
    "title": "HR Approvals",
    "description": "Decides who may approve PTO, time-entry, time-bank and expense requests",
    "version": "1.0.0",
    "debug": settings.DEBUG,
    "lifespan": lifespan,
}

app = FastAPI(**app_config)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)
app.add_middleware(AccessLogMiddleware)

# Include routers
app.include_router(api_router, prefix="/api/v1")

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
    }
