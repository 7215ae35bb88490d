from fastapi import APIRouter

from app.api.v1.health import router as health_router
from app.api.v1.auth import router as auth_router
from app.api.v1.quotations import router as quotations_router
from app.api.v1.proposals import router as proposals_router


# mounted under settings.api_prefix
v1_router = APIRouter()

# ------------------------------------------------------------------
# SYSTEM / AUTH
# ------------------------------------------------------------------
v1_router.include_router(health_router, tags=["health"])
v1_router.include_router(auth_router, tags=["auth"])

# ------------------------------------------------------------------
# OWNER-SCOPED QUOTATIONS
# ------------------------------------------------------------------
v1_router.include_router(quotations_router, tags=["quotations"])


# mounted at the application root: public links are /proposal/{proposalId}
public_router = APIRouter()
public_router.include_router(proposals_router, tags=["public"])
