"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from atelier.presentation.api.v1.endpoints.health import router as health_router
from atelier.presentation.api.v1.endpoints.auth import router as auth_router
from atelier.presentation.api.v1.endpoints.projects import router as projects_router
from atelier.presentation.api.v1.endpoints.availability import router as availability_router
from atelier.presentation.api.v1.endpoints.staff import router as staff_router
from atelier.presentation.api.v1.endpoints.approvals import router as approvals_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(auth_router)
router.include_router(projects_router)
router.include_router(availability_router)
router.include_router(staff_router)
router.include_router(approvals_router)
