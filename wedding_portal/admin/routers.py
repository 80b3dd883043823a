from fastapi import APIRouter

from .features.create_invitation.router import router as create_invitation_router
from .features.manage.router import router as manage_router
from .features.reports.router import router as reports_router

router = APIRouter()

router.include_router(create_invitation_router)
router.include_router(reports_router)
router.include_router(manage_router)
