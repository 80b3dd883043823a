from fastapi import APIRouter

from .features.add_plus_one.router import router as add_plus_one_router
from .features.dashboard.router import router as dashboard_router
from .features.get_guest_info.router import router as get_guest_info_router
from .features.rsvp_form.router import router as rsvp_form_router
from .features.submit_rsvp.router import router as submit_rsvp_router
from .features.travel_details.router import router as travel_details_router
from .features.update_rsvp.router import router as update_rsvp_router

router = APIRouter()

router.include_router(get_guest_info_router)
router.include_router(rsvp_form_router)
router.include_router(submit_rsvp_router)
router.include_router(add_plus_one_router)
router.include_router(update_rsvp_router)
router.include_router(travel_details_router)
router.include_router(dashboard_router)
