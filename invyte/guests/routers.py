from fastapi import APIRouter

from .features.get_rsvp_status.router import router as get_rsvp_status_router
from .features.respond_to_invitation.router import router as respond_to_invitation_router
from .features.update_guestlist.router import router as update_guestlist_router

router = APIRouter()

router.include_router(get_rsvp_status_router)
router.include_router(respond_to_invitation_router)
router.include_router(update_guestlist_router)
