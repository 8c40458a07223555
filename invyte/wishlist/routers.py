from fastapi import APIRouter

from .features.event_wishlist.router import router as event_wishlist_router
from .features.personal_wishlist.router import router as personal_wishlist_router

router = APIRouter()

router.include_router(event_wishlist_router)
router.include_router(personal_wishlist_router)
