EVENT_WISHLIST_URL = "/api/v1/events/{event_id}/wishlist"
SHARE_TO_EVENT_URL = "/api/v1/events/{event_id}/wishlist/share"
PERSONAL_WISHLIST_URL = "/api/v1/wishlist"
PERSONAL_WISHLIST_ITEM_URL = "/api/v1/wishlist/{item_id}"
