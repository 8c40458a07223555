UPDATE_GUESTLIST_URL = "/api/v1/events/{event_id}/guestlist"
RESPOND_URL = "/api/v1/events/{event_id}/respond"
RSVP_STATUS_URL = "/api/v1/events/{event_id}/rsvp-status"
