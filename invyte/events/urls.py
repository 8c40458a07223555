EVENTS_URL = "/api/v1/events"
EVENT_URL = "/api/v1/events/{event_id}"
