from enum import Enum


class TableNames(str, Enum):
    USERS = "users"
    EVENTS = "events"
    EVENT_GUESTS = "event_guests"
    WISHLIST = "wishlist"
