"""Every ORM module, imported so that ``BaseModel.metadata`` knows all tables.

Alembic and the test suite import this module before touching the schema.
"""

from invyte.events.repository.orm_models import Event
from invyte.guests.repository.orm_models import Guest
from invyte.models.base import BaseModel
from invyte.models.user import User
from invyte.wishlist.repository.orm_models import WishlistItem

metadata = BaseModel.metadata

__all__ = [
    "metadata",
    "User",
    "Event",
    "Guest",
    "WishlistItem",
]
