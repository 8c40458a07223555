from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from invyte.auth.dependencies import CurrentIdentity, get_current_identity
from invyte.errors import InvyteError, to_http_exception
from invyte.wishlist.repository.read_models import SqlWishlistReadModel, WishlistReadModel
from invyte.wishlist.repository.write_models import SqlWishlistWriteModel, WishlistWriteModel
from invyte.wishlist.schemas import WishlistItemResponse, WishlistItemSubmit
from invyte.wishlist.urls import EVENT_WISHLIST_URL, SHARE_TO_EVENT_URL

router = APIRouter()


class AddItemsSubmit(BaseModel):
    items: list[WishlistItemSubmit]


class ShareItemsSubmit(BaseModel):
    item_ids: list[UUID]


class EventWishlistResponse(BaseModel):
    event_id: UUID
    items: list[WishlistItemResponse]


def get_event_wishlist_read_model() -> WishlistReadModel:
    """Dependency to get wishlist read model instance."""
    return SqlWishlistReadModel()


def get_event_wishlist_write_model() -> WishlistWriteModel:
    """Dependency to get wishlist write model instance."""
    return SqlWishlistWriteModel()


@router.get(EVENT_WISHLIST_URL, response_model=EventWishlistResponse)
async def get_event_wishlist(
    event_id: UUID,
    identity: CurrentIdentity = Depends(get_current_identity),
    read_model: WishlistReadModel = Depends(get_event_wishlist_read_model),
) -> EventWishlistResponse:
    """
    Get the wishlist of an event in the order the items were added.
    """
    items = await read_model.list_for_event(event_id)
    return EventWishlistResponse(
        event_id=event_id,
        items=[WishlistItemResponse.from_dto(item) for item in items],
    )


@router.post(EVENT_WISHLIST_URL, response_model=EventWishlistResponse, status_code=status.HTTP_201_CREATED)
async def add_event_wishlist_items(
    event_id: UUID,
    request: AddItemsSubmit,
    identity: CurrentIdentity = Depends(get_current_identity),
    write_model: WishlistWriteModel = Depends(get_event_wishlist_write_model),
) -> EventWishlistResponse:
    """
    Append new gifts to an event's wishlist. Only the host may add items;
    the existing items are left as they are.
    """
    try:
        items = await write_model.add_items_to_event(
            event_id, identity.user_id, [item.to_dto() for item in request.items]
        )
    except InvyteError as e:
        raise to_http_exception(e)
    return EventWishlistResponse(
        event_id=event_id,
        items=[WishlistItemResponse.from_dto(item) for item in items],
    )


@router.post(SHARE_TO_EVENT_URL, response_model=EventWishlistResponse)
async def share_personal_items(
    event_id: UUID,
    request: ShareItemsSubmit,
    identity: CurrentIdentity = Depends(get_current_identity),
    write_model: WishlistWriteModel = Depends(get_event_wishlist_write_model),
) -> EventWishlistResponse:
    """
    Copy items from the host's personal wishlist into the event's wishlist.
    Items the event already has, by name, are not added twice.
    """
    try:
        items = await write_model.share_personal_items_to_event(
            identity.user_id, event_id, request.item_ids
        )
    except InvyteError as e:
        raise to_http_exception(e)
    return EventWishlistResponse(
        event_id=event_id,
        items=[WishlistItemResponse.from_dto(item) for item in items],
    )
