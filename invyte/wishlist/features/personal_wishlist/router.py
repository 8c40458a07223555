from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from invyte.auth.dependencies import CurrentIdentity, get_current_identity
from invyte.errors import InvyteError, to_http_exception
from invyte.wishlist.repository.read_models import SqlWishlistReadModel, WishlistReadModel
from invyte.wishlist.repository.write_models import SqlWishlistWriteModel, WishlistWriteModel
from invyte.wishlist.schemas import (
    PersonalWishlistItemResponse,
    WishlistItemResponse,
    WishlistItemSubmit,
)
from invyte.wishlist.urls import PERSONAL_WISHLIST_ITEM_URL, PERSONAL_WISHLIST_URL

router = APIRouter()


class PersonalItemsSubmit(BaseModel):
    items: list[WishlistItemSubmit]


class PersonalItemUpdate(BaseModel):
    name: str | None = None
    url: str | None = None
    image_url: str | None = None


class PersonalWishlistResponse(BaseModel):
    items: list[PersonalWishlistItemResponse]


class AddedItemsResponse(BaseModel):
    message: str
    items: list[WishlistItemResponse]


def get_wishlist_read_model() -> WishlistReadModel:
    """Dependency to get wishlist read model instance."""
    return SqlWishlistReadModel()


def get_wishlist_write_model() -> WishlistWriteModel:
    """Dependency to get wishlist write model instance."""
    return SqlWishlistWriteModel()


@router.get(PERSONAL_WISHLIST_URL, response_model=PersonalWishlistResponse)
async def get_personal_wishlist(
    identity: CurrentIdentity = Depends(get_current_identity),
    read_model: WishlistReadModel = Depends(get_wishlist_read_model),
) -> PersonalWishlistResponse:
    """
    Get the caller's personal wishlist, unclaimed items first.
    """
    entries = await read_model.get_personal_wishlist(identity.user_id)
    return PersonalWishlistResponse(
        items=[PersonalWishlistItemResponse.from_personal_dto(entry) for entry in entries]
    )


@router.post(
    PERSONAL_WISHLIST_URL,
    response_model=AddedItemsResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_personal_items(
    request: PersonalItemsSubmit,
    identity: CurrentIdentity = Depends(get_current_identity),
    write_model: WishlistWriteModel = Depends(get_wishlist_write_model),
) -> AddedItemsResponse:
    items = await write_model.add_personal_items(
        identity.user_id, [item.to_dto() for item in request.items]
    )
    return AddedItemsResponse(
        message=f"{len(items)} items added to your wishlist",
        items=[WishlistItemResponse.from_dto(item) for item in items],
    )


@router.put(PERSONAL_WISHLIST_ITEM_URL, response_model=WishlistItemResponse)
async def update_personal_item(
    item_id: UUID,
    request: PersonalItemUpdate,
    identity: CurrentIdentity = Depends(get_current_identity),
    write_model: WishlistWriteModel = Depends(get_wishlist_write_model),
) -> WishlistItemResponse:
    try:
        item = await write_model.update_personal_item(
            identity.user_id,
            item_id,
            name=request.name,
            url=request.url,
            image_url=request.image_url,
        )
    except InvyteError as e:
        raise to_http_exception(e)
    return WishlistItemResponse.from_dto(item)


@router.delete(PERSONAL_WISHLIST_ITEM_URL, status_code=status.HTTP_204_NO_CONTENT)
async def delete_personal_item(
    item_id: UUID,
    identity: CurrentIdentity = Depends(get_current_identity),
    write_model: WishlistWriteModel = Depends(get_wishlist_write_model),
) -> None:
    try:
        await write_model.delete_personal_item(identity.user_id, item_id)
    except InvyteError as e:
        raise to_http_exception(e)
