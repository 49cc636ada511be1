"""
Menu item endpoints (venue manager or admin):
  GET    /menu/items?venue_id=&category_id=  – List items of a venue
  POST   /menu/items                         – Create an item
  PUT    /menu/items/reorder                 – Reorder the items of a category
  GET    /menu/items/{id}                    – Get an item
  PUT    /menu/items/{id}                    – Update (or move) an item
  PATCH  /menu/items/{id}                    – Toggle availability
  DELETE /menu/items/{id}                    – Delete an item
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
import logging

from venue_menu.core.dependencies import (
    db_dependency,
    ensure_can_manage,
    ensure_can_manage_record,
    get_current_active_user,
)
from venue_menu.models.user import User
from venue_menu.schemas.item import (
    ItemCreateRequest,
    ItemResponse,
    ItemUpdate,
    ReorderItemsRequest,
)
from venue_menu.services.category_service import CategoryService
from venue_menu.services.item_service import ItemService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/menu/items", tags=["Menu items"])


def _authorize_category(conn, user: User, category_id: int) -> None:
    category = CategoryService(conn).get_category(category_id)
    ensure_can_manage_record(conn, user, category.venue_id, "Category", category_id)


def _authorize_item(conn, user: User, service: ItemService, item_id: int) -> None:
    category = CategoryService(conn).get_category(service.get_item(item_id).category_id)
    ensure_can_manage_record(conn, user, category.venue_id, "Item", item_id)


@router.get(
    "",
    response_model=list[ItemResponse],
    summary="List items of a venue",
)
def list_items(
    venue_id: int = Query(..., gt=0),
    category_id: Optional[int] = Query(None, gt=0, description="Filter by category ID"),
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    logger.info("Listing items venue_id=%s category_id=%s", venue_id, category_id)
    ensure_can_manage(conn, current_user, venue_id)
    return ItemService(conn).list_items(venue_id, category_id=category_id)


@router.post(
    "",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an item",
)
def create_item(
    data: ItemCreateRequest,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    """Append a new item at the end of its category."""
    logger.info("Creating item %s category_id=%s", data.name, data.category_id)
    _authorize_category(conn, current_user, data.category_id)
    return ItemService(conn).create_item(data.category_id, data)


@router.put(
    "/reorder",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Reorder the items of a category",
)
def reorder_items(
    data: ReorderItemsRequest,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    logger.info("Reordering items category_id=%s", data.category_id)
    _authorize_category(conn, current_user, data.category_id)
    ItemService(conn).reorder_items(data.category_id, data.ordered_ids)


@router.get(
    "/{item_id}",
    response_model=ItemResponse,
    summary="Get an item",
)
def get_item(
    item_id: int,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    logger.info("Fetching item id=%s", item_id)
    service = ItemService(conn)
    _authorize_item(conn, current_user, service, item_id)
    return service.get_item(item_id)


@router.put(
    "/{item_id}",
    response_model=ItemResponse,
    summary="Update an item",
)
def update_item(
    item_id: int,
    data: ItemUpdate,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    """
    Update an item's details. Changing ``category_id`` appends the item to
    the end of the new category.
    """
    logger.info("Updating item id=%s", item_id)
    service = ItemService(conn)
    _authorize_item(conn, current_user, service, item_id)
    return service.update_item(item_id, data)


@router.patch(
    "/{item_id}",
    response_model=ItemResponse,
    summary="Toggle item availability",
)
def toggle_item_availability(
    item_id: int,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    logger.info("Toggling availability item id=%s", item_id)
    service = ItemService(conn)
    _authorize_item(conn, current_user, service, item_id)
    return service.toggle_item_availability(item_id)


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an item",
)
def delete_item(
    item_id: int,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    logger.info("Deleting item id=%s", item_id)
    service = ItemService(conn)
    _authorize_item(conn, current_user, service, item_id)
    service.delete_item(item_id)
