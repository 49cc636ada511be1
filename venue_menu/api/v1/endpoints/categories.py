"""
Menu category endpoints (venue manager or admin):
  GET    /menu/categories?venue_id=     – Category tree of a venue
  POST   /menu/categories               – Create a category
  PUT    /menu/categories/reorder       – Reorder one sibling group
  GET    /menu/categories/{id}          – Category with its items
  PUT    /menu/categories/{id}          – Update name/description/parent
  DELETE /menu/categories/{id}          – Delete (strategy=cascade|move)
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
from venue_menu.schemas.category import (
    CategoryCreateRequest,
    CategoryResponse,
    CategoryTreeListResponse,
    CategoryUpdate,
    CategoryWithItemsResponse,
    DeleteStrategy,
    ReorderCategoriesRequest,
)
from venue_menu.services.category_service import CategoryService
from venue_menu.services.menu_service import MenuService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/menu/categories", tags=["Menu categories"])


def _authorize(conn, user: User, service: CategoryService, category_id: int) -> None:
    category = service.get_category(category_id)
    ensure_can_manage_record(conn, user, category.venue_id, "Category", category_id)


@router.get(
    "",
    response_model=CategoryTreeListResponse,
    summary="Category tree of a venue",
)
def list_categories(
    venue_id: int = Query(..., gt=0),
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    """Return the venue's category forest with items, in display order."""
    logger.info("Listing category tree venue_id=%s", venue_id)
    ensure_can_manage(conn, current_user, venue_id)
    return {"categories": MenuService(conn).get_categories_tree(venue_id)}


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
def create_category(
    data: CategoryCreateRequest,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    """Append a new category at the end of its sibling group."""
    logger.info("Creating category %s venue_id=%s", data.name, data.venue_id)
    ensure_can_manage(conn, current_user, data.venue_id)
    return CategoryService(conn).create_category(data.venue_id, data)


@router.put(
    "/reorder",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Reorder one category sibling group",
)
def reorder_categories(
    data: ReorderCategoriesRequest,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    """
    ``ordered_ids`` must be the complete list of one sibling group;
    each category gets its list index as display order.
    """
    logger.info("Reordering categories venue_id=%s", data.venue_id)
    ensure_can_manage(conn, current_user, data.venue_id)
    CategoryService(conn).reorder_categories(data.venue_id, data.ordered_ids)


@router.get(
    "/{category_id}",
    response_model=CategoryWithItemsResponse,
    summary="Get a category with its items",
)
def get_category(
    category_id: int,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    logger.info("Fetching category id=%s", category_id)
    service = CategoryService(conn)
    _authorize(conn, current_user, service, category_id)
    return service.get_category_by_id(category_id)


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Update a category",
)
def update_category(
    category_id: int,
    data: CategoryUpdate,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    """
    Update name, description or parent. Sending ``parent_id: null`` moves
    the category to the root; a parent inside the category's own subtree
    is rejected.
    """
    logger.info("Updating category id=%s", category_id)
    service = CategoryService(conn)
    _authorize(conn, current_user, service, category_id)
    return service.update_category(category_id, data)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
)
def delete_category(
    category_id: int,
    strategy: DeleteStrategy = Query(DeleteStrategy.CASCADE),
    target_category_id: Optional[int] = Query(None, gt=0),
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    """
    ``cascade`` deletes sub-categories and items with the category;
    ``move`` re-homes them under ``target_category_id`` first.
    The last category of a venue cannot be deleted.
    """
    logger.info("Deleting category id=%s strategy=%s", category_id, strategy.value)
    service = CategoryService(conn)
    _authorize(conn, current_user, service, category_id)
    service.delete_category(category_id, strategy, target_category_id)
