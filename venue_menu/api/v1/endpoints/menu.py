"""
Public menu endpoint (no authentication):
  GET /menu/{venue_id}/public  – Guest view of an active venue's menu
"""
from fastapi import APIRouter, Depends
import logging

from venue_menu.core.dependencies import db_dependency
from venue_menu.schemas.menu import PublicMenuResponse
from venue_menu.services.menu_service import MenuService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/menu", tags=["Public menu"])


@router.get(
    "/{venue_id}/public",
    response_model=PublicMenuResponse,
    summary="Public menu of a venue",
)
def get_public_menu(
    venue_id: int,
    conn=Depends(db_dependency),
):
    """
    Return the category tree of an active venue with guest-facing fields
    only. Unknown and inactive venues answer 404.
    """
    logger.info("Public menu requested venue_id=%s", venue_id)
    return {"menu": MenuService(conn).get_public_menu(venue_id)}
