"""
Venue endpoints:
  GET  /venues          – Venues the caller manages (all for admins)
  POST /venues          – Create a venue (admin only)
  GET  /venues/{id}     – Venue details (manager of the venue or admin)
"""
from fastapi import APIRouter, Depends, status
import logging

from venue_menu.core.dependencies import (
    db_dependency,
    ensure_can_manage,
    get_current_active_user,
    require_admin,
)
from venue_menu.models.user import User
from venue_menu.schemas.venue import VenueCreate, VenueResponse
from venue_menu.services.venue_service import VenueService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/venues", tags=["Venues"])


@router.get(
    "",
    response_model=list[VenueResponse],
    summary="List venues",
)
def list_venues(
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    logger.info("Listing venues for user id=%s", current_user.id)
    return VenueService(conn).list_venues_for(current_user)


@router.post(
    "",
    response_model=VenueResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a venue",
)
def create_venue(
    data: VenueCreate,
    conn=Depends(db_dependency),
    _: User = Depends(require_admin),
):
    logger.info("Creating venue %s", data.name)
    return VenueService(conn).create_venue(data)


@router.get(
    "/{venue_id}",
    response_model=VenueResponse,
    summary="Get a venue",
)
def get_venue(
    venue_id: int,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    logger.info("Fetching venue id=%s", venue_id)
    return ensure_can_manage(conn, current_user, venue_id)
