"""
Authentication endpoints:
  POST /auth/login    – OAuth2 password flow (username or email)
  POST /auth/refresh  – Trade a refresh token for a new token pair
  POST /auth/logout   – Revoke a refresh token
  GET  /auth/me       – Current account and the venues it manages
"""
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
import logging

from venue_menu.core.dependencies import db_dependency, get_current_active_user
from venue_menu.models.user import User
from venue_menu.schemas.auth import ProfileResponse, RefreshRequest, TokenPair
from venue_menu.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenPair, summary="Log in")
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    conn=Depends(db_dependency),
):
    return AuthService(conn).login(form_data.username, form_data.password)


@router.post("/refresh", response_model=TokenPair, summary="Rotate a refresh token")
def refresh(body: RefreshRequest, conn=Depends(db_dependency)):
    """The presented refresh token is revoked; use the returned one next time."""
    return AuthService(conn).refresh(body.refresh_token)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke a refresh token",
)
def logout(
    body: RefreshRequest,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    logger.info("Logout for user id=%s", current_user.id)
    AuthService(conn).logout(body.refresh_token)


@router.get("/me", response_model=ProfileResponse, summary="Current account")
def me(
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_active_user),
):
    return AuthService(conn).profile(current_user)
