from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Cookie, Response
from sqlalchemy.orm import Session

from inkwell.core.database import get_db
from inkwell.auth.models import User
from inkwell.auth.schemas import UserCreate, UserOut, LoginRequest, TokenResponse
from inkwell.auth.service import (
    handle_login,
    handle_signup,
    handle_token_refresh,
    get_current_user,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Auth"])


def set_refresh_cookie(response: Response, refresh_token: str):
    response.set_cookie(
        key="refresh_token",
        value=refresh_token,
        httponly=True,
        secure=True,
        samesite="none",
        path="/",
    )


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login and receive access/refresh tokens",
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid credentials"},
        500: {"description": "Server error"},
    },
)
def login_route(
    user: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> TokenResponse:
    try:
        token_response, refresh_token = handle_login(user, db)
        set_refresh_cookie(response, refresh_token)
        return token_response
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Login failed: {e}")
        raise HTTPException(status_code=500, detail="Login failed")


@router.post(
    "/signup",
    response_model=TokenResponse,
    status_code=201,
    summary="Register a new user",
    responses={
        201: {"description": "User created successfully"},
        400: {"description": "User already exists or validation error"},
        500: {"description": "Signup failed"},
    },
)
def signup_route(
    user: UserCreate,
    response: Response,
    db: Session = Depends(get_db),
) -> TokenResponse:
    try:
        token_response, refresh_token = handle_signup(user, db)
        set_refresh_cookie(response, refresh_token)
        return token_response
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Signup failed: {e}")
        raise HTTPException(status_code=500, detail="Signup failed")


@router.get(
    "/me",
    response_model=UserOut,
    summary="Get current user profile",
    responses={
        200: {"description": "User profile returned"},
        401: {"description": "Unauthorized"},
    },
)
def get_profile_route(user: User = Depends(get_current_user)) -> UserOut:
    return UserOut.model_validate(user)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh access token using refresh token",
    responses={
        200: {"description": "Access token refreshed"},
        401: {"description": "No or invalid refresh token"},
        500: {"description": "Token refresh failed"},
    },
)
def refresh_token_route(
    response: Response,
    refresh_token: Optional[str] = Cookie(None),
    db: Session = Depends(get_db),
) -> TokenResponse:
    if not refresh_token:
        raise HTTPException(status_code=401, detail="No refresh token found")

    try:
        token_response, new_refresh_token = handle_token_refresh(refresh_token, db)
        set_refresh_cookie(response, new_refresh_token)
        return token_response
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Token refresh failed: {e}")
        raise HTTPException(status_code=500, detail="Token refresh failed")


@router.post(
    "/logout",
    summary="Log out the user and clear refresh token cookie",
    responses={
        200: {"description": "User logged out successfully"},
    },
)
def logout_route(response: Response) -> dict:
    response.delete_cookie(
        key="refresh_token",
        path="/",  # should match the path used when setting the cookie
        samesite="none",
        secure=True,
        httponly=True,
    )
    return {"detail": "Logged out"}
