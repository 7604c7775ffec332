# File: freshlink/api/v1/routes_auth.py

"""
Auth API routes.

Both endpoints answer with the same payload: who signed in and where the
frontend should send them next.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from freshlink.api.deps import get_profile_store, get_user_store
from freshlink.db.profile_store import ProfileStore
from freshlink.db.user_store import UserStore
from freshlink.schemas.user import AuthenticatedUser, AuthResponse, LoginPayload, SignupPayload
from freshlink.services.auth_service import (
    AuthenticationError,
    DuplicateUserError,
    RegistrationError,
    authenticate_user,
    register_user,
)

router = APIRouter()


def _auth_response(user: AuthenticatedUser, greeting: str) -> AuthResponse:
    return AuthResponse(
        message=f"{greeting}, {user.display_name}!",
        role=user.role,
        user_id=user.id,
        display_name=user.display_name,
        redirect_to=f"/{user.role.value}/dashboard?user={user.id}",
    )


@router.post("/login", response_model=AuthResponse, summary="User login")
def login(
    payload: LoginPayload,
    users: UserStore = Depends(get_user_store),
    profiles: ProfileStore = Depends(get_profile_store),
):
    """
    Check credentials for the requested role and provision the role's
    profile on first login.
    """
    try:
        user = authenticate_user(users, profiles, payload)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    return _auth_response(user, "Welcome back")


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="User registration",
)
def signup(
    payload: SignupPayload,
    users: UserStore = Depends(get_user_store),
    profiles: ProfileStore = Depends(get_profile_store),
):
    try:
        user = register_user(users, profiles, payload)
    except DuplicateUserError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except RegistrationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return _auth_response(user, "Welcome aboard")
