# File: freshlink/services/auth_service.py

"""
Authentication service.

  - User lookup (case-insensitive email)
  - Plaintext password check (demo accounts only)
  - Profile provisioning for the account's role on login / signup
"""

import logging

from freshlink.db.profile_store import ProfileStore
from freshlink.db.user_store import DuplicateUserError, UserStore
from freshlink.schemas.user import (
    AuthenticatedUser,
    LoginPayload,
    Role,
    SignupPayload,
    UserRecord,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class AuthenticationError(Exception):
    pass


class RegistrationError(Exception):
    pass


def _provision_profile(profiles: ProfileStore, user: UserRecord) -> None:
    if user.role == Role.BUYER:
        profiles.ensure_buyer_profile_for_user(user.id, user.display_name)
    else:
        profiles.ensure_seller_profile_for_user(user.id, user.display_name)


def _public(user: UserRecord) -> AuthenticatedUser:
    return AuthenticatedUser(id=user.id, display_name=user.display_name, role=user.role)


def authenticate_user(
    users: UserStore,
    profiles: ProfileStore,
    payload: LoginPayload,
) -> AuthenticatedUser:
    if not payload.email or not payload.password:
        raise AuthenticationError("Email and password are required.")

    try:
        role = Role(payload.role)
    except ValueError:
        raise AuthenticationError("Unsupported account role.")

    user = users.find_user_by_email(payload.email)
    if user is None or user.role != role:
        raise AuthenticationError("No account matches those credentials.")

    if user.password != payload.password:
        logger.info("[auth] Rejected password for %s", user.id)
        raise AuthenticationError("Incorrect password.")

    _provision_profile(profiles, user)
    return _public(user)


def register_user(
    users: UserStore,
    profiles: ProfileStore,
    payload: SignupPayload,
) -> AuthenticatedUser:
    """
    Create an account and its profile.

    Raises DuplicateUserError when the email is already registered and
    RegistrationError for anything else the caller must fix.
    """
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise RegistrationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
        )

    user = users.create_user(
        str(payload.email),
        payload.password,
        payload.role,
        display_name=payload.display_name,
    )
    _provision_profile(profiles, user)
    return _public(user)


__all__ = [
    "AuthenticationError",
    "DuplicateUserError",
    "RegistrationError",
    "authenticate_user",
    "register_user",
]
