"""
Conversions between request/response schemas and the User model.
"""
import logging
from typing import Any, Optional
from pydantic import ValidationError

from .models import User
from .schemas import LoginRequest, UserRequest, UserResponse

# Set up logging
logger = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace; blank strings count as missing."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def canonical_email(email: Optional[str]) -> Optional[str]:
    """Emails are stored and matched in lower case."""
    email = _clean(email)
    return email.lower() if email else None


def parse_login_request(payload: Any) -> Optional[LoginRequest]:
    """
    Parse a login payload.

    Args:
        payload: LoginRequest, mapping, or None

    Returns:
        The parsed request, or None if it is absent or malformed
    """
    if payload is None:
        return None
    if isinstance(payload, LoginRequest):
        return payload
    try:
        return LoginRequest.model_validate(payload)
    except ValidationError:
        logger.info("Malformed login request")
        return None


def parse_user_request(payload: Any) -> Optional[UserRequest]:
    """
    Parse a registration payload.

    Args:
        payload: UserRequest, another pydantic model, mapping, or None

    Returns:
        The parsed request, or None if it is absent or malformed
    """
    if payload is None:
        return None
    if isinstance(payload, UserRequest):
        return payload
    if hasattr(payload, "model_dump"):
        payload = payload.model_dump()
    try:
        return UserRequest.model_validate(payload)
    except ValidationError as e:
        logger.info(f"Malformed registration request: {e.error_count()} errors")
        return None


def from_user_request(payload: Any) -> Optional[User]:
    """
    Build an unsaved User from a registration payload.

    Authorities, timestamps and flags are left for the service to assign.

    Args:
        payload: Registration payload

    Returns:
        User with the request's fields, or None if the payload cannot be mapped
    """
    request = parse_user_request(payload)
    if request is None:
        return None

    return User(
        email=canonical_email(request.email),
        password=request.password,
        full_name=_clean(request.full_name),
        date_of_birth=request.date_of_birth,
        city=_clean(request.city),
        province=_clean(request.province),
        country=_clean(request.country),
        phone_number=_clean(request.phone_number),
        registration_number=_clean(request.registration_number),
    )


def to_user_response(user: User) -> UserResponse:
    """Public projection of a user."""
    return UserResponse.model_validate(user)
