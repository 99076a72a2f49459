"""
Authentication routes for the medical assistance system.
"""
from fastapi import APIRouter, Body, Depends, Query, Response, status
import enum
import logging
from typing import Any, Optional

from ..core.security import generate_temporary_password
from .dependencies import get_auth_service, get_current_user, require_admin
from .exceptions import InvalidUserRequestException
from .mapper import to_user_response
from .models import User, UserRole
from .schemas import (
    AdminCreatedUserResponse, AdminUserRequest, LoginResponse, PasswordResetTokenStatus,
    UpdatePasswordRequest, UpdatePasswordResponse, UserRequest, UserResponse
)
from .service import AuthService

# Set up logging
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


class RolePath(str, enum.Enum):
    """URL segment naming the role a login or sign-up is for."""
    patient = "patient"
    counselor = "counselor"
    doctor = "doctor"
    admin = "admin"

    @property
    def role(self) -> UserRole:
        return UserRole(self.value.upper())


class SignUpRolePath(str, enum.Enum):
    """Roles open to self-registration."""
    patient = "patient"
    counselor = "counselor"
    doctor = "doctor"

    @property
    def role(self) -> UserRole:
        return UserRole(self.value.upper())


class ManagedRolePath(str, enum.Enum):
    """Roles an admin can create accounts for."""
    counselor = "counselor"
    doctor = "doctor"

    @property
    def role(self) -> UserRole:
        return UserRole(self.value.upper())


# ============================================================================
# LOGIN & REGISTRATION
# ============================================================================

@router.post("/{role}/login", response_model=LoginResponse, summary="Role-Scoped Login")
def login_route(
    role: RolePath,
    response: Response,
    payload: Any = Body(None),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Login endpoint.

    The raw body is handed to the service so that malformed payloads get the
    same generic failure as wrong credentials.

    Args:
        role: Role the user is logging in as
        response: Response used to set the failure status code
        payload: Login body with email and password
        auth_service: Authentication service

    Returns:
        LoginResponse with access token on success, error message on failure
    """
    result = auth_service.login(payload, role.role)
    if not result.login_success:
        response.status_code = status.HTTP_401_UNAUTHORIZED
    return result

@router.post("/{role}/signup", response_model=LoginResponse, status_code=status.HTTP_201_CREATED, summary="Self-Registration")
def sign_up_route(
    role: SignUpRolePath,
    response: Response,
    payload: Any = Body(None),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Registration endpoint for patients, counselors and doctors.

    Args:
        role: Role the new account is registered as
        response: Response used to set the failure status code
        payload: Registration body
        auth_service: Authentication service

    Returns:
        LoginResponse with access token on success, error message on failure
    """
    result = auth_service.sign_up(payload, role.role)
    if not result.login_success:
        response.status_code = status.HTTP_400_BAD_REQUEST
    return result

# ============================================================================
# PASSWORD MANAGEMENT
# ============================================================================

@router.put("/password", response_model=UpdatePasswordResponse, summary="Authenticated User Changes Password")
def update_password_route(
    payload: Optional[UpdatePasswordRequest] = Body(None),
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Change the current user's password.

    Raises:
        InvalidUserRequestException: If the password is missing or unchanged (400)
    """
    return auth_service.update_password(payload, current_user)

@router.get("/password-reset/validate", response_model=PasswordResetTokenStatus, summary="Check Password Reset Token")
def validate_password_reset_token_route(
    token: str = Query(...),
    auth_service: AuthService = Depends(get_auth_service)
):
    return PasswordResetTokenStatus(valid=auth_service.validate_password_reset_token(token))

# ============================================================================
# ACCOUNT ROUTES
# ============================================================================

@router.get("/me", response_model=UserResponse, summary="Get Current User Profile")
def me_route(current_user: User = Depends(get_current_user)):
    return to_user_response(current_user)

@router.post("/admin/users/{role}", response_model=AdminCreatedUserResponse, status_code=status.HTTP_201_CREATED, summary="Admin Creates Counselor or Doctor Account")
def admin_create_user_route(
    role: ManagedRolePath,
    payload: AdminUserRequest,
    admin_user: User = Depends(require_admin),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Create a counselor or doctor account with a generated password.

    The generated password is returned once; the account is flagged so the
    user is expected to replace it.

    Args:
        role: Role of the new account
        payload: Account details without password
        admin_user: Authenticated admin
        auth_service: Authentication service

    Returns:
        The new account and its temporary password

    Raises:
        InvalidUserRequestException: If the account cannot be created (400)
    """
    temporary_password = generate_temporary_password()
    request = UserRequest(**payload.model_dump(), password=temporary_password)

    result = auth_service.sign_up(request, role.role, password_auto_generated=True)
    if not result.login_success:
        raise InvalidUserRequestException(result.error_message)

    logger.info(f"Admin {admin_user.id} created {role.value} account {result.user.id}")
    return AdminCreatedUserResponse(user=result.user, temporary_password=temporary_password)
