"""
Authentication service layer: login, registration and password management.

Login and sign-up never raise for expected failures; they return a
``LoginResponse`` with ``login_success=False`` and a message. Password update
raises ``InvalidUserRequestException`` when the caller breaks its contract.
Reset token validation fails closed.
"""
import logging
from typing import Any, Optional

from ..core.security import PasswordHasher, JwtTokenIssuer, now_utc
from ..exceptions import PasswordHashingError
from ..patients.service import PatientRecordStatusResolver
from .exceptions import AlreadyExistsException, InvalidTokenException, InvalidUserRequestException
from .mapper import canonical_email, from_user_request, parse_login_request, to_user_response
from .models import User, UserRole
from .repository import UserRepository
from .schemas import LoginResponse, UpdatePasswordRequest, UpdatePasswordResponse

# Set up logging
logger = logging.getLogger(__name__)

WRONG_CREDENTIALS = "Wrong credentials!"
USER_DOES_NOT_EXIST = "User doesn't exist. Please sign up."
ACCOUNT_DELETED = "Your account was deleted! Please, contact administration!"
PASSWORD_NOT_PROCESSED = "Unable to process user password"

# Ordered registration checks: (attribute, message). The first missing field wins.
REQUIRED_SIGNUP_FIELDS = (
    ("email", "Invalid email address"),
    ("password", "Invalid user password"),
    ("date_of_birth", "Invalid date of birth"),
    ("full_name", "Invalid full name"),
    ("city", "Invalid city"),
    ("country", "Invalid country"),
    ("phone_number", "Invalid phone number"),
    ("province", "Invalid province"),
)


class AuthService:
    """
    Orchestrates authentication and account registration.

    Args:
        user_repository: User store
        password_hasher: Password digest producer and verifier
        token_issuer: Bearer token issuer
        status_resolver: Patient record status lookup for login responses
    """
    def __init__(
        self,
        user_repository: UserRepository,
        password_hasher: PasswordHasher,
        token_issuer: JwtTokenIssuer,
        status_resolver: PatientRecordStatusResolver,
    ):
        self.user_repository = user_repository
        self.password_hasher = password_hasher
        self.token_issuer = token_issuer
        self.status_resolver = status_resolver

    def login(self, request: Any, role: UserRole) -> LoginResponse:
        """
        Authenticate a user for a specific role.

        Args:
            request: Login payload (LoginRequest, mapping or None)
            role: Role the user is logging in as

        Returns:
            LoginResponse: success with token, or failure with a message
        """
        login_request = parse_login_request(request)
        if login_request is None:
            return self.create_error_login_response()

        email = canonical_email(login_request.email)
        if email is None:
            return self.create_error_login_response()

        saved_user = self.user_repository.find_by_email_and_authority(email, role)
        if saved_user is None:
            # Unknown account and wrong role look the same to the caller
            logger.info(f"Login rejected for role {role.value}: no matching account")
            return self.create_error_login_response(USER_DOES_NOT_EXIST)

        if saved_user.deleted:
            logger.warning(f"Login rejected: account {saved_user.id} is deleted")
            return self.create_error_login_response(ACCOUNT_DELETED)

        if not self.password_hasher.verify(login_request.password, saved_user.password):
            logger.warning(f"Login failed: wrong password for user {saved_user.id}")
            return self.create_error_login_response()

        logger.info(f"Login successful: user {saved_user.id} as {role.value}")
        return self.create_success_login_response(saved_user)

    def sign_up(self, request: Any, role: UserRole, password_auto_generated: bool = False) -> LoginResponse:
        """
        Register a new account holding exactly ``role``.

        Validation short-circuits at the first failure, in this order: payload
        mapping, required fields, registration number (counselors and doctors),
        email uniqueness.

        Args:
            request: Registration payload (UserRequest, mapping or None)
            role: Role granted to the new account
            password_auto_generated: Whether the password was generated for the user

        Returns:
            LoginResponse: success with token, or failure with a message
        """
        user = from_user_request(request)
        error_message = self._validate_sign_up(user, role)
        if error_message is not None:
            logger.info(f"Sign-up rejected for role {role.value}: {error_message}")
            return self.create_error_login_response(error_message)

        now = now_utc()
        user.grant_authorities({role})
        user.created_at = now
        user.updated_at = now
        user.deleted = False
        user.last_password_reset_date = now
        user.password_auto_generated = password_auto_generated

        try:
            user.password = self.password_hasher.hash(user.password)
        except PasswordHashingError:
            return self.create_error_login_response(PASSWORD_NOT_PROCESSED)

        try:
            saved_user = self.user_repository.save(user)
        except AlreadyExistsException as e:
            return self.create_error_login_response(e.detail)

        logger.info(f"Account created: user {saved_user.id} as {role.value}")
        return self.create_success_login_response(saved_user)

    def _validate_sign_up(self, user: Optional[User], role: UserRole) -> Optional[str]:
        if user is None:
            return "Invalid user request"

        for attribute, message in REQUIRED_SIGNUP_FIELDS:
            if getattr(user, attribute) is None:
                return message

        if role.is_privileged:
            if user.registration_number is None:
                return "invalid registration number"
            if self.user_repository.exists_by_registration_number_non_deleted(user.registration_number):
                return "registration number is already in use"

        try:
            self.check_if_email_is_taken(user.email)
        except AlreadyExistsException as e:
            return e.detail
        return None

    def check_if_email_is_taken(self, email: str) -> None:
        """
        Raises:
            AlreadyExistsException: If a non-deleted user already uses the email
        """
        if self.user_repository.exists_by_email_non_deleted(email):
            raise AlreadyExistsException("User already exists")

    def create_success_login_response(self, user: User) -> LoginResponse:
        return LoginResponse(
            user=to_user_response(user),
            status=self.status_resolver.status_for(user),
            login_success=True,
            access_token=self.token_issuer.issue_access_token(user),
            token_type="bearer",
        )

    def create_error_login_response(self, error_message: str = WRONG_CREDENTIALS) -> LoginResponse:
        return LoginResponse(login_success=False, error_message=error_message)

    def validate_password_reset_token(self, token: Optional[str]) -> bool:
        """
        Check whether a password reset token may still be used.

        Never raises: unreadable tokens and unknown or deleted users yield False.

        Args:
            token: Reset token string

        Returns:
            bool: True if the token is valid for its user's current state
        """
        try:
            email = self.token_issuer.extract_identity(token)
        except InvalidTokenException:
            logger.info("Password reset token could not be decoded")
            return False

        saved_user = self.user_repository.find_by_email_non_deleted(email)
        if saved_user is None:
            return False
        return self.token_issuer.validate_reset_token(token, saved_user)

    def update_password(self, request: Optional[UpdatePasswordRequest], current_user: User) -> UpdatePasswordResponse:
        """
        Replace the authenticated user's password.

        Args:
            request: New password payload
            current_user: User resolved from the caller's access token

        Returns:
            UpdatePasswordResponse with success flag and the account email

        Raises:
            InvalidUserRequestException: If the password is missing or equals the current one
            PasswordHashingError: If the new password cannot be hashed
        """
        if request is None or not request.password:
            raise InvalidUserRequestException("Invalid request!")

        if self.password_hasher.verify(request.password, current_user.password):
            raise InvalidUserRequestException("new password cannot be the same as the current password")

        now = now_utc()
        current_user.password = self.password_hasher.hash(request.password)
        current_user.password_auto_generated = False
        current_user.last_password_reset_date = now
        current_user.touch(now)
        saved_user = self.user_repository.save(current_user)

        logger.info(f"Password updated for user {saved_user.id}")
        return UpdatePasswordResponse(success=True, email=saved_user.email)
