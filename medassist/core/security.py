"""
Core security utilities for password hashing and bearer token handling.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import jwt, JWTError
from passlib.context import CryptContext
import secrets
import string
import logging

from ..auth.exceptions import InvalidTokenException
from ..auth.models import User
from ..exceptions import PasswordHashingError

# Set up logging
logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
RESET_TOKEN_TYPE = "reset"

TEMPORARY_PASSWORD_LENGTH = 12


class PasswordHasher:
    """
    One-way password hashing and verification using bcrypt.
    """
    def __init__(self, rounds: int = 12):
        self.pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            str: Hashed password

        Raises:
            PasswordHashingError: If bcrypt rejects the password
        """
        try:
            return self.pwd_context.hash(password)
        except (ValueError, TypeError) as e:
            logger.error(f"Password hashing failed: {type(e).__name__}")
            raise PasswordHashingError() from e

    def verify(self, plain_password: Optional[str], hashed_password: Optional[str]) -> bool:
        """
        Verify a password against a hash.

        Args:
            plain_password: Plain text password
            hashed_password: Hashed password to compare against

        Returns:
            bool: True if password matches hash, False on mismatch or unreadable hash
        """
        if not plain_password or not hashed_password:
            return False
        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            logger.warning("Stored password digest could not be verified")
            return False


class JwtTokenIssuer:
    """
    Issues and validates signed JWT bearer tokens.

    Two token types are issued: ``access`` tokens for sessions and ``reset``
    tokens for password recovery. Both carry the user's email as subject.
    """
    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 30,
        reset_token_expire_minutes: int = 30,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_expires = timedelta(minutes=access_token_expire_minutes)
        self.reset_token_expires = timedelta(minutes=reset_token_expire_minutes)

    def _encode(self, subject: str, token_type: str, expires_delta: timedelta, extra: Optional[Dict[str, Any]] = None) -> str:
        now = datetime.now(timezone.utc)
        to_encode = dict(extra or {})
        to_encode.update({
            "sub": subject,
            "type": token_type,
            "iat": int(now.timestamp()),
            "exp": now + expires_delta,
        })
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def issue_access_token(self, user: User) -> str:
        """
        Create a session access token for the user.

        Args:
            user: Authenticated user

        Returns:
            str: Encoded JWT token
        """
        roles = sorted(role.value for role in user.authorities)
        return self._encode(user.email, ACCESS_TOKEN_TYPE, self.access_token_expires, {"roles": roles})

    def issue_reset_token(self, user: User) -> str:
        """
        Create a password reset token for the user.

        Args:
            user: User requesting a password reset

        Returns:
            str: Encoded JWT token
        """
        return self._encode(user.email, RESET_TOKEN_TYPE, self.reset_token_expires)

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.

        Args:
            token: JWT token string

        Returns:
            Dict containing token payload

        Raises:
            InvalidTokenException: If the token is malformed, tampered with or expired
        """
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except (JWTError, AttributeError) as e:
            raise InvalidTokenException() from e

    def extract_identity(self, token: str) -> str:
        """
        Get the subject (email) a token was issued for.

        Raises:
            InvalidTokenException: If the token cannot be decoded or carries no subject
        """
        payload = self.decode(token)
        subject = payload.get("sub")
        if not subject:
            raise InvalidTokenException("Invalid token payload")
        return subject

    def validate_access_token(self, token: str) -> Optional[str]:
        """
        Validate a session token.

        Returns:
            The subject email if the token is a valid access token, None otherwise
        """
        try:
            payload = self.decode(token)
        except InvalidTokenException:
            return None
        if payload.get("type") != ACCESS_TOKEN_TYPE:
            return None
        return payload.get("sub")

    def validate_reset_token(self, token: str, user: User) -> bool:
        """
        Validate a password reset token against the user's current state.

        The token must be a reset token issued for the user's email, still
        unexpired, and issued no earlier than the user's last password reset.

        Args:
            token: Reset token string
            user: User the token is claimed for

        Returns:
            bool: True if the token may be used to reset the user's password
        """
        try:
            payload = self.decode(token)
        except InvalidTokenException:
            return False

        if payload.get("type") != RESET_TOKEN_TYPE:
            return False
        if payload.get("sub") != user.email:
            return False

        issued_at = payload.get("iat")
        if not isinstance(issued_at, int):
            return False
        last_reset = user.last_password_reset_date
        if last_reset is not None and issued_at < int(as_utc(last_reset).timestamp()):
            logger.info(f"Reset token for user {user.id} predates the last password reset")
            return False
        return True


def as_utc(value: datetime) -> datetime:
    """
    Treat naive datetimes (as returned by SQLite) as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def generate_temporary_password(length: int = TEMPORARY_PASSWORD_LENGTH) -> str:
    """
    Generate a random password for accounts created on a user's behalf.

    The password always contains a lowercase letter, an uppercase letter and a digit.

    Args:
        length: Length of the password

    Returns:
        str: Random password
    """
    alphabet = string.ascii_letters + string.digits
    while True:
        password = "".join(secrets.choice(alphabet) for _ in range(length))
        if (any(c.islower() for c in password)
                and any(c.isupper() for c in password)
                and any(c.isdigit() for c in password)):
            return password
