"""
FastAPI dependencies wiring the authentication service and resolving the current user.
"""
from functools import lru_cache
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from typing import List

from ..config import settings
from ..core.security import PasswordHasher, JwtTokenIssuer
from ..database import get_db
from ..patients.service import PatientRecordStatusResolver
from .exceptions import InvalidTokenException, RoleDeniedException
from .models import User, UserRole
from .repository import UserRepository
from .service import AuthService

# OAuth2 scheme for bearer token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/patient/login")

@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)

@lru_cache
def get_token_issuer() -> JwtTokenIssuer:
    return JwtTokenIssuer(
        secret_key=settings.secret_key,
        algorithm=settings.algorithm,
        access_token_expire_minutes=settings.access_token_expire_minutes,
        reset_token_expire_minutes=settings.reset_token_expire_minutes,
    )

def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)

def get_auth_service(
    db: Session = Depends(get_db),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    token_issuer: JwtTokenIssuer = Depends(get_token_issuer),
) -> AuthService:
    """
    Build the authentication service for one request.

    Args:
        db: Request-scoped database session
        password_hasher: Shared password hasher
        token_issuer: Shared token issuer

    Returns:
        AuthService: Service wired with its collaborators
    """
    return AuthService(
        user_repository=UserRepository(db),
        password_hasher=password_hasher,
        token_issuer=token_issuer,
        status_resolver=PatientRecordStatusResolver(db),
    )

def get_current_user(
    token: str = Depends(oauth2_scheme),
    user_repository: UserRepository = Depends(get_user_repository),
    token_issuer: JwtTokenIssuer = Depends(get_token_issuer),
) -> User:
    """
    Get current authenticated user from the bearer access token.

    Args:
        token: JWT token from Authorization header
        user_repository: User store
        token_issuer: Token issuer used to validate the token

    Returns:
        User: Current authenticated, non-deleted user

    Raises:
        InvalidTokenException: If token is invalid or user not found
    """
    email = token_issuer.validate_access_token(token)
    if not email:
        raise InvalidTokenException("Invalid or expired token")

    user = user_repository.find_by_email_non_deleted(email)
    if user is None:
        raise InvalidTokenException("User not found")
    return user

def require_roles(allowed_roles: List[UserRole]):
    """
    Dependency factory to require specific roles.

    Args:
        allowed_roles: List of roles that are allowed access

    Returns:
        Function that checks if user has one of the required roles
    """
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if not current_user.authorities & set(allowed_roles):
            raise RoleDeniedException(allowed_roles, current_user.authorities)
        return current_user
    return role_checker

require_admin = require_roles([UserRole.ADMIN])
