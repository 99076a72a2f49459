"""
Authentication-specific exceptions.
"""
from fastapi import HTTPException, status
from typing import Iterable

class AuthException(HTTPException):
    """Base class for authentication exceptions."""
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class InvalidUserRequestException(AuthException):
    """Exception raised when a caller sends a request that breaks the operation's contract."""
    def __init__(self, detail: str = "Invalid request!"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class AlreadyExistsException(AuthException):
    """Exception raised when an account with the same unique value already exists."""
    def __init__(self, detail: str = "User already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)

class InvalidTokenException(AuthException):
    """Exception raised when token is invalid or expired."""
    def __init__(self, detail: str = "Invalid token"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)

class RoleDeniedException(AuthException):
    """Exception raised when user doesn't have required role."""
    def __init__(self, required_roles: Iterable, user_roles: Iterable):
        required = sorted(getattr(role, "value", str(role)) for role in required_roles)
        held = sorted(getattr(role, "value", str(role)) for role in user_roles)
        detail = f"Access denied. Required roles: {required}. Your roles: {held}"
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
