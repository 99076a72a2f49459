"""
Authentication module for the medical assistance system.

This module provides authentication and account functionality including:
- Role-scoped login for patients, counselors, doctors and admins
- Self-registration with role-specific validation
- Admin-created accounts with generated passwords
- Password update and password reset token validation
- JWT bearer token authentication
"""
