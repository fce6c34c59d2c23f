"""Authentication abstraction layer."""

from triptribe.auth.clerk_provider import ClerkAuthProvider
from triptribe.auth.interface import AuthProvider, AuthUser, get_auth_provider

__all__ = ["AuthProvider", "AuthUser", "ClerkAuthProvider", "get_auth_provider"]
