import asyncio
import logging

from clerk_backend_api import Clerk, authenticate_request
from clerk_backend_api.security.types import AuthenticateRequestOptions

from triptribe.errors import AuthenticationError, ErrorCode
from triptribe.models.trip import normalize_email

from .interface import AuthProvider, AuthUser

logger = logging.getLogger(__name__)

# Lifetime of the one-time sign-in ticket issued for a password reset.
RESET_TICKET_TTL_SECONDS = 3600


class _FakeRequest:
    """Adapts a raw Bearer token to the Requestish protocol expected by Clerk SDK."""

    def __init__(self, token: str):
        self.headers = {"Authorization": f"Bearer {token}"}


class ClerkAuthProvider(AuthProvider):
    def __init__(self, secret_key: str):
        super().__init__()
        self._client = Clerk(bearer_auth=secret_key)
        self._secret_key = secret_key

    async def _find_user_id(self, email: str) -> str:
        try:
            users = await self._client.users.list_async(request={"email_address": [normalize_email(email)]})
        except Exception as e:
            raise AuthenticationError(f"User lookup failed: {e}") from e

        if not users:
            raise AuthenticationError(f"No user with email {email}", code=ErrorCode.USER_NOT_FOUND)
        return users[0].id

    async def authenticate(self, email: str, password: str) -> str:
        user_id = await self._find_user_id(email)
        try:
            result = await self._client.users.verify_password_async(user_id=user_id, password=password)
        except Exception as e:
            # Clerk answers a wrong password with an error response, not verified=False.
            raise AuthenticationError(f"Password check failed: {e}", code=ErrorCode.INVALID_CREDENTIALS) from e

        if result is None or not result.verified:
            raise AuthenticationError("Password check failed", code=ErrorCode.INVALID_CREDENTIALS)
        return user_id

    async def create_user(self, email: str, password: str, display_name: str) -> str:
        try:
            user = await self._client.users.create_async(
                email_address=[normalize_email(email)],
                password=password,
                first_name=display_name,
            )
        except Exception as e:
            code = ErrorCode.EMAIL_IN_USE if "form_identifier_exists" in str(e) else ErrorCode.AUTH_FAILED
            raise AuthenticationError(f"Sign-up failed: {e}", code=code) from e

        logger.info("Created Clerk user %s", user.id)
        return user.id

    async def create_password_reset_ticket(self, email: str) -> str:
        """Issue a short-lived sign-in ticket the user can redeem to set a new password.

        Clerk's backend API does not send reset emails; delivering the ticket is
        up to the caller.
        """
        user_id = await self._find_user_id(email)
        try:
            token = await self._client.sign_in_tokens.create_async(
                request={"user_id": user_id, "expires_in_seconds": RESET_TICKET_TTL_SECONDS}
            )
        except Exception as e:
            raise AuthenticationError(f"Password reset failed: {e}") from e

        logger.info("Issued password reset ticket for %s", user_id)
        return token.url or token.token

    async def verify_token(self, token: str) -> AuthUser:
        try:
            # authenticate_request fetches JWKS over HTTP when no jwt_key is configured
            request_state = await asyncio.to_thread(
                authenticate_request,
                _FakeRequest(token),
                AuthenticateRequestOptions(secret_key=self._secret_key),
            )
            if not request_state.is_signed_in or request_state.payload is None:
                raise AuthenticationError(
                    f"Token verification failed: {request_state.message or 'unknown'}",
                    code=ErrorCode.INVALID_TOKEN,
                )
            user_id = str(request_state.payload["sub"])
            return await self.get_user(user_id)
        except AuthenticationError:
            raise
        except Exception as e:
            raise AuthenticationError(f"Token verification failed: {e}", code=ErrorCode.INVALID_TOKEN) from e

    async def get_user(self, user_id: str) -> AuthUser:
        try:
            user = await self._client.users.get_async(user_id=user_id)
        except Exception as e:
            raise AuthenticationError(f"Failed to fetch user: {e}", code=ErrorCode.USER_NOT_FOUND) from e

        email = user.email_addresses[0].email_address if user.email_addresses else ""
        phone = user.phone_numbers[0].phone_number if user.phone_numbers else None
        return AuthUser(
            user_id=user.id,
            email=email,
            display_name=f"{user.first_name or ''} {user.last_name or ''}".strip() or user.username or "User",
            photo_url=user.image_url or None,
            phone_number=phone,
        )

    async def delete_user(self, user_id: str) -> None:
        try:
            await self._client.users.delete_async(user_id=user_id)
        except Exception as e:
            raise AuthenticationError(f"Failed to delete user: {e}") from e
