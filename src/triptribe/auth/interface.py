import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from pydantic import BaseModel


class AuthUser(BaseModel):
    user_id: str
    email: str
    display_name: str
    photo_url: str | None = None
    phone_number: str | None = None


class AuthProvider(ABC):
    """Identity backend plus the local session built on top of it.

    Subclasses talk to the identity service; the session state (current
    user and the auth-change stream) lives here.
    """

    def __init__(self) -> None:
        self._current_user_id: str | None = None
        self._listeners: list[asyncio.Queue[str | None]] = []

    @abstractmethod
    async def authenticate(self, email: str, password: str) -> str:
        """Check credentials and return the user id."""

    @abstractmethod
    async def create_user(self, email: str, password: str, display_name: str) -> str: ...

    @abstractmethod
    async def get_user(self, user_id: str) -> AuthUser: ...

    @abstractmethod
    async def delete_user(self, user_id: str) -> None: ...

    @abstractmethod
    async def verify_token(self, token: str) -> AuthUser:
        """Resolve a session token from any sign-in flow, including Apple and Google OAuth."""

    @abstractmethod
    async def create_password_reset_ticket(self, email: str) -> str:
        """One-time credential letting the owner of ``email`` set a new password."""

    async def sign_in(self, email: str, password: str) -> str:
        user_id = await self.authenticate(email, password)
        self._set_current_user(user_id)
        return user_id

    async def sign_up(self, email: str, password: str, display_name: str) -> str:
        user_id = await self.create_user(email, password, display_name)
        self._set_current_user(user_id)
        return user_id

    async def sign_in_with_token(self, token: str) -> str:
        user = await self.verify_token(token)
        self._set_current_user(user.user_id)
        return user.user_id

    async def sign_out(self) -> None:
        self._set_current_user(None)

    def current_user_id(self) -> str | None:
        return self._current_user_id

    async def observe_auth_changes(self) -> AsyncIterator[str | None]:
        """Yield the current user id, then every sign-in/sign-out until the consumer stops."""
        queue: asyncio.Queue[str | None] = asyncio.Queue()
        queue.put_nowait(self._current_user_id)
        self._listeners.append(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._listeners.remove(queue)

    def _set_current_user(self, user_id: str | None) -> None:
        self._current_user_id = user_id
        for queue in self._listeners:
            queue.put_nowait(user_id)


def get_auth_provider() -> AuthProvider:
    from triptribe.config import get_config

    config = get_config()
    clerk_secret = config.clerk_secret_key
    if not clerk_secret:
        raise ValueError("CLERK_SECRET_KEY not configured")

    from triptribe.auth.clerk_provider import ClerkAuthProvider

    return ClerkAuthProvider(secret_key=clerk_secret)
