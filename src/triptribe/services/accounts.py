"""Account service: identity via the auth provider, profile data in the ``users`` collection."""

import logging
from collections.abc import AsyncIterator, Callable
from datetime import datetime

import pydantic

from triptribe.auth.interface import AuthProvider
from triptribe.db.interface import USERS, RecordStore
from triptribe.errors import AuthenticationError, ErrorCode, NotFoundError, TripTribeError
from triptribe.models import User, utcnow
from triptribe.storage.interface import BlobStore, user_photo_key

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(
        self,
        auth: AuthProvider,
        store: RecordStore,
        blobs: BlobStore,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._auth = auth
        self._store = store
        self._blobs = blobs
        self._clock = clock

    # Session

    async def sign_up(self, email: str, password: str, display_name: str) -> User:
        user_id = await self._auth.sign_up(email, password, display_name)
        user = User(uid=user_id, display_name=display_name, email=email, created_at=self._clock())
        await self._store.set(USERS, user.uid, user.to_record())
        return user

    async def sign_in(self, email: str, password: str) -> User:
        user_id = await self._auth.sign_in(email, password)
        return await self.fetch_user(user_id)

    async def sign_in_with_token(self, token: str) -> User:
        user_id = await self._auth.sign_in_with_token(token)
        return await self.fetch_user(user_id)

    async def reset_password(self, email: str) -> str:
        """Return a one-time reset ticket for ``email``; delivering it is the caller's job."""
        return await self._auth.create_password_reset_ticket(email)

    async def sign_out(self) -> None:
        await self._auth.sign_out()

    def current_user_id(self) -> str | None:
        return self._auth.current_user_id()

    def require_current_user_id(self) -> str:
        user_id = self._auth.current_user_id()
        if user_id is None:
            raise AuthenticationError("No user is currently signed in", code=ErrorCode.UNAUTHENTICATED)
        return user_id

    def observe_auth_changes(self) -> AsyncIterator[str | None]:
        return self._auth.observe_auth_changes()

    # Profile

    async def fetch_user(self, user_id: str) -> User:
        """Load the user record, recreating it from the identity provider if it was never written."""
        record = await self._store.get(USERS, user_id)
        if record is not None:
            try:
                return User.from_record(record)
            except pydantic.ValidationError:
                logger.warning("User record %s is unreadable; rebuilding from identity", user_id)

        try:
            identity = await self._auth.get_user(user_id)
        except AuthenticationError as e:
            raise NotFoundError(f"User {user_id} not found", code=ErrorCode.USER_NOT_FOUND) from e

        user = User(
            uid=identity.user_id,
            display_name=identity.display_name or "User",
            email=identity.email,
            photo_url=identity.photo_url,
            phone_number=identity.phone_number,
            created_at=self._clock(),
        )
        await self._store.set(USERS, user.uid, user.to_record())
        logger.info("Recreated missing user record %s", user_id)
        return user

    async def update_user_profile(self, user: User) -> None:
        # Only the fields a user may edit themselves.
        await self._store.update(
            USERS,
            user.uid,
            {"displayName": user.display_name, "phoneNumber": user.phone_number},
        )

    async def update_user_photo(self, user_id: str, photo_data: bytes) -> str:
        url = await self._blobs.upload(user_photo_key(user_id), photo_data, "image/jpeg")
        await self._store.update(USERS, user_id, {"photoURL": url})
        return url

    async def delete_account(self) -> None:
        user_id = self.require_current_user_id()

        await self._store.delete(USERS, user_id)
        try:
            await self._blobs.delete(user_photo_key(user_id))
        except TripTribeError as e:
            logger.warning("Could not delete profile photo for %s: %s", user_id, e.message)

        await self._auth.delete_user(user_id)
        await self._auth.sign_out()
        logger.info("Deleted account %s", user_id)
