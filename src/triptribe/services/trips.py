"""Trip lifecycle service: trips, participants and invitations.

Every mutation is a read-modify-write of the whole trip document with no
version check, so concurrent writers are last-writer-wins. Multi-record
changes (trip root + per-user index) are not transactional. Index entries
are written only after the trip lists the user as a participant, and
deletion removes them before the trip, so an index entry never points at a
trip that does not include its user. A failure in between can leave a
participant without an index entry.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import datetime

import pydantic

from triptribe.db.interface import TRIPS, USERS, RecordStore, user_trips
from triptribe.errors import ErrorCode, NotFoundError, TripTribeError, ValidationError
from triptribe.models import (
    Invitation,
    InvitationStatus,
    Participant,
    ParticipantRole,
    Trip,
    TripIndexEntry,
    new_id,
    normalize_email,
    utcnow,
)

logger = logging.getLogger(__name__)


class TripService:
    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = utcnow) -> None:
        self._store = store
        self._clock = clock

    # Trips

    async def create_trip(
        self,
        name: str,
        destination: str,
        start_date: datetime,
        end_date: datetime,
        description: str | None,
        creator_id: str,
    ) -> Trip:
        now = self._clock()
        trip = Trip(
            id=new_id(),
            creator_id=creator_id,
            name=name,
            destination=destination,
            start_date=start_date,
            end_date=end_date,
            description=description,
            participants=[Participant(user_id=creator_id, role=ParticipantRole.CREATOR, joined_at=now)],
            invitations=[],
            created_at=now,
            updated_at=now,
        )

        await self._store.set(TRIPS, trip.id, trip.to_record())
        await self._add_to_user_index(creator_id, trip.id, ParticipantRole.CREATOR)

        logger.info("Created trip %s for user %s", trip.id, creator_id)
        return trip

    async def get_trip(self, trip_id: str) -> Trip:
        record = await self._store.get(TRIPS, trip_id)
        if record is None:
            raise NotFoundError(f"Trip {trip_id} not found", code=ErrorCode.TRIP_NOT_FOUND)
        try:
            return Trip.from_record(record)
        except pydantic.ValidationError as e:
            logger.warning("Trip %s has an unreadable record: %s", trip_id, e)
            raise NotFoundError(f"Trip {trip_id} is unreadable", code=ErrorCode.TRIP_NOT_FOUND) from e

    async def get_user_trips(self, user_id: str) -> list[Trip]:
        """Trips the user belongs to, newest start first.

        Trips that cannot be loaded are logged and left out instead of failing
        the whole listing.
        """
        entries = await self._store.list(user_trips(user_id))
        trip_ids = [entry["tripId"] for entry in entries if entry.get("tripId")]

        results = await asyncio.gather(*(self.get_trip(trip_id) for trip_id in trip_ids), return_exceptions=True)

        trips: list[Trip] = []
        for trip_id, result in zip(trip_ids, results):
            if isinstance(result, TripTribeError):
                logger.warning("Failed to load trip %s for user %s: %s", trip_id, user_id, result.message)
                continue
            if isinstance(result, BaseException):
                raise result
            trips.append(result)

        return sorted(trips, key=lambda t: t.start_date, reverse=True)

    async def update_trip(self, trip: Trip) -> Trip:
        updated = trip.model_copy(update={"updated_at": self._clock()})
        await self._store.update(TRIPS, updated.id, updated.to_record())
        return updated

    async def delete_trip(self, trip_id: str) -> None:
        trip = await self.get_trip(trip_id)

        for participant in trip.participants:
            await self._store.delete(user_trips(participant.user_id), trip_id)

        await self._store.delete(TRIPS, trip_id)
        logger.info("Deleted trip %s and %d index entries", trip_id, len(trip.participants))

    # Invitations

    async def invite_friends_to_trip(self, trip_id: str, emails: Iterable[str], message: str | None = None) -> Trip:
        """Issue a pending invitation per email in one trip write.

        An email that already has an invitation gets a fresh pending one in
        its place, carrying the new message. A single address may be passed
        as a plain string.
        """
        if isinstance(emails, str):
            emails = [emails]
        targets = list(dict.fromkeys(normalize_email(e) for e in emails if e.strip()))
        trip = await self.get_trip(trip_id)
        if not targets:
            return trip

        now = self._clock()
        kept = [inv for inv in trip.invitations if inv.email not in targets]
        issued = [
            Invitation(
                id=new_id(),
                email=email,
                status=InvitationStatus.PENDING,
                message=message,
                created_at=now,
                updated_at=now,
            )
            for email in targets
        ]

        # No delivery: the invitation exists only as trip data.
        updated = await self.update_trip(trip.model_copy(update={"invitations": kept + issued}))
        logger.info("Invited %d emails to trip %s (%d replaced)", len(issued), trip_id, len(trip.invitations) - len(kept))
        return updated

    async def respond_to_invitation(self, trip_id: str, invitation_id: str, accept: bool) -> Trip:
        trip = await self.get_trip(trip_id)

        invitation = trip.invitation(invitation_id)
        if invitation is None:
            raise NotFoundError(
                f"Invitation {invitation_id} not found on trip {trip_id}",
                code=ErrorCode.INVITATION_NOT_FOUND,
            )
        if not invitation.is_pending:
            raise ValidationError(
                f"Invitation {invitation_id} is already {invitation.status.value}",
                code=ErrorCode.INVITATION_CLOSED,
            )

        now = self._clock()
        answered = invitation.model_copy(
            update={
                "status": InvitationStatus.ACCEPTED if accept else InvitationStatus.DECLINED,
                "updated_at": now,
            }
        )
        invitations = [answered if inv.id == invitation_id else inv for inv in trip.invitations]
        participants = list(trip.participants)
        joined: str | None = None

        if accept:
            user_id = await self._find_user_id_by_email(invitation.email)
            if user_id is None:
                # Accepted without an account: no participant until one exists.
                logger.info("Invitation %s accepted by %s, who has no account", invitation_id, invitation.email)
            elif trip.participant(user_id) is None:
                participants.append(Participant(user_id=user_id, role=ParticipantRole.MEMBER, joined_at=now))
                joined = user_id

        updated = await self.update_trip(
            trip.model_copy(update={"invitations": invitations, "participants": participants})
        )
        if joined is not None:
            await self._add_to_user_index(joined, trip_id, ParticipantRole.MEMBER)
        return updated

    async def get_invitations(self, for_email: str) -> list[Trip]:
        """Trips holding a pending invitation for ``for_email``.

        Scans every trip; there is no email index.
        """
        email = normalize_email(for_email)
        trips: list[Trip] = []
        for record in await self._store.list(TRIPS):
            try:
                trip = Trip.from_record(record)
            except pydantic.ValidationError:
                logger.warning("Skipping unreadable trip record %s", record.get("id"))
                continue
            if trip.has_pending_invitation_for(email):
                trips.append(trip)
        return trips

    async def cancel_invitation(self, trip_id: str, invitation_id: str) -> Trip:
        trip = await self.get_trip(trip_id)
        if trip.invitation(invitation_id) is None:
            raise NotFoundError(
                f"Invitation {invitation_id} not found on trip {trip_id}",
                code=ErrorCode.INVITATION_NOT_FOUND,
            )

        remaining = [inv for inv in trip.invitations if inv.id != invitation_id]
        return await self.update_trip(trip.model_copy(update={"invitations": remaining}))

    # Helpers

    async def _add_to_user_index(self, user_id: str, trip_id: str, role: ParticipantRole) -> None:
        entry = TripIndexEntry(trip_id=trip_id, role=role, created_at=self._clock())
        await self._store.set(user_trips(user_id), trip_id, entry.to_record())

    async def _find_user_id_by_email(self, email: str) -> str | None:
        matches = await self._store.query(USERS, "email", normalize_email(email))
        if not matches:
            return None
        return matches[0].get("uid")
