"""
Business services for TripTribe.

- trips.py: trip lifecycle, participants and invitations
- activities.py: per-trip activities and their photos
- accounts.py: sign-up/sign-in and user profiles
- status.py: trip status, progress and countdown
- validation.py: caller-side form checks
"""

from triptribe.services.accounts import AccountService
from triptribe.services.activities import ActivityService
from triptribe.services.trips import TripService

__all__ = ["AccountService", "ActivityService", "TripService"]
