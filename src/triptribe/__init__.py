"""
Core business logic package for TripTribe.

Trip, invitation and activity lifecycle, account management and status
derivation. Persistence, identity and blob storage are reached through the
abstract collaborators in db/, auth/ and storage/.
"""

__all__: list[str] = []
