# src/picklerank/exceptions.py

"""Custom exception hierarchy for PickleRank.

This module provides a structured exception hierarchy that enables:
1. Proper HTTP status code mapping in API endpoints
2. Detailed error context for logging and debugging
3. Clear distinction between different error categories
"""

from __future__ import annotations


class PickleRankError(Exception):
    """Base exception for all PickleRank errors.

    Attributes:
        message: Human-readable error description
        details: Optional dict with additional context for logging/debugging
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


# =============================================================================
# Resource Not Found Errors (HTTP 404)
# =============================================================================


class ResourceNotFoundError(PickleRankError):
    """Base class for resource not found errors."""

    pass


class MatchNotFoundError(ResourceNotFoundError):
    """Raised when a match ID does not exist."""

    def __init__(self, match_id: str) -> None:
        super().__init__(
            message=f"Match with ID {match_id} not found",
            details={"match_id": match_id},
        )


class PlayerNotFoundError(ResourceNotFoundError):
    """Raised when a player ID (or email) does not exist."""

    def __init__(self, player_ref: str) -> None:
        super().__init__(
            message=f"Player {player_ref} not found",
            details={"player_ref": player_ref},
        )


class VenueNotFoundError(ResourceNotFoundError):
    """Raised when a venue ID does not exist."""

    def __init__(self, venue_id: str) -> None:
        super().__init__(
            message=f"Venue with ID {venue_id} not found",
            details={"venue_id": venue_id},
        )


class GroupNotFoundError(ResourceNotFoundError):
    """Raised when a group ID does not exist."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            message=f"Group with ID {group_id} not found",
            details={"group_id": group_id},
        )


class UserNotFoundError(ResourceNotFoundError):
    """Raised when a user ID does not exist."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            message=f"User with ID {user_id} not found",
            details={"user_id": user_id},
        )


# =============================================================================
# Validation Errors (HTTP 422)
# =============================================================================


class ValidationError(PickleRankError):
    """Base class for validation errors."""

    pass


class InvalidMembershipError(ValidationError):
    """Raised when a group membership cannot be granted as requested."""

    def __init__(self, user_id: str, group_id: str, reason: str) -> None:
        super().__init__(
            message=f"Cannot grant membership in group {group_id}: {reason}",
            details={"user_id": user_id, "group_id": group_id, "reason": reason},
        )


# =============================================================================
# Conflict Errors (HTTP 409)
# =============================================================================


class ConflictError(PickleRankError):
    """Base class for uniqueness conflicts."""

    pass


class DuplicateEmailError(ConflictError):
    """Raised when an email is already registered to another record."""

    def __init__(self, email: str) -> None:
        super().__init__(
            message=f"A record with email '{email}' already exists",
            details={"email": email},
        )


class DuplicateGroupNameError(ConflictError):
    """Raised when a group name is already taken."""

    def __init__(self, name: str) -> None:
        super().__init__(
            message=f"Group with name '{name}' already exists",
            details={"group_name": name},
        )


# =============================================================================
# Authentication / Authorization Errors (HTTP 401 / 403)
# =============================================================================


class AuthenticationError(PickleRankError):
    """Raised when the request carries no resolvable actor."""

    def __init__(self, reason: str) -> None:
        super().__init__(message=f"Not authenticated: {reason}")


class AuthorizationError(PickleRankError):
    """Raised when the actor lacks the role or ownership a mutation requires.

    The guarded resource is left unchanged.
    """

    def __init__(
        self,
        message: str,
        actor_id: str | None = None,
        resource_id: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            details={"actor_id": actor_id, "resource_id": resource_id},
        )


# =============================================================================
# Rating Engine Errors (HTTP 500)
# =============================================================================


class RatingEngineError(PickleRankError):
    """Base class for rating application errors."""

    pass


class RatingApplicationError(RatingEngineError):
    """Raised when a persisted match could not have its ratings applied.

    The match record itself stays persisted in the PENDING state so that
    the reconciliation sweep can finish it later.
    """

    def __init__(self, match_id: str, reason: str) -> None:
        super().__init__(
            message=f"Ratings for match {match_id} were not applied: {reason}",
            details={"match_id": match_id, "reason": reason},
        )


class RatingConflictError(RatingEngineError):
    """Raised when concurrent rating updates kept colliding on the same players."""

    def __init__(self, match_id: str, attempts: int) -> None:
        super().__init__(
            message=f"Ratings for match {match_id} conflicted with concurrent "
            f"updates after {attempts} attempt(s)",
            details={"match_id": match_id, "attempts": attempts},
        )
