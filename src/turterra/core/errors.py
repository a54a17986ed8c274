"""Domain errors raised by the community services.

Services raise these instead of HTTP exceptions; the application maps each
kind onto a status code in ``turterra.main``.
"""

from __future__ import annotations


class CommunityError(RuntimeError):
    """Base exception for all community-layer failures."""

    status_code = 500


class Unauthorized(CommunityError):
    """Raised when a mutating operation has no authenticated viewer."""

    status_code = 401


class Forbidden(CommunityError):
    """Raised when the viewer is authenticated but not permitted."""

    status_code = 403


class NotFound(CommunityError):
    """Raised when the target post, comment, channel or profile is absent."""

    status_code = 404


class InvalidState(CommunityError):
    """Raised for a disallowed state transition, e.g. publishing twice."""

    status_code = 409


class StoreUnavailable(CommunityError):
    """Raised when the relational store fails during a write."""

    status_code = 503


class ImageServiceError(CommunityError):
    """Raised when the image CDN cannot be reached or answers with an error."""

    status_code = 502


__all__ = [
    "CommunityError",
    "Forbidden",
    "ImageServiceError",
    "InvalidState",
    "NotFound",
    "StoreUnavailable",
    "Unauthorized",
]
