"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from turterra.core.errors import Unauthorized
from turterra.core.security import decode_subject
from turterra.db.session import get_db
from turterra.models import Profile
from turterra.services.images import CloudinaryClient, get_cloudinary_client

# HTTP Bearer scheme; anonymous requests are allowed through and rejected per route
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_optional_viewer(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> Profile | None:
    """Return the viewer's profile, or None for anonymous requests.

    A token that is present but invalid is still rejected.

    Raises:
        Unauthorized: If the token is invalid or names an unknown profile.
    """
    if credentials is None:
        return None

    profile_id = decode_subject(credentials.credentials)
    profile = db.get(Profile, profile_id)
    if profile is None:
        raise Unauthorized("Profile not found")
    return profile


def get_current_viewer(
    viewer: Annotated[Profile | None, Depends(get_optional_viewer)],
) -> Profile:
    """Return the authenticated viewer's profile.

    Raises:
        Unauthorized: If the request is anonymous.
    """
    if viewer is None:
        raise Unauthorized("Not authenticated")
    return viewer


def get_image_client() -> CloudinaryClient:
    """Return the shared Cloudinary client."""
    return get_cloudinary_client()


# Type aliases for viewer dependencies
OptionalViewerDep = Annotated[Profile | None, Depends(get_optional_viewer)]
CurrentViewerDep = Annotated[Profile, Depends(get_current_viewer)]
ImageClientDep = Annotated[CloudinaryClient, Depends(get_image_client)]


def viewer_id(viewer: Profile | None) -> str | None:
    """Return the viewer's profile id, None when anonymous."""
    return viewer.id if viewer is not None else None
