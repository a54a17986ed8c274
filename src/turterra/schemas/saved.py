"""Saved post Pydantic schemas."""

from pydantic import BaseModel


class SavedPostCreate(BaseModel):
    """Schema for bookmarking a post."""

    post_id: int


class SavedPostResponse(BaseModel):
    """Bookmark state of a post for the caller."""

    post_id: int
    is_saved: bool
