"""Profile-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict


class AuthorSummary(BaseModel):
    """Author fields denormalized onto posts and comments."""

    id: str
    username: str
    display_name: str | None = None
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ProfilePostCount(BaseModel):
    """Published post total for a profile page."""

    username: str
    post_count: int
