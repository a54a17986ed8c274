"""Comment-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from .profile import AuthorSummary


class CommentCreate(BaseModel):
    """Schema for adding a comment or reply."""

    body: str = Field(..., min_length=1, max_length=10000)
    parent_comment_id: int | None = Field(None, description="Comment being replied to")


class CommentView(BaseModel):
    """Comment decorated with author and viewer vote."""

    id: int
    post_id: int
    parent_comment_id: int | None
    body: str
    score: int
    is_deleted: bool
    created_at: datetime
    author: AuthorSummary
    viewer_vote: int | None = None
