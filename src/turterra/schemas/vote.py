"""Vote-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class VoteCreate(BaseModel):
    """Schema for casting, flipping or retracting a vote."""

    target_id: int
    target_type: Literal["post", "comment"] = "post"
    value: Literal[-1, 0, 1] = Field(..., description="1 upvote, -1 downvote, 0 remove vote")


class VoteResponse(BaseModel):
    """Caller's vote and the target's score after the write."""

    target_id: int
    target_type: str
    value: int
    score: int
    changed: bool

    model_config = ConfigDict(from_attributes=True)
