from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class StoryView(BaseModel):
    """Response model for a seller story."""
    story_id: str = Field(description="Unique story identifier")
    content: str = Field(description="Story text")
    created_at: datetime = Field(description="Story timestamp")
