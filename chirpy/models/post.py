"""Post data model"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Post(BaseModel):
    """A short text post. Immutable once stored."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    body: str
    author_id: Optional[int] = None
