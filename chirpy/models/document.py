"""
The persisted document: every collection the store holds, serialized as
a single JSON object.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .account import Account
from .post import Post


class RenewalToken(BaseModel):
    """Long-lived opaque token that can be exchanged for a session token."""

    model_config = ConfigDict(frozen=True)

    owner_id: int = Field(..., ge=1)
    token: str
    expires_at: datetime

    @field_validator("expires_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    @classmethod
    def issue(cls, owner_id: int, token: str, now: datetime, ttl: timedelta) -> "RenewalToken":
        return cls(owner_id=owner_id, token=token, expires_at=now + ttl)


class Document(BaseModel):
    """All collections plus per-collection id sequences"""

    posts: Dict[int, Post] = Field(default_factory=dict)
    accounts: Dict[int, Account] = Field(default_factory=dict)
    renewal_tokens: Dict[int, RenewalToken] = Field(default_factory=dict)
    # Last id handed out per collection; survives deletions.
    sequences: Dict[str, int] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_keys(self) -> "Document":
        for key, post in self.posts.items():
            if key != post.id:
                raise ValueError(f"posts key {key} does not match id {post.id}")
        for key, account in self.accounts.items():
            if key != account.id:
                raise ValueError(f"accounts key {key} does not match id {account.id}")
        for key, token in self.renewal_tokens.items():
            if key != token.owner_id:
                raise ValueError(f"renewal_tokens key {key} does not match owner {token.owner_id}")
        return self

    def next_id(self, collection: str) -> int:
        """Allocate the next identifier for a collection and record it."""
        entities = getattr(self, collection)
        current = max(entities.keys(), default=0)
        next_id = max(current, self.sequences.get(collection, 0)) + 1
        self.sequences[collection] = next_id
        return next_id
