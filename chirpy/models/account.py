"""Account data models"""

from pydantic import BaseModel, ConfigDict, Field


class Account(BaseModel):
    """Stored account. Only the bcrypt hash of the password is kept."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    email: str
    password_hash: str

    def public(self) -> "AccountView":
        return AccountView(id=self.id, email=self.email)


class AccountView(BaseModel):
    """Account as returned to callers (no password hash)"""

    id: int
    email: str
