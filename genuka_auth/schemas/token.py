# genuka_auth/schemas/token.py
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_EXPIRES_IN_MINUTES = 60

class TokenGrant(BaseModel):
    """Resposta de /oauth/token e /oauth/refresh."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: Optional[str] = None
    expires_in_minutes: int = DEFAULT_EXPIRES_IN_MINUTES

    @field_validator("expires_in_minutes", mode="before")
    @classmethod
    def _default_when_null(cls, v: Any) -> Any:
        return DEFAULT_EXPIRES_IN_MINUTES if v is None else v

    def expires_at(self, now: Optional[datetime] = None) -> datetime:
        return (now or datetime.now(timezone.utc)) + timedelta(minutes=self.expires_in_minutes)

class SessionClaims(BaseModel):
    sub: str
    type: str
    iat: int
    exp: int

    @property
    def company_id(self) -> str:
        return self.sub
