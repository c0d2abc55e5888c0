import time
from datetime import datetime
from typing import Optional, Dict, Any, Union

from pydantic import BaseModel, EmailStr, Field, field_validator


class User(BaseModel):
    id: str = Field(..., description="Supabase auth user id")
    email: Optional[EmailStr] = Field(None, description="User's email address")
    user_metadata: Dict[str, Any] = Field(default_factory=dict, description="Provider metadata (avatar, name)")

    @property
    def avatar_url(self) -> Optional[str]:
        return self.user_metadata.get("avatar_url")

    @property
    def display_name(self) -> Optional[str]:
        return self.user_metadata.get("full_name") or self.user_metadata.get("name") or self.email


class Session(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = Field(None, description="Expiry as epoch seconds")
    user: User

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Session":
        """Build a session from a GoTrue token response"""
        expires_at = data.get("expires_at")
        if expires_at is None and data.get("expires_in"):
            expires_at = int(time.time()) + int(data["expires_in"])
        user = data.get("user") or {}
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_at=expires_at,
            user=User(
                id=user["id"],
                email=user.get("email") or None,
                user_metadata=user.get("user_metadata") or {},
            ),
        )

    def is_expired(self, margin: int = 10) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at - margin <= time.time()


class Profile(BaseModel):
    id: str
    credits: int = Field(0, ge=0)

    @field_validator("credits", mode="before")
    @classmethod
    def missing_credits_are_zero(cls, value):
        return 0 if value is None else value


class Thumbnail(BaseModel):
    id: Union[int, str]
    user_id: str
    url: str = Field(..., description="Data URI or remote URL of the image")
    prompt: str
    created_at: datetime
