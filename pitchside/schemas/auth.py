"""Authentication schema definitions."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from pitchside.schemas.base import BaseSchema
from pitchside.schemas.player import PlayerProfile


class LoginRequest(BaseModel):
    """Nickname/password login payload."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseSchema):
    """Identity, stats and VIP appearance returned after login or verify."""

    auth: str
    user_id: str = Field(alias="userId")
    username: str
    stats: PlayerProfile
    is_vip: bool = Field(alias="isVIP")
    vip_expires_at: Optional[datetime] = None
    vip_color: Optional[str] = None
    vip_message: Optional[str] = Field(default=None, alias="vipMessage")
    vip_celebration: Optional[str] = Field(default=None, alias="vipCelebration")
