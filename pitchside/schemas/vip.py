"""VIP status and VIP appearance schemas."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VipRequestBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    auth: str = Field(..., min_length=1, max_length=255)


class UpdateVipMessageRequest(VipRequestBase):
    vip_message: Optional[str] = Field(default=None, alias="vipMessage", max_length=500)


class UpdateVipCelebrationRequest(VipRequestBase):
    vip_celebration: Optional[str] = Field(default=None, alias="vipCelebration", max_length=100)


class UpdateVipColorRequest(VipRequestBase):
    color: Optional[str] = Field(default=None, max_length=32)


class VipPurchaseRequest(VipRequestBase):
    pass


class VipStatusRequest(BaseModel):
    """Status lookup; an empty identity yields the not-VIP default."""
    auth: Optional[str] = None


class VipStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_vip: bool = Field(alias="isVip")
    is_vip_legacy: bool = Field(alias="isVIP")
    vip_color: Optional[str] = Field(default=None, alias="vipColor")
    vip_message: Optional[str] = Field(default=None, alias="vipMessage")
    vip_celebration: Optional[str] = Field(default=None, alias="vipCelebration")
