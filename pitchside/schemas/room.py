"""Room link schema."""
from typing import Optional

from pitchside.schemas.base import BaseSchema


class RoomLinkResponse(BaseSchema):
    """Current public room and its live occupancy and score."""
    room_link: Optional[str] = None
    total_players: int = 0
    red_players: int = 0
    blue_players: int = 0
    spec_players: int = 0
    blue_score: int = 0
    red_score: int = 0
