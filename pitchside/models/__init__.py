"""Database models."""
from pitchside.models.user import User
from pitchside.models.player_stats import PlayerStats
from pitchside.models.room_link import RoomLink

__all__ = [
    "User",
    "PlayerStats",
    "RoomLink",
]
