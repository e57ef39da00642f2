"""API routers."""
from pitchside.routers import auth, health, player, room, vip

__all__ = [
    "auth",
    "health",
    "player",
    "room",
    "vip",
]
