"""Live room link and occupancy model."""
from sqlalchemy import Column, String, Integer
from pitchside.database import Base

ROOM_LINK_ID = 1

ROOM_FIELDS = (
    "room_link",
    "total_players",
    "red_players",
    "blue_players",
    "spec_players",
    "blue_score",
    "red_score",
)


class RoomLink(Base):
    """Singleton row describing the current public game room."""

    __tablename__ = "room_link"

    id = Column(Integer, primary_key=True)
    room_link = Column(String(500), nullable=True)
    total_players = Column(Integer, default=0, nullable=False)
    red_players = Column(Integer, default=0, nullable=False)
    blue_players = Column(Integer, default=0, nullable=False)
    spec_players = Column(Integer, default=0, nullable=False)
    blue_score = Column(Integer, default=0, nullable=False)
    red_score = Column(Integer, default=0, nullable=False)

    def to_dict(self) -> dict:
        return {field: getattr(self, field) for field in ROOM_FIELDS}
