"""Player statistics model."""
from sqlalchemy import Column, String, Integer
from pitchside.database import Base

PROFILE_FIELDS = (
    "wins",
    "losses",
    "draws",
    "goals",
    "assists",
    "points",
    "games_played",
    "clean_sheets",
)

RANKING_FIELDS = (
    "auth",
    "rank",
    "points",
    "games_played",
    "wins",
    "draws",
    "losses",
    "goals",
    "assists",
    "clean_sheets",
)


class PlayerStats(Base):
    """Aggregated match statistics for one identity."""

    __tablename__ = "player_stats"

    auth = Column(String(255), primary_key=True)
    rank = Column(Integer, nullable=True, index=True)
    points = Column(Integer, default=0, nullable=False)
    games_played = Column(Integer, default=0, nullable=False)
    wins = Column(Integer, default=0, nullable=False)
    draws = Column(Integer, default=0, nullable=False)
    losses = Column(Integer, default=0, nullable=False)
    goals = Column(Integer, default=0, nullable=False)
    assists = Column(Integer, default=0, nullable=False)
    clean_sheets = Column(Integer, default=0, nullable=False)

    def to_profile(self) -> dict:
        return {field: getattr(self, field) for field in PROFILE_FIELDS}

    def to_ranking_row(self) -> dict:
        return {field: getattr(self, field) for field in RANKING_FIELDS}

    def __repr__(self):
        return f"<PlayerStats(auth={self.auth}, rank={self.rank}, points={self.points})>"
