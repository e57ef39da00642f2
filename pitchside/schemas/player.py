"""Player statistics, profile and rankings schemas."""
from typing import Optional, Union

from pydantic import Field

from pitchside.schemas.base import BaseSchema


class PlayerProfile(BaseSchema):
    """Per-player statistics shown on a profile page."""
    wins: int = 0
    losses: int = 0
    draws: int = 0
    goals: int = 0
    assists: int = 0
    points: int = 0
    games_played: int = 0
    clean_sheets: int = 0


class ProfileResponse(BaseSchema):
    profile: PlayerProfile


class RankingRow(PlayerProfile):
    """One leaderboard row."""
    auth: str
    rank: Optional[int] = None


class NicknameEntry(BaseSchema):
    auth: str
    nicknames: list[str] = []


class Pagination(BaseSchema):
    current_page: int = Field(alias="currentPage")
    per_page: int = Field(alias="perPage")
    total_items: int = Field(alias="totalItems")
    total_pages: int = Field(alias="totalPages")


class RankingsResponse(BaseSchema):
    """Leaderboard page plus the requester's own standing."""
    stats_data: list[RankingRow] = Field(alias="statsData")
    user_data: dict[str, NicknameEntry] = Field(alias="userData")
    user_stats: dict[str, RankingRow] = Field(alias="userStats")
    count_rank: Union[int, str] = Field(alias="countRank")  # "Unranked" when no row
    pagination: Pagination
