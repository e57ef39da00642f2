"""Tests for the store gateway queries."""
from datetime import datetime, UTC, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from pitchside.models import User
from pitchside.services import StoreError


@pytest.mark.asyncio
async def test_rankings_page_is_ordered_by_rank(gateway, ranked_players):
    await ranked_players(12)

    first = await gateway.fetch_rankings_page(1, 5)
    last = await gateway.fetch_rankings_page(3, 5)

    assert [row["rank"] for row in first] == [1, 2, 3, 4, 5]
    assert [row["rank"] for row in last] == [11, 12]
    assert await gateway.count_player_stats() == 12


@pytest.mark.asyncio
async def test_unranked_rows_sort_last(gateway, player_factory):
    await player_factory("no-rank", rank=None)
    await player_factory("first", rank=1)

    rows = await gateway.fetch_rankings_page(1, 10)

    assert [row["auth"] for row in rows] == ["first", "no-rank"]


@pytest.mark.asyncio
async def test_fetch_nicknames_maps_identities(gateway, player_factory):
    await player_factory("u1", nicknames=["Ace", "A1"])
    await player_factory("u2", nicknames=["Bee"])

    user_data = await gateway.fetch_nicknames(["u1", "u2", "u1", "missing"])

    assert user_data == {
        "u1": {"auth": "u1", "nicknames": ["Ace", "A1"]},
        "u2": {"auth": "u2", "nicknames": ["Bee"]},
    }
    assert await gateway.fetch_nicknames([]) == {}


@pytest.mark.asyncio
async def test_nickname_lookup_is_exact_and_case_sensitive(gateway, player_factory):
    await player_factory("u1", nicknames=["Ace", "A1"])
    await player_factory("u2", nicknames=["Aces"])
    await player_factory("u3", nicknames=['quo"te'])

    matches = await gateway.find_credentials_by_nickname("Ace")

    assert [cred.auth for cred in matches] == ["u1"]
    assert await gateway.find_credentials_by_nickname("ace") == []
    assert [cred.auth for cred in await gateway.find_credentials_by_nickname('quo"te')] == ["u3"]


@pytest.mark.asyncio
async def test_nickname_lookup_treats_wildcards_literally(gateway, player_factory):
    await player_factory("u1", nicknames=["a_b"])

    assert await gateway.find_credentials_by_nickname("a%") == []
    assert [cred.auth for cred in await gateway.find_credentials_by_nickname("a_b")] == ["u1"]


@pytest.mark.asyncio
async def test_vip_record_derives_effective_flag(gateway, player_factory):
    now = datetime.now(UTC)
    await player_factory("active", is_vip=True, vip_expires_at=now + timedelta(days=3))
    await player_factory("lapsed", is_vip=True, vip_expires_at=now - timedelta(seconds=1))
    await player_factory("flag-off", is_vip=False, vip_expires_at=now + timedelta(days=3))

    records = await gateway.fetch_all_vip_records()

    assert records["active"].is_active()
    assert not records["lapsed"].is_active()
    assert not records["flag-off"].is_active()
    assert records["active"].expires_at.tzinfo is not None


@pytest.mark.asyncio
async def test_update_vip_fields_reports_missing_identity(gateway, player_factory, db_session):
    await player_factory("u1")

    assert await gateway.update_vip_fields("u1", {"vip_message": "gg"})
    assert not await gateway.update_vip_fields("nobody", {"vip_message": "gg"})

    user = await db_session.get(User, "u1", populate_existing=True)
    assert user.vip_message == "gg"


@pytest.mark.asyncio
async def test_room_link_missing_returns_none(gateway, room_factory):
    assert await gateway.fetch_room_link() is None

    await room_factory(total_players=10)

    room = await gateway.fetch_room_link()
    assert room["total_players"] == 10
    assert room["room_link"] == "https://example.com/play?c=abc123"


@pytest.mark.asyncio
async def test_driver_errors_become_store_errors(gateway, test_engine):
    """Queries against a missing table surface as StoreError."""
    async with test_engine.begin() as conn:
        await conn.exec_driver_sql("DROP TABLE player_stats")

    with pytest.raises(StoreError) as exc_info:
        await gateway.count_player_stats()

    assert isinstance(exc_info.value.__cause__, OperationalError)
