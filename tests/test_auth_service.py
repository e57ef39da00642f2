"""Tests for nickname/password login and token verification."""
from datetime import datetime, UTC, timedelta

import pytest

from pitchside.services import AuthError, AuthService, VipRecord, VipService
from pitchside.services.auth_service import INVALID_CREDENTIALS
from pitchside.utils.cache import CacheTag


@pytest.fixture
def auth_service(gateway, cache):
    return AuthService(gateway, VipService(gateway, cache))


@pytest.mark.asyncio
async def test_login_returns_identity_and_stats(auth_service, player_factory):
    await player_factory("u1", nicknames=["Ace", "A1"], password="pw1", wins=5)

    bundle = await auth_service.login("Ace", "pw1")

    assert bundle["auth"] == "u1"
    assert bundle["userId"] == "u1"
    assert bundle["username"] == "Ace"
    assert bundle["stats"]["wins"] == 5
    assert bundle["isVIP"] is False
    assert bundle["vip_expires_at"] is None


@pytest.mark.asyncio
async def test_login_with_secondary_nickname(auth_service, player_factory):
    await player_factory("u1", nicknames=["Ace", "A1"], password="pw1")

    bundle = await auth_service.login("A1", "pw1")

    assert bundle["auth"] == "u1"
    assert bundle["username"] == "A1"


@pytest.mark.asyncio
@pytest.mark.parametrize("username,password", [
    ("Ace", "wrong"),
    ("ace", "pw1"),
    ("Nobody", "pw1"),
])
async def test_login_rejects_bad_credentials(auth_service, player_factory, username, password):
    await player_factory("u1", nicknames=["Ace", "A1"], password="pw1")

    with pytest.raises(AuthError, match=INVALID_CREDENTIALS):
        await auth_service.login(username, password)


@pytest.mark.asyncio
async def test_shared_nickname_resolves_by_password(auth_service, player_factory):
    await player_factory("u1", nicknames=["Twin"], password="first")
    await player_factory("u2", nicknames=["Twin"], password="second")

    assert (await auth_service.login("Twin", "second"))["auth"] == "u2"
    assert (await auth_service.login("Twin", "first"))["auth"] == "u1"


@pytest.mark.asyncio
async def test_shared_nickname_with_shared_password_is_rejected(auth_service, player_factory):
    await player_factory("u1", nicknames=["Twin"], password="same")
    await player_factory("u2", nicknames=["Twin"], password="same")

    with pytest.raises(AuthError, match=INVALID_CREDENTIALS):
        await auth_service.login("Twin", "same")


@pytest.mark.asyncio
async def test_login_seeds_vip_cache(auth_service, cache, player_factory):
    expires = datetime.now(UTC) + timedelta(days=3)
    await player_factory("u1", nicknames=["Ace"], password="pw1", is_vip=True,
                         vip_expires_at=expires, vip_color="#ff00ff", vip_message="hey")
    cache.set(CacheTag.VIP_STATUS, {
        "u1": VipRecord(flag=False, expires_at=None, color=None, message=None, celebration=None),
    })

    bundle = await auth_service.login("Ace", "pw1")

    assert bundle["isVIP"] is True
    assert bundle["vip_color"] == "#ff00ff"
    assert bundle["vipMessage"] == "hey"
    assert bundle["vip_expires_at"].endswith("Z")

    record = cache.get_item(CacheTag.VIP_STATUS, "u1")
    assert record.is_active()
    assert record.message == "hey"


@pytest.mark.asyncio
async def test_repeated_logins_are_identical(auth_service, player_factory):
    await player_factory("u1", nicknames=["Ace"], password="pw1", wins=2, goals=3)

    assert await auth_service.login("Ace", "pw1") == await auth_service.login("Ace", "pw1")


@pytest.mark.asyncio
async def test_login_without_stats_row_fails(auth_service, player_factory):
    from pitchside.services import NotFoundError

    await player_factory("u1", nicknames=["Ace"], password="pw1", with_stats=False)

    with pytest.raises(NotFoundError, match="Error fetching player stats"):
        await auth_service.login("Ace", "pw1")


@pytest.mark.asyncio
async def test_verify_uses_first_nickname(auth_service, player_factory):
    await player_factory("u1", nicknames=["Ace", "A1"], password="pw1", wins=1)

    bundle = await auth_service.verify("u1")

    assert bundle["auth"] == "u1"
    assert bundle["username"] == "Ace"
    assert bundle["stats"]["wins"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("token,reason", [
    (None, "missing_credentials"),
    ("", "missing_credentials"),
    ("ghost", "invalid_token"),
])
async def test_verify_rejects_unknown_tokens(auth_service, token, reason):
    with pytest.raises(AuthError, match=reason):
        await auth_service.verify(token)


@pytest.mark.asyncio
async def test_verify_without_stats_row_is_invalid(auth_service, player_factory):
    await player_factory("u1", nicknames=["Ace"], with_stats=False)

    with pytest.raises(AuthError, match="invalid_token"):
        await auth_service.verify("u1")
