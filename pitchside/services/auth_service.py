"""Credential checks for nickname/password login and token verification."""
from __future__ import annotations

import logging
import secrets

from pitchside.services.store_gateway import CredentialRecord, NotFoundError, StoreGateway
from pitchside.services.vip_service import VipService
from pitchside.utils.datetime_helpers import serialize_datetime_utc

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


class AuthError(RuntimeError):
    """Raised when authentication fails."""


def _passwords_match(supplied: str, stored: str | None) -> bool:
    if stored is None:
        return False
    return secrets.compare_digest(supplied.encode("utf-8"), stored.encode("utf-8"))


class AuthService:
    """Resolves credentials to an identity and builds the login bundle.

    The identity key doubles as the bearer token handed back to clients.
    """

    def __init__(self, gateway: StoreGateway, vip_service: VipService):
        self.gateway = gateway
        self.vip_service = vip_service

    async def login(self, username: str, password: str) -> dict:
        """Authenticate by nickname and password.

        Nicknames are not unique keys. Every identity holding the nickname is
        considered and login succeeds only when exactly one of them has the
        supplied password.
        """
        candidates = await self.gateway.find_credentials_by_nickname(username)
        if not candidates:
            raise AuthError(INVALID_CREDENTIALS)

        if len(candidates) > 1:
            logger.warning(
                f"Nickname shared by {len(candidates)} identities during login; "
                "resolving by password"
            )

        matches = [cred for cred in candidates if _passwords_match(password, cred.password)]
        if len(matches) != 1:
            if len(matches) > 1:
                logger.warning("Login rejected: nickname and password match several identities")
            raise AuthError(INVALID_CREDENTIALS)

        return await self._build_bundle(matches[0], username)

    async def verify(self, token: str | None) -> dict:
        """Re-validate a previously issued identity token."""
        if not token:
            raise AuthError("missing_credentials")

        credentials = await self.gateway.fetch_credentials(token)
        if credentials is None:
            raise AuthError("invalid_token")

        username = credentials.nicknames[0] if credentials.nicknames else ""
        try:
            return await self._build_bundle(credentials, username)
        except NotFoundError as exc:
            raise AuthError("invalid_token") from exc

    async def _build_bundle(self, credentials: CredentialRecord, username: str) -> dict:
        stats = await self.gateway.fetch_profile(credentials.auth)
        if stats is None:
            raise NotFoundError("Error fetching player stats")

        vip = credentials.vip
        self.vip_service.seed(credentials.auth, vip)

        return {
            "auth": credentials.auth,
            "userId": credentials.auth,
            "username": username,
            "stats": stats,
            "isVIP": vip.is_active(),
            "vip_expires_at": serialize_datetime_utc(vip.expires_at),
            "vip_color": vip.color,
            "vipMessage": vip.message,
            "vipCelebration": vip.celebration,
        }
