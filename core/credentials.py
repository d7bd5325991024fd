"""Meta access-token provider.

Routes take a ``Credential`` snapshot once per request and pass it explicitly
down to every adapter call. ``update()`` swaps the provider's reference to a new
frozen ``Credential``; snapshots already handed out are never mutated, so a
rotation mid-pipeline cannot affect in-flight calls.

Usage:
    from core.credentials import credential_provider
    credential = credential_provider.get_credential()
"""

import os
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import structlog

from config.meta import MetaConfig
from exceptions.custom_exceptions import CredentialException
from utils.redaction import forget_secret, register_secret

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Credential:
    access_token: str = field(repr=False)
    expires_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or _utcnow()) >= self.expires_at

    def remaining_seconds(self, now: Optional[datetime] = None) -> Optional[int]:
        if self.expires_at is None:
            return None
        remaining = int((self.expires_at - (now or _utcnow())).total_seconds())
        return max(remaining, 0)

    def expires_within(self, minutes: int, now: Optional[datetime] = None) -> bool:
        remaining = self.remaining_seconds(now)
        return remaining is not None and 0 < remaining <= minutes * 60


def _resolve_expiry(
    expires_in: Optional[int],
    data_access_expiration_time: Optional[int],
) -> Optional[datetime]:
    # Absolute expiry from the OAuth callback wins over the relative one.
    if data_access_expiration_time:
        return datetime.fromtimestamp(int(data_access_expiration_time), tz=timezone.utc)
    if expires_in:
        return _utcnow() + timedelta(seconds=int(expires_in))
    return None


class CredentialProvider:
    def __init__(self, credential: Optional[Credential] = None):
        self._credential = credential
        if credential:
            register_secret(credential.access_token)

    @classmethod
    def from_env(cls) -> "CredentialProvider":
        token = os.getenv("META_ACCESS_TOKEN", "")
        if not token:
            return cls()
        expires_at = _resolve_expiry(None, os.getenv("META_TOKEN_EXPIRES_AT") or None)
        return cls(Credential(access_token=token, expires_at=expires_at))

    def get_credential(self) -> Credential:
        """Return the current snapshot or raise if none is usable."""
        credential = self._credential
        if credential is None or not credential.access_token:
            raise CredentialException()
        if credential.is_expired():
            raise CredentialException("Meta access token has expired. Please update it.")
        warn_minutes = MetaConfig.TOKEN_EXPIRY_WARNING_MINUTES
        if credential.expires_within(warn_minutes):
            logger.warning(
                "meta_token_expiring_soon",
                remaining_minutes=credential.remaining_seconds() // 60,
            )
        return credential

    def is_expired(self) -> bool:
        credential = self._credential
        return credential is None or credential.is_expired()

    def update(
        self,
        access_token: str,
        expires_in: Optional[int] = None,
        data_access_expiration_time: Optional[int] = None,
    ) -> Credential:
        previous = self._credential
        credential = Credential(
            access_token=access_token,
            expires_at=_resolve_expiry(expires_in, data_access_expiration_time),
        )
        register_secret(access_token)
        self._credential = credential
        if previous and previous.access_token != access_token:
            forget_secret(previous.access_token)
        logger.info("meta_token_updated", expires_at=credential.expires_at)
        return credential

    def expiration_status(self) -> dict[str, Any]:
        """Dashboard-friendly summary of the current token lifetime."""
        credential = self._credential
        if credential is None or not credential.access_token:
            return {"status": "missing", "message": "Meta access token is not configured"}

        expires_at = credential.expires_at.isoformat() if credential.expires_at else None
        remaining = credential.remaining_seconds()
        if remaining is None:
            return {"status": "active", "alert_level": "ok", "expires_at": None,
                    "remaining_seconds": None, "remaining_minutes": None,
                    "message": "Token expiry is unknown"}
        if remaining <= 0:
            return {"status": "expired", "alert_level": "critical", "expires_at": expires_at,
                    "remaining_seconds": 0, "remaining_minutes": 0,
                    "message": "Token has expired. Please update the token."}

        minutes = remaining // 60
        if minutes <= 15:
            alert_level = "critical"
        elif minutes <= 30:
            alert_level = "warning"
        elif minutes <= 60:
            alert_level = "info"
        else:
            alert_level = "ok"
        return {
            "status": "active",
            "alert_level": alert_level,
            "expires_at": expires_at,
            "remaining_seconds": remaining,
            "remaining_minutes": minutes,
            "message": f"Token expires in {minutes} minutes",
        }


credential_provider = CredentialProvider.from_env()


def require_credential() -> Credential:
    """FastAPI dependency: one immutable snapshot per request."""
    return credential_provider.get_credential()
