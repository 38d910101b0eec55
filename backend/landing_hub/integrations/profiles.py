"""
Profile directory clients.

The generator only needs ``get_profile(user_id)``. Lookups return ``None``
for unknown users and raise ``ProfileDirectoryError`` when the directory
itself cannot answer; the generator treats both as "owner not found".
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from landing_hub.extensions import db
from landing_hub.models.user import User

logger = logging.getLogger(__name__)


class ProfileDirectoryError(Exception):
    pass


@dataclass(frozen=True)
class Profile:
    user_id: int
    first_name: str
    last_name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    job_title: Optional[str] = None
    headshot_ref: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_payload(cls, user_id: int, payload: Dict[str, Any]) -> "Profile":
        return cls(
            user_id=user_id,
            first_name=payload.get("firstName") or payload.get("first_name") or "",
            last_name=payload.get("lastName") or payload.get("last_name") or "",
            email=payload.get("email"),
            phone=payload.get("phone"),
            job_title=payload.get("jobTitle") or payload.get("job_title"),
            headshot_ref=payload.get("headshotRef") or payload.get("headshot_ref"),
        )


class SqlProfileDirectory:
    """Reads profiles from the local ``users`` table."""

    def get_profile(self, user_id: int) -> Optional[Profile]:
        user = db.session.get(User, user_id)
        if user is None or not user.is_active:
            return None
        return Profile(
            user_id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            phone=user.phone,
            job_title=user.job_title,
            headshot_ref=user.headshot_ref,
        )


class HttpProfileDirectory:
    """
    Profile lookups against a remote directory service.

    ``GET {base_url}/profiles/{user_id}`` -> 200 JSON profile | 404.
    Every request is bounded by ``timeout`` seconds.
    """

    def __init__(self, base_url: str, timeout: float = 3.0, transport: Optional[httpx.BaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def get_profile(self, user_id: int) -> Optional[Profile]:
        url = f"{self.base_url}/profiles/{user_id}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(url)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return Profile.from_payload(user_id, response.json())
        except httpx.HTTPStatusError as exc:
            logger.warning("Profile directory HTTP error for user %s: %s", user_id, exc)
            raise ProfileDirectoryError(str(exc)) from exc
        except httpx.RequestError as exc:
            logger.warning("Profile directory request failed for user %s: %s", user_id, exc)
            raise ProfileDirectoryError(str(exc)) from exc
        except ValueError as exc:
            logger.warning("Profile directory returned invalid JSON for user %s", user_id)
            raise ProfileDirectoryError("Invalid profile payload") from exc


def build_profile_directory(settings):
    if settings.profile_directory_url:
        return HttpProfileDirectory(
            settings.profile_directory_url,
            timeout=settings.profile_directory_timeout,
        )
    return SqlProfileDirectory()
