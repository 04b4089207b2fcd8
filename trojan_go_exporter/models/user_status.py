from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class Speed:
    upload: int
    download: int


@dataclass(slots=True, frozen=True)
class UserStatus:
    """One user's traffic snapshot as reported by ``ListUsers``."""

    hash: str
    upload_traffic: int
    download_traffic: int
    speed_current: Speed | None = None

    @classmethod
    def from_message(cls, response: Any) -> "UserStatus":
        """Build a record from a ``ListUsersResponse`` message.

        Sub-messages the server left unset read as proto3 defaults, except
        ``speed_current`` whose absence means the user has no live session.
        """

        status = response.status
        speed = None
        if status.HasField("speed_current"):
            speed = Speed(
                upload=status.speed_current.upload_speed,
                download=status.speed_current.download_speed,
            )
        return cls(
            hash=status.user.hash,
            upload_traffic=status.traffic_total.upload_traffic,
            download_traffic=status.traffic_total.download_traffic,
            speed_current=speed,
        )
