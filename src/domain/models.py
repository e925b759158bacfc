"""Domain models for clan lookups."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from domain.errors import UnknownError

__all__ = ["WarFrequency", "Location", "Clan", "FavoriteRecord"]


class WarFrequency(str, Enum):
    """War participation categories reported by the clan directory.

    Each member has a stable integer code used when a clan is persisted as a
    favorite. Codes must never be renumbered.
    """

    UNKNOWN = "unknown"
    ALWAYS = "always"
    MORE_THAN_ONCE_PER_WEEK = "moreThanOncePerWeek"
    ONCE_PER_WEEK = "oncePerWeek"
    LESS_THAN_ONCE_PER_WEEK = "lessThanOncePerWeek"
    NEVER = "never"
    ANY = "any"

    @property
    def code(self) -> int:
        return _CODES[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> "WarFrequency":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @classmethod
    def code_for(cls, value: Optional[str]) -> int:
        return cls.parse(value).code

    @classmethod
    def from_code(cls, code: int) -> "WarFrequency":
        for member, member_code in _CODES.items():
            if member_code == code:
                return member
        return cls.UNKNOWN


_CODES = {
    WarFrequency.UNKNOWN: 0,
    WarFrequency.ALWAYS: 1,
    WarFrequency.MORE_THAN_ONCE_PER_WEEK: 2,
    WarFrequency.ONCE_PER_WEEK: 3,
    WarFrequency.LESS_THAN_ONCE_PER_WEEK: 4,
    WarFrequency.NEVER: 5,
    WarFrequency.ANY: 6,
}


@dataclass(frozen=True, slots=True)
class Location:
    id: int
    name: str
    is_country: bool = False
    country_code: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "Location":
        return cls(
            id=int(data.get("id", 0)),
            name=str(data["name"]),
            is_country=bool(data.get("isCountry", False)),
            country_code=data.get("countryCode"),
        )


@dataclass(frozen=True, slots=True)
class Clan:
    """A clan as returned by the directory. Replaced wholesale per search."""

    tag: str
    name: str
    location: Optional[Location]
    members: int
    clan_points: int
    war_wins: int
    war_frequency: str
    type: Optional[str]
    required_trophies: int

    @property
    def location_name(self) -> Optional[str]:
        return self.location.name if self.location else None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "Clan":
        """Build a clan from the directory's JSON object.

        Raises ``UnknownError`` when required keys are missing or mistyped so
        callers only ever see the lookup failure taxonomy.
        """
        try:
            location = data.get("location")
            return cls(
                tag=str(data["tag"]),
                name=str(data["name"]),
                location=Location.from_payload(location) if location else None,
                members=int(data.get("members", 0)),
                clan_points=int(data.get("clanPoints", 0)),
                war_wins=int(data.get("warWins", 0)),
                war_frequency=str(data.get("warFrequency") or WarFrequency.UNKNOWN.value),
                type=data.get("type"),
                required_trophies=int(data.get("requiredTrophies", 0)),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise UnknownError(f"Malformed clan payload: {e}") from e


@dataclass(frozen=True, slots=True)
class FavoriteRecord:
    """Persisted projection of a clan. Inserted or deleted, never updated."""

    tag: str
    name: str
    location_name: Optional[str]
    points: int
    wars_won: int
    war_frequency: int  # WarFrequency code
    type: Optional[str]
    required_trophies: int
    id: Optional[int] = None  # surrogate key assigned by the store
