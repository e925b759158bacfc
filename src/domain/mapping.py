"""Utilities for projecting directory clans into persisted favorites."""

from __future__ import annotations

from domain.models import Clan, FavoriteRecord, WarFrequency


def favorite_from_clan(clan: Clan) -> FavoriteRecord:
    return FavoriteRecord(
        tag=clan.tag,
        name=clan.name,
        location_name=clan.location_name,
        points=clan.clan_points,
        wars_won=clan.war_wins,
        war_frequency=WarFrequency.code_for(clan.war_frequency),
        type=clan.type,
        required_trophies=clan.required_trophies,
    )


def normalize_tag(query: str) -> str:
    """Turn free-form search input into a directory tag (``#ABC123``)."""
    tag = query.strip().upper().replace(" ", "")
    if tag and not tag.startswith("#"):
        tag = "#" + tag
    return tag
