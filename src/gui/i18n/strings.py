"""Default English string catalog for the clan lookup UI."""

from __future__ import annotations

EN_STRINGS: dict[str, str] = {
    "app.title": "ClanCheck",
    "search.placeholder": "Search clan by tag (e.g. #2PP)",
    "field.unset": "Unset",
    "field.name": "Name",
    "field.tag": "Tag",
    "field.location": "Location",
    "field.members": "Members",
    "field.points": "Points",
    "field.wars_won": "Wars won",
    "field.war_frequency": "War frequency",
    "field.type": "Type",
    "field.required_trophies": "Required trophies",
    "favorite.add": "Add to favorites",
    "favorite.remove": "Remove from favorites",
    "resource.clan": "clan",
    "error.bad_request": "Bad request. Check the clan tag and try again.",
    "error.unauthorized": "Unauthorized request. Check the API token.",
    "error.not_found": "Resource not found ({resource}).",
    "error.too_many_requests": "Too many requests. Please wait a moment.",
    "error.maintenance": "The server is under maintenance.",
    "error.no_connection": "No internet connection.",
    "error.favorite_write_failed": "Could not update favorites.",
    "error.server": "Server error. Please try again later.",
}
