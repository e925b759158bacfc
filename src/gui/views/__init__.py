"""GUI view layer.

Exports:
 - ClanLookupView
"""

from .clan_lookup_view import ClanLookupView  # noqa: F401

__all__ = ["ClanLookupView"]
