"""CLI entry point for ClanCheck lookups and favorites management."""

from __future__ import annotations
import argparse
import json
import sys
from typing import Any

from config import settings
from domain.mapping import normalize_tag
from domain.models import WarFrequency
from gui.app.bootstrap import AppContext, create_app, shutdown_app
from gui.services.logging_service import configure_logging
from gui.services.service_locator import services
from gui.viewmodels.clan_lookup_viewmodel import ClanLookupViewModel, Phase

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _context(args: argparse.Namespace) -> AppContext:
    return create_app(
        headless=True,
        data_dir=args.data_dir,
        client=args.client,
        probe=args.probe,
        attach_logging=False,
    )


def _viewmodel(ctx: AppContext) -> ClanLookupViewModel:
    vm = ClanLookupViewModel(
        services.get("clan_client"),
        services.get("connectivity_probe"),
        ctx.favorites_store,
        event_bus=services.try_get("event_bus"),
    )
    vm.start()
    return vm


def _resolve(vm: ClanLookupViewModel, tag: str) -> bool:
    vm.submit_query(tag)
    state = vm.resolve_query(tag)
    if state.phase is not Phase.DISPLAYED:
        print(state.message, file=sys.stderr)
        return False
    return True


def cmd_lookup(args: argparse.Namespace) -> int:
    ctx = _context(args)
    try:
        vm = _viewmodel(ctx)
        if not _resolve(vm, args.tag):
            return 1
        result: dict[str, Any] = vm.render_fields().as_dict()  # type: ignore[union-attr]
        result["favorite"] = vm.state.is_favorite
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return 0
    finally:
        shutdown_app(ctx)


def cmd_favorites_list(args: argparse.Namespace) -> int:
    ctx = _context(args)
    try:
        rows = [
            {
                "tag": rec.tag,
                "name": rec.name,
                "location": rec.location_name,
                "points": rec.points,
                "wars_won": rec.wars_won,
                "war_frequency": WarFrequency.from_code(rec.war_frequency).value,
                "type": rec.type,
                "required_trophies": rec.required_trophies,
            }
            for rec in ctx.favorites_store.list_favorites()
        ]
        print(json.dumps(rows, indent=2, ensure_ascii=False))
        return 0
    finally:
        shutdown_app(ctx)


def cmd_favorites_add(args: argparse.Namespace) -> int:
    ctx = _context(args)
    try:
        vm = _viewmodel(ctx)
        if not _resolve(vm, args.tag):
            return 1
        if vm.state.is_favorite:
            print(f"{vm.state.clan.tag} is already a favorite")  # type: ignore[union-attr]
            return 0
        if vm.toggle_favorite() is None:
            print(vm.state.message, file=sys.stderr)
            return 1
        print(f"Added {vm.state.clan.tag} to favorites")  # type: ignore[union-attr]
        return 0
    finally:
        shutdown_app(ctx)


def cmd_favorites_remove(args: argparse.Namespace) -> int:
    ctx = _context(args)
    try:
        tag = normalize_tag(args.tag)
        removed = ctx.favorites_store.delete_by_tag(tag)
        if not removed:
            print(f"{tag} is not a favorite", file=sys.stderr)
            return 1
        print(f"Removed {tag} from favorites")
        return 0
    finally:
        shutdown_app(ctx)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="clancheck")
    p.add_argument("--data-dir", default=settings.DATA_DIR, help="Database / state directory")
    p.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Console log level",
    )
    sub = p.add_subparsers(dest="command", required=True)

    lookup = sub.add_parser("lookup", help="Look up a clan by tag")
    lookup.add_argument("tag", help="Clan tag (with or without leading #)")
    lookup.set_defaults(func=cmd_lookup)

    fav = sub.add_parser("favorites", help="Manage favorite clans")
    fav_sub = fav.add_subparsers(dest="action", required=True)
    fav_list = fav_sub.add_parser("list", help="List favorite clans")
    fav_list.set_defaults(func=cmd_favorites_list)
    fav_add = fav_sub.add_parser("add", help="Look up a clan and add it to favorites")
    fav_add.add_argument("tag")
    fav_add.set_defaults(func=cmd_favorites_add)
    fav_remove = fav_sub.add_parser("remove", help="Remove a clan from favorites")
    fav_remove.add_argument("tag")
    fav_remove.set_defaults(func=cmd_favorites_remove)

    return p


def main(argv: list[str] | None = None, *, client: Any = None, probe: Any = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    args.client = client
    args.probe = probe
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
