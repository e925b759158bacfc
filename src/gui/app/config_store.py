"""Application configuration persistence.

Stores and loads lightweight UI state: window geometry and the last
submitted search, so the next launch picks up where the user left off.

Design principles:
- Pure logic (no direct Qt import) so it can be unit-tested headless.
- Explicit schema with version field to enable future migrations.
- Graceful fallback: corrupt or incompatible files produce defaults instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

__all__ = ["AppConfig", "load_config", "save_config", "CONFIG_VERSION"]

log = logging.getLogger(__name__)

CONFIG_VERSION = 1  # Increment when structure changes

DEFAULT_FILENAME = "app_state.json"


@dataclass(slots=True)
class AppConfig:
    """Serializable application state.

    Attributes
    ----------
    version: Schema version for migration handling.
    window_x, window_y, window_w, window_h: Last window geometry (None if unknown).
    last_query: Text left in the search field at shutdown.
    """

    version: int = CONFIG_VERSION
    window_x: Optional[int] = None
    window_y: Optional[int] = None
    window_w: Optional[int] = None
    window_h: Optional[int] = None
    last_query: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        return cls(
            version=int(data.get("version", CONFIG_VERSION)),
            window_x=data.get("window_x"),
            window_y=data.get("window_y"),
            window_w=data.get("window_w"),
            window_h=data.get("window_h"),
            last_query=data.get("last_query"),
        )

    def is_geometry_complete(self) -> bool:
        return None not in (self.window_x, self.window_y, self.window_w, self.window_h)


def _resolve_path(base_dir: str | Path | None) -> Path:
    base = Path(base_dir) if base_dir else Path.cwd()
    return base / DEFAULT_FILENAME


def load_config(base_dir: str | Path | None = None) -> AppConfig:
    """Load application config from directory (defaults when missing or unreadable)."""
    path = _resolve_path(base_dir)
    if not path.exists():
        return AppConfig()
    try:
        cfg = AppConfig.from_dict(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, ValueError, TypeError, AttributeError) as e:
        log.warning("Ignoring unreadable config %s: %s", path, e)
        return AppConfig()
    if cfg.version != CONFIG_VERSION:
        # Geometry layout may have changed; keep only the last query
        return AppConfig(last_query=cfg.last_query)
    return cfg


def save_config(cfg: AppConfig, base_dir: str | Path | None = None) -> Path:
    """Persist application config atomically; returns the path written."""
    path = _resolve_path(base_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(cfg.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    tmp.replace(path)
    return path
