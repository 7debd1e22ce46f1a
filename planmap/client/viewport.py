"""Local viewport persistence and the poller that keeps it up to date."""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from planmap.client.timers import Debouncer, IntervalTimer
from planmap.domain.defaults import DEFAULT_VIEWPORT

logger = logging.getLogger(__name__)

# Pan/zoom thresholds
POLL_MOVE_PX = 5
SIGNIFICANT_MOVE_PX = 10
ZOOM_DELTA = 0.01


@dataclass(frozen=True)
class Viewport:
    x: float = DEFAULT_VIEWPORT["x"]
    y: float = DEFAULT_VIEWPORT["y"]
    zoom: float = DEFAULT_VIEWPORT["zoom"]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Viewport:
        return cls(
            x=float(data.get("x", DEFAULT_VIEWPORT["x"])),
            y=float(data.get("y", DEFAULT_VIEWPORT["y"])),
            zoom=float(data.get("zoom", DEFAULT_VIEWPORT["zoom"])),
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def moved_beyond(self, other: Viewport, distance: float, zoom_delta: float = ZOOM_DELTA) -> bool:
        return (
            abs(self.x - other.x) > distance
            or abs(self.y - other.y) > distance
            or abs(self.zoom - other.zoom) > zoom_delta
        )


def viewport_storage_key(mindmap_id: str) -> str:
    return f"mindmap-viewport-{mindmap_id}"


class LocalViewportStore:
    """One JSON file per mindmap under ``base_dir``."""

    def __init__(self, base_dir: Path | str) -> None:
        self._base_dir = Path(base_dir)
        self._base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, mindmap_id: str) -> Path:
        return self._base_dir / f"{viewport_storage_key(mindmap_id)}.json"

    def load(self, mindmap_id: str) -> Viewport | None:
        path = self._path(mindmap_id)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
            if isinstance(raw, dict):
                return Viewport.from_dict(raw)
        except (json.JSONDecodeError, TypeError, ValueError):
            logger.warning(f"Ignoring unreadable viewport file {path}")
        return None

    def save(self, mindmap_id: str, viewport: Viewport) -> None:
        with self._path(mindmap_id).open("w", encoding="utf-8") as handle:
            json.dump(viewport.to_dict(), handle, indent=2)

    def remove(self, mindmap_id: str) -> None:
        path = self._path(mindmap_id)
        if path.exists():
            path.unlink()


class ViewportAutosave:
    """Polls the live viewport and debounces changes into the local store.

    A move past the significant-change threshold, measured from the last
    saved viewport, calls ``on_significant_change`` so the editor can mark
    itself dirty.
    """

    def __init__(
        self,
        store: LocalViewportStore,
        mindmap_id: str,
        get_viewport: Callable[[], Viewport],
        on_significant_change: Callable[[], None] | None = None,
        poll_interval: float = 0.5,
        debounce_delay: float = 2.0,
    ) -> None:
        self._store = store
        self._mindmap_id = mindmap_id
        self._get_viewport = get_viewport
        self._on_significant_change = on_significant_change
        self._poller = IntervalTimer(poll_interval, self.poll)
        self._debouncer = Debouncer(debounce_delay, self._save_async)
        self._last_seen: Optional[Viewport] = None
        self.last_saved: Optional[Viewport] = None

    def restore(self) -> Viewport:
        """Stored viewport for the mindmap, or the default one."""
        saved = self._store.load(self._mindmap_id)
        self.last_saved = saved
        self._last_seen = saved or Viewport()
        return self._last_seen

    def start(self) -> None:
        self._poller.start()

    async def poll(self) -> None:
        current = self._get_viewport()
        if self._last_seen is not None and not current.moved_beyond(self._last_seen, POLL_MOVE_PX):
            return
        self._last_seen = current
        self._debouncer.trigger()
        if (
            self._on_significant_change is not None
            and self.last_saved is not None
            and current.moved_beyond(self.last_saved, SIGNIFICANT_MOVE_PX)
        ):
            self._on_significant_change()

    def save_now(self) -> Viewport:
        self._debouncer.cancel()
        current = self._get_viewport()
        self._store.save(self._mindmap_id, current)
        self.last_saved = current
        logger.debug(f"Saved viewport for mindmap {self._mindmap_id}: {current}")
        return current

    async def _save_async(self) -> None:
        self.save_now()

    async def flush(self) -> None:
        await self._debouncer.flush()

    def close(self) -> None:
        self._poller.stop()
        self._debouncer.cancel()
