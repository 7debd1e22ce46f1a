"""Batched position autosave and per-field content autosave."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from planmap.client.timers import Debouncer, IntervalTimer

logger = logging.getLogger(__name__)

DEBOUNCE = "debounce"
INTERVAL = "interval"

Position = Dict[str, float]


@dataclass(frozen=True)
class AutosavePolicy:
    """Exactly one mode is active: save after an idle delay, or on a fixed tick."""
    mode: str = DEBOUNCE
    debounce_delay: float = 1.0
    interval: float = 5 * 60.0

    def __post_init__(self) -> None:
        if self.mode not in (DEBOUNCE, INTERVAL):
            raise ValueError(f"Unknown autosave mode: {self.mode!r}")

    @classmethod
    def from_settings(cls, settings) -> AutosavePolicy:
        return cls(
            mode=settings.AUTOSAVE_MODE,
            debounce_delay=settings.AUTOSAVE_DEBOUNCE_MS / 1000,
            interval=settings.AUTOSAVE_INTERVAL_MS / 1000,
        )


class PositionAutosave:
    """Collects drag-end positions per node and saves them in one batch.

    The latest position for a node wins. A failed save puts the batch back
    (without overwriting newer drags) and re-raises.
    """

    def __init__(self, policy: AutosavePolicy, save: Callable[[Dict[str, Position]], Awaitable[None]]) -> None:
        self.policy = policy
        self._save = save
        self.pending: Dict[str, Position] = {}
        self.dirty = False
        self._debouncer = Debouncer(policy.debounce_delay, self.flush)
        self._ticker: Optional[IntervalTimer] = None

    def start(self) -> None:
        if self.policy.mode == INTERVAL and self._ticker is None:
            self._ticker = IntervalTimer(self.policy.interval, self._tick)
            self._ticker.start()

    def record(self, node_id: str, position: Position) -> None:
        self.pending[node_id] = dict(position)
        self.mark_dirty()

    def mark_dirty(self) -> None:
        self.dirty = True
        if self.policy.mode == DEBOUNCE:
            self._debouncer.trigger()

    async def flush(self) -> None:
        self._debouncer.cancel()
        changes, self.pending = self.pending, {}
        self.dirty = False
        logger.debug(f"Saving {len(changes)} node positions")
        try:
            await self._save(changes)
        except Exception:
            for node_id, position in changes.items():
                self.pending.setdefault(node_id, position)
            self.dirty = True
            raise

    async def wait_idle(self) -> None:
        await self._debouncer.wait_idle()

    async def _tick(self) -> None:
        if self.dirty:
            await self.flush()

    def close(self) -> None:
        self._debouncer.cancel()
        if self._ticker is not None:
            self._ticker.stop()
            self._ticker = None


class ContentAutosave:
    """One debounce timer per field; each edit restarts only its own field's timer."""

    def __init__(self, delay: float, save: Callable[[str, Any], Awaitable[None]]) -> None:
        self.delay = delay
        self._save = save
        self._values: Dict[str, Any] = {}
        self._debouncers: Dict[str, Debouncer] = {}

    @property
    def pending(self) -> bool:
        return any(debouncer.pending for debouncer in self._debouncers.values())

    def edit(self, field: str, value: Any) -> None:
        self._values[field] = value
        debouncer = self._debouncers.get(field)
        if debouncer is None:
            debouncer = self._debouncers[field] = Debouncer(self.delay, lambda: self._save_field(field))
        debouncer.trigger()

    async def _save_field(self, field: str) -> None:
        if field in self._values:
            await self._save(field, self._values.pop(field))

    async def flush_all(self) -> None:
        for debouncer in list(self._debouncers.values()):
            await debouncer.flush()

    async def wait_idle(self) -> None:
        for debouncer in list(self._debouncers.values()):
            await debouncer.wait_idle()

    def close(self) -> None:
        for debouncer in self._debouncers.values():
            debouncer.cancel()
