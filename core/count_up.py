# core/count_up.py
import asyncio
import math
import time
from typing import Any, Callable, Optional, Protocol

TICK_MS: int = 16  # ~60 Hz
FORMAT_DELAY_MS: int = 500
MILLION_LABEL: str = "1M"


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    # asyncio.AbstractEventLoop satisfies this.
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


def ease_out_quart(p: float) -> float:
    return 1 - (1 - p) ** 4


def value_at(target: float, elapsed_ms: float, duration_ms: float) -> int:
    """
    Displayed value `elapsed_ms` into an animation of `duration_ms`.
    Progress is clamped to [0, 1]; full progress returns `target` exactly.
    """
    if duration_ms <= 0:
        return target  # type: ignore[return-value]
    progress = min(max(elapsed_ms / duration_ms, 0.0), 1.0)
    if progress >= 1:
        return target  # type: ignore[return-value]
    return math.floor(target * ease_out_quart(progress))


def display_value(count: int, formatted: bool, suffix: str = "") -> str:
    """Achievement card text: "1M+" once formatted, else "12,345<suffix>"."""
    if formatted:
        return f"{MILLION_LABEL}+"
    return f"{count:,}{suffix}"


class CountUpAnimator:
    """
    Drives `displayed` from 0 to `target` with an ease-out-quart curve.

    One timer handle is live at a time; every restart and `close()` cancels
    it first so two ticks never write the same display.
    """

    def __init__(
        self,
        target: float,
        *,
        duration_ms: int = 2000,
        delay_ms: int = 0,
        is_million_views: bool = False,
        interval_ms: int = TICK_MS,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Callable[[], float]] = None,
        on_change: Optional[Callable[["CountUpAnimator"], None]] = None,
    ) -> None:
        self.target = target
        self.duration_ms = duration_ms
        self.delay_ms = delay_ms
        self.is_million_views = is_million_views
        self.interval_ms = interval_ms
        self._scheduler = scheduler
        self._clock = clock or time.monotonic
        self._on_change = on_change

        self.displayed: float = 0
        self.formatted: bool = False
        self.finished: bool = False
        self._trigger = False
        self._start_at = 0.0
        self._handle: Optional[TimerHandle] = None

    # ---------------- Inputs ----------------

    @property
    def trigger(self) -> bool:
        return self._trigger

    def set_trigger(self, trigger: bool) -> None:
        if trigger == self._trigger:
            return
        self._trigger = trigger
        if trigger:
            self._restart()
        else:
            self.cancel()

    def set_target(self, target: float) -> None:
        if target == self.target:
            return
        self.target = target
        if self._trigger:
            self._restart()

    # ---------------- Lifecycle ----------------

    @property
    def running(self) -> bool:
        return self._handle is not None

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def close(self) -> None:
        self.cancel()

    def _restart(self) -> None:
        self.cancel()
        self.displayed = 0
        self.formatted = False
        self.finished = False
        self._start_at = self._clock() + self.delay_ms / 1000
        self._notify()
        self._schedule(self.interval_ms, self._tick)

    def _schedule(self, delay_ms: float, callback: Callable[[], None]) -> None:
        scheduler = self._scheduler or asyncio.get_running_loop()
        self._handle = scheduler.call_later(delay_ms / 1000, callback)

    def _tick(self) -> None:
        self._handle = None
        now = self._clock()
        if now < self._start_at:
            self._schedule(self.interval_ms, self._tick)
            return

        elapsed_ms = (now - self._start_at) * 1000
        self.displayed = value_at(self.target, elapsed_ms, self.duration_ms)
        if elapsed_ms >= self.duration_ms:
            self.displayed = self.target
            self.finished = True
            self._notify()
            if self.is_million_views:
                self._schedule(FORMAT_DELAY_MS, self._mark_formatted)
            return

        self._notify()
        self._schedule(self.interval_ms, self._tick)

    def _mark_formatted(self) -> None:
        self._handle = None
        self.formatted = True
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
