"""
Sync Controller - owns the mode selection and the published Snapshot.

Two producers feed fetches into the controller:
- the poll timer (every ``poll_interval_ms``)
- operator actions (switch mode, start, pause, reset)

Fetches run as independent tasks and may complete in any order. The
freshness guard runs when each task resumes on the event loop. A Snapshot is
published only if the controller is still running and:
- its mode is still the selected mode
- no fetch issued after it has already been published
Stale results are dropped, never cancelled in flight.
"""

import asyncio
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from core.config import settings
from core.errors import FetchError
from core.interfaces import IControlApi, ISnapshotFetcher
from core.logging_utils import get_logger
from core.models import ControlAck, Snapshot
from core.modes import Mode

logger = get_logger(__name__, tag="SYNC")

SnapshotCallback = Callable[[Snapshot], None]
ErrorCallback = Callable[[FetchError], None]


class SyncState(str, Enum):
    """Controller lifecycle. Combined with ``mode`` for SYNCING(mode)/LIVE(mode)."""
    IDLE = "idle"
    SYNCING = "syncing"
    LIVE = "live"
    STOPPED = "stopped"


class SyncController:
    """
    Keeps the displayed Snapshot consistent with the selected mode.

    Usage by the presentation layer:
        controller = SyncController(fetcher, api, on_snapshot=render, on_error=show)
        await controller.start(Mode.TRAINING)
        controller.switch_mode(Mode.TRADING)
        await controller.pause()
        await controller.stop()
    """

    def __init__(
        self,
        fetcher: ISnapshotFetcher,
        control: IControlApi,
        poll_interval_ms: Optional[int] = None,
        on_snapshot: Optional[SnapshotCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ):
        self.fetcher = fetcher
        self.control = control
        self.poll_interval_ms = poll_interval_ms if poll_interval_ms is not None else settings.poll_interval_ms
        if self.poll_interval_ms <= 0:
            raise ValueError("poll_interval_ms must be positive")

        self._mode: Mode = settings.default_mode
        self._state = SyncState.IDLE
        self._snapshot: Optional[Snapshot] = None
        self._timer_task: Optional[asyncio.Task] = None
        self._inflight: set[asyncio.Task] = set()
        # Fetches are numbered in issue order; only newer ones may replace the shown Snapshot
        self._issued_seq = 0
        self._published_seq = 0

        self._snapshot_callbacks: list[SnapshotCallback] = []
        self._error_callbacks: list[ErrorCallback] = []
        if on_snapshot:
            self.on_snapshot(on_snapshot)
        if on_error:
            self.on_error(on_error)

        # Stats
        self.ticks = 0
        self.published = 0
        self.discarded = 0
        self.failures = 0

    # === State ===

    @property
    def mode(self) -> Mode:
        """The currently selected mode."""
        return self._mode

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def snapshot(self) -> Optional[Snapshot]:
        """Latest accepted Snapshot (may belong to the previous mode until the first fetch lands)."""
        return self._snapshot

    @property
    def is_stopped(self) -> bool:
        return self._state is SyncState.STOPPED

    def on_snapshot(self, callback: SnapshotCallback) -> None:
        self._snapshot_callbacks.append(callback)

    def on_error(self, callback: ErrorCallback) -> None:
        self._error_callbacks.append(callback)

    # === Lifecycle ===

    async def start(self, mode: Union[Mode, str, None] = None) -> asyncio.Task:
        """Begin syncing. Fetches immediately, then every poll interval."""
        self._ensure_active()
        if self._state is SyncState.IDLE:
            logger.info("Started (poll every %dms)", self.poll_interval_ms)
        return self.switch_mode(mode if mode is not None else self._mode)

    async def stop(self) -> None:
        """Stop polling. Fetches still in flight complete but are discarded."""
        if self._state is SyncState.STOPPED:
            return
        self._state = SyncState.STOPPED
        if self._timer_task and not self._timer_task.done():
            self._timer_task.cancel()
        self._timer_task = None
        logger.info("Stopped (%d in flight will be discarded)", len(self._inflight))

    async def wait_idle(self) -> None:
        """Wait until no fetch is in flight."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    # === Operator actions ===

    def switch_mode(self, mode: Union[Mode, str]) -> asyncio.Task:
        """Select ``mode``, fetch for it now and restart the poll timer from now."""
        self._ensure_active()
        mode = Mode.parse(mode)
        previous = self._mode
        self._mode = mode

        if self._snapshot is None or self._snapshot.mode != mode:
            self._state = SyncState.SYNCING
        if previous != mode:
            logger.info("Mode %s -> %s", previous.value, mode.value)

        task = self._request_fetch(mode)
        self._arm_timer()
        return task

    def refresh(self) -> asyncio.Task:
        """Fetch for the current selection now, without touching the timer."""
        self._ensure_started()
        return self._request_fetch(self._mode)

    async def start_bot(self, mode: Union[Mode, str]) -> Optional[ControlAck]:
        """Select ``mode`` and ask the server to run the bot in it.

        A failed start does not roll back the selection; the follow-up fetch
        shows the real bot status.
        """
        self.switch_mode(mode)
        target = self._mode
        ack = await self._send_control(f"start {target.value}", lambda: self.control.start_bot(target))
        self._refetch_after_control()
        return ack

    async def pause(self) -> Optional[ControlAck]:
        """Halt the bot server-side. Selection is unchanged."""
        self._ensure_started()
        ack = await self._send_control("pause", self.control.pause_bot)
        self._refetch_after_control()
        return ack

    async def reset(self) -> Optional[ControlAck]:
        """Clear the bot's accumulated trades and holdings server-side."""
        self._ensure_started()
        ack = await self._send_control("reset", self.control.reset_bot)
        self._refetch_after_control()
        return ack

    # === Internals ===

    def _ensure_active(self) -> None:
        if self._state is SyncState.STOPPED:
            raise RuntimeError("SyncController is stopped")

    def _ensure_started(self) -> None:
        self._ensure_active()
        if self._state is SyncState.IDLE:
            raise RuntimeError("SyncController has not been started")

    async def _send_control(
        self, action: str, call: Callable[[], Awaitable[ControlAck]]
    ) -> Optional[ControlAck]:
        try:
            ack = await call()
        except FetchError as e:
            logger.warning("Control '%s' failed: %s", action, e)
            self._emit_error(e)
            return None
        if not ack.ok:
            logger.warning("Control '%s' not acknowledged: %s %s", action, ack.status, ack.message)
        return ack

    def _refetch_after_control(self) -> None:
        # stop() may have landed while the command was in flight
        if self._state is not SyncState.STOPPED:
            self._request_fetch(self._mode)

    def _arm_timer(self) -> None:
        if self._timer_task and not self._timer_task.done():
            self._timer_task.cancel()
        self._timer_task = asyncio.create_task(self._timer_loop(), name="sync-timer")

    async def _timer_loop(self) -> None:
        interval = self.poll_interval_ms / 1000.0
        while self._state is not SyncState.STOPPED:
            await asyncio.sleep(interval)
            if self._state is SyncState.STOPPED:
                break
            self.ticks += 1
            # Read the selection at fire time, not at arm time
            self._request_fetch(self._mode)

    def _request_fetch(self, mode: Mode) -> asyncio.Task:
        self._issued_seq += 1
        task = asyncio.create_task(
            self._run_fetch(mode, self._issued_seq), name=f"sync-fetch-{mode.value}-{self._issued_seq}"
        )
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _run_fetch(self, mode: Mode, seq: int) -> bool:
        """Fetch for ``mode``; returns True if the result was published."""
        try:
            snapshot = await self.fetcher.fetch_all(mode)
        except FetchError as e:
            self._handle_failure(mode, seq, e)
            return False
        except Exception as e:
            self.failures += 1
            logger.error("Unexpected fetch error for %s: %s", mode.value, e, exc_info=True)
            return False
        return self._accept(snapshot, seq)

    def _accept(self, snapshot: Snapshot, seq: int) -> bool:
        if self._state is SyncState.STOPPED:
            self.discarded += 1
            logger.debug("Discarding %s snapshot (stopped)", snapshot.mode.value)
            return False
        if snapshot.mode != self._mode:
            self.discarded += 1
            logger.debug(
                "Discarding stale %s snapshot (selected %s)",
                snapshot.mode.value, self._mode.value,
            )
            return False
        if seq < self._published_seq:
            self.discarded += 1
            logger.debug(
                "Discarding %s snapshot #%d (#%d already published)",
                snapshot.mode.value, seq, self._published_seq,
            )
            return False

        self._snapshot = snapshot
        self._published_seq = seq
        self._state = SyncState.LIVE
        self.published += 1
        for cb in list(self._snapshot_callbacks):
            try:
                cb(snapshot)
            except Exception as e:
                logger.warning("Snapshot callback error: %s", e)
        return True

    def _handle_failure(self, mode: Mode, seq: int, error: FetchError) -> None:
        self.failures += 1
        if self._state is SyncState.STOPPED or mode != self._mode or seq < self._published_seq:
            logger.debug("Ignoring failure of stale %s fetch #%d: %s", mode.value, seq, error)
            return
        logger.warning("Fetch for %s failed, keeping previous snapshot: %s", mode.value, error)
        self._emit_error(error)

    def _emit_error(self, error: FetchError) -> None:
        for cb in list(self._error_callbacks):
            try:
                cb(error)
            except Exception as e:
                logger.warning("Error callback error: %s", e)

    def get_stats(self) -> dict:
        """Get controller statistics."""
        return {
            "state": self._state.value,
            "mode": self._mode.value,
            "ticks": self.ticks,
            "published": self.published,
            "discarded": self.discarded,
            "failures": self.failures,
            "in_flight": len(self._inflight),
        }
