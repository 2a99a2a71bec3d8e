r"""
Spawn/collection lifecycle of one treasure hunt session.

    IDLE -> SELECTING -> AWAITING_TRACKING -> SPAWNED -> COLLECTING -> COLLECTED -> DONE
                 \               \               \            \
                  +---------------+---------------+------------+--> ABORTED

A session lives on one asyncio event loop. Catalog reads and the collection
write run on worker threads through asyncio.to_thread, each with its own
SQLAlchemy session. The guard states SPAWNED and COLLECTING are entered in
the same synchronous call as the triggering event, so a duplicate trigger
finds the session already moved on and is ignored.
"""

import asyncio
import logging
import random
import uuid
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from treasure_hunt.config import Settings, get_settings
from treasure_hunt.database import SessionFactory
from treasure_hunt.game.collaborators import Notifier, Renderer, TrackingProvider
from treasure_hunt.game.errors import (
    InvalidTransition, PersistenceError, PoseUnavailable, TrackingTimeout, TreasureNotFound
)
from treasure_hunt.game.placement import PlacementEngine, Pose
from treasure_hunt.game.readiness import ReadinessGate
from treasure_hunt.models.enums import AbortReason, NotificationLevel, SelectionMode, SessionState
from treasure_hunt.schemas.catalog import TreasureResponse
from treasure_hunt.services.catalog_service import CatalogService
from treasure_hunt.services.selection_service import SelectionPolicy

logger = logging.getLogger(__name__)

_TRANSITIONS = {
    SessionState.IDLE: {SessionState.SELECTING, SessionState.ABORTED},
    SessionState.SELECTING: {SessionState.AWAITING_TRACKING, SessionState.ABORTED},
    SessionState.AWAITING_TRACKING: {SessionState.SPAWNED, SessionState.ABORTED},
    SessionState.SPAWNED: {SessionState.COLLECTING, SessionState.ABORTED},
    SessionState.COLLECTING: {SessionState.COLLECTED, SessionState.ABORTED},
    SessionState.COLLECTED: {SessionState.DONE},
    SessionState.DONE: set(),
    SessionState.ABORTED: set(),
}

TERMINAL_STATES = {SessionState.COLLECTED, SessionState.DONE, SessionState.ABORTED}

NOT_FOUND_MESSAGE = "That treasure could not be found."
ALL_COLLECTED_MESSAGE = "You have already collected every treasure!"
SCOPE_COLLECTED_MESSAGE = "Every treasure in this area has already been collected!"
SPOTTED_MESSAGE = "A treasure chest has appeared!"
SAVE_FAILED_MESSAGE = "Your treasure could not be saved. Please try again."


@dataclass
class SpawnRecord:
    """What one session spawned. Never persisted."""
    treasure: TreasureResponse
    transform: Optional[Pose] = None
    handle: Any = None


class TreasureHuntSession:
    """
    One attempt at finding a treasure.

    Hosts call run() when the tracking session starts, forward taps on the
    collectible to on_interaction(), call acknowledge() when the player
    dismisses the result and cancel() when the screen goes away.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        policy: SelectionPolicy,
        tracker: TrackingProvider,
        renderer: Renderer,
        notifier: Notifier,
        placement: Optional[PlacementEngine] = None,
        gate: Optional[ReadinessGate] = None,
        model_ref: str = "treasure_chest.glb",
        spawn_delay: float = 0.0,
        reveal_delay: float = 0.0,
        abort_message_duration: float = 2.0,
        retry_attempts: int = 3,
        retry_delay: float = 0.5,
    ):
        self.session_id = uuid.uuid4().hex[:8]
        self.session_factory = session_factory
        self.policy = policy
        self.tracker = tracker
        self.renderer = renderer
        self.notifier = notifier
        self.placement = placement or PlacementEngine()
        self.gate = gate or ReadinessGate(tracker, notifier)
        self.model_ref = model_ref
        self.spawn_delay = spawn_delay
        self.reveal_delay = reveal_delay
        self.abort_message_duration = abort_message_duration
        self.retry_attempts = max(1, retry_attempts)
        self.retry_delay = retry_delay

        self.state = SessionState.IDLE
        self.history: List[SessionState] = [SessionState.IDLE]
        self.abort_reason: Optional[AbortReason] = None
        self.treasure: Optional[TreasureResponse] = None
        self.record: Optional[SpawnRecord] = None
        # Set once the collection write has committed, even if the session ended meanwhile
        self.saved = False

        self._run_task: Optional[asyncio.Task] = None
        self._collect_task: Optional[asyncio.Task] = None

    @classmethod
    def from_settings(
        cls,
        session_factory: SessionFactory,
        policy: SelectionPolicy,
        tracker: TrackingProvider,
        renderer: Renderer,
        notifier: Notifier,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
    ) -> "TreasureHuntSession":
        """Build a session with timings and placement taken from settings"""
        settings = settings or get_settings()
        placement = PlacementEngine(
            offset_y=settings.PLACEMENT_OFFSET_Y,
            offset_z=settings.PLACEMENT_OFFSET_Z,
            jitter_x=settings.PLACEMENT_JITTER_X,
            rng=rng or random.Random(),
        )
        gate = ReadinessGate(
            tracker,
            notifier,
            poll_interval=settings.TRACKING_POLL_INTERVAL_SECONDS,
            timeout=settings.TRACKING_TIMEOUT_SECONDS,
        )
        return cls(
            session_factory,
            policy,
            tracker,
            renderer,
            notifier,
            placement=placement,
            gate=gate,
            model_ref=settings.MODEL_REF,
            spawn_delay=settings.SPAWN_DELAY_SECONDS,
            reveal_delay=settings.REVEAL_DELAY_SECONDS,
            abort_message_duration=settings.ABORT_MESSAGE_SECONDS,
            retry_attempts=settings.COLLECT_RETRY_ATTEMPTS,
            retry_delay=settings.COLLECT_RETRY_DELAY_SECONDS,
        )

    @property
    def is_finished(self) -> bool:
        return self.state in TERMINAL_STATES

    # --- Lifecycle ---

    async def run(self) -> SessionState:
        """
        Select a treasure, wait for tracking and spawn it.

        Returns once the collectible is spawned or the session aborted.
        Errors end the session; only cancellation propagates.
        """
        if self.state != SessionState.IDLE:
            logger.warning(f"Session {self.session_id}: run() called in state {self.state.value}, ignoring")
            return self.state

        self._run_task = asyncio.current_task()
        try:
            if self.spawn_delay:
                await asyncio.sleep(self.spawn_delay)
            self._transition(SessionState.SELECTING)

            try:
                treasure = await self._select()
            except TreasureNotFound as e:
                self._abort_not_found(e)
                return self.state
            except Exception as e:
                logger.error(f"Session {self.session_id}: selection failed: {str(e)}")
                self._abort(AbortReason.SELECTION_FAILED)
                return self.state

            self.treasure = treasure
            self.record = SpawnRecord(treasure=treasure)
            logger.info(f"Session {self.session_id}: selected {treasure.name} (ID: {treasure.id})")
            self._transition(SessionState.AWAITING_TRACKING)

            try:
                await self.gate.wait_until_ready()
            except TrackingTimeout as e:
                logger.warning(f"Session {self.session_id}: {str(e)}")
                self._abort(AbortReason.TRACKING_TIMEOUT)
                return self.state
            except Exception as e:
                logger.error(f"Session {self.session_id}: tracking failed: {str(e)}")
                self._abort(AbortReason.TRACKING_FAILED)
                return self.state

            self.spawn()
            return self.state
        except asyncio.CancelledError:
            if not self.is_finished:
                self._abort(AbortReason.CANCELLED)
            raise
        finally:
            self._run_task = None

    def spawn(self) -> bool:
        """
        Place and instantiate the collectible.

        Only the first call after tracking is ready does anything; every
        other call returns False.
        """
        if self.state != SessionState.AWAITING_TRACKING or not self.gate.is_ready:
            logger.debug(f"Session {self.session_id}: spawn ignored in state {self.state.value}")
            return False

        try:
            transform = self.placement.place(self.tracker)
        except PoseUnavailable as e:
            logger.warning(f"Session {self.session_id}: {str(e)}, abandoning spawn")
            self._abort(AbortReason.POSE_UNAVAILABLE)
            return False
        except Exception as e:
            logger.error(f"Session {self.session_id}: reading the viewer pose failed: {str(e)}")
            self._abort(AbortReason.TRACKING_FAILED)
            return False

        # Entered before instantiate so re-entry from the renderer is a no-op
        self._transition(SessionState.SPAWNED)
        self.record.transform = transform

        try:
            self.record.handle = self.renderer.instantiate(transform, self.model_ref)
        except Exception as e:
            logger.error(f"Session {self.session_id}: renderer failed to instantiate {self.model_ref}: {str(e)}")
            self._abort(AbortReason.SPAWN_FAILED)
            return False

        logger.info(f"Session {self.session_id}: spawned {self.model_ref} at {transform.translation}")
        self._notify(SPOTTED_MESSAGE, NotificationLevel.SUCCESS)
        return True

    def on_interaction(self, handle) -> bool:
        """
        Handle a tap on the spawned collectible.

        The object is made non-interactive and the session moves to
        COLLECTING before the write is scheduled, so only one tap is ever
        turned into a collection.
        """
        if self.state != SessionState.SPAWNED or self.record is None or handle != self.record.handle:
            logger.debug(f"Session {self.session_id}: interaction ignored in state {self.state.value}")
            return False

        self.renderer.set_interactive(handle, False)
        self._transition(SessionState.COLLECTING)
        self._collect_task = asyncio.get_running_loop().create_task(self._collect(self.record.treasure))
        return True

    async def wait_collected(self) -> bool:
        """Wait for the collection started by on_interaction(); True if it was saved"""
        if self._collect_task is None:
            return False
        try:
            return await self._collect_task
        except asyncio.CancelledError:
            return self.saved

    def acknowledge(self) -> bool:
        """The player dismissed the result: release the collectible and finish"""
        if self.state != SessionState.COLLECTED:
            return False
        self._release()
        self._transition(SessionState.DONE)
        return True

    def cancel(self) -> None:
        """
        End the session from the host side.

        Stops the tracking wait, abandons any pending collection write and
        releases the collectible. A finished session is left alone, except
        that a COLLECTED session is wrapped up as if acknowledged. A session
        whose write already committed is wrapped up the same way.
        """
        if self.state in (SessionState.DONE, SessionState.ABORTED):
            return
        if self.state == SessionState.COLLECTING and self.saved:
            self._transition(SessionState.COLLECTED)
            self._cancel_tasks()
            self.acknowledge()
            return
        if self.state == SessionState.COLLECTED:
            self.acknowledge()
            return
        self._abort(AbortReason.CANCELLED)

    # --- Internals ---

    async def _collect(self, treasure: TreasureResponse) -> bool:
        last_error: Optional[BaseException] = None

        for attempt in range(1, self.retry_attempts + 1):
            if self.state != SessionState.COLLECTING:
                logger.info(f"Session {self.session_id}: ended before treasure {treasure.id} was saved")
                return False
            try:
                await self._in_worker(lambda catalog: self._mark_collected(catalog, treasure.id))
                break
            except Exception as e:
                last_error = e
                logger.warning(
                    f"Session {self.session_id}: saving treasure {treasure.id} failed "
                    f"(attempt {attempt}/{self.retry_attempts}): {str(e)}"
                )
                if attempt < self.retry_attempts:
                    await asyncio.sleep(self.retry_delay)
        else:
            error = PersistenceError(treasure.id, self.retry_attempts, last_error)
            logger.error(f"Session {self.session_id}: {str(error)}")
            self._notify(SAVE_FAILED_MESSAGE, NotificationLevel.ERROR, self.abort_message_duration)
            self._abort(AbortReason.PERSISTENCE_FAILED)
            return False

        logger.info(f"Session {self.session_id}: collected {treasure.name} (ID: {treasure.id})")

        # Let the opening animation play
        if self.reveal_delay:
            await asyncio.sleep(self.reveal_delay)

        if self.state != SessionState.COLLECTING:
            return True

        self._transition(SessionState.COLLECTED)
        try:
            self.notifier.show_result(treasure)
        except Exception as e:
            logger.error(f"Session {self.session_id}: failed to show result: {str(e)}")
        return True

    def _mark_collected(self, catalog: CatalogService, treasure_id: int) -> None:
        catalog.mark_collected(treasure_id)
        self.saved = True

    async def _select(self) -> TreasureResponse:
        treasure = await self._in_worker(self.policy.select)
        if treasure is None:
            raise TreasureNotFound(self.policy.mode)
        return treasure

    async def _in_worker(self, operation: Callable[[CatalogService], Any]) -> Any:
        """Run a catalog operation on a worker thread with its own DB session"""
        def _call():
            db = self.session_factory()
            try:
                return operation(CatalogService(db))
            finally:
                db.close()

        return await asyncio.to_thread(_call)

    def _abort_not_found(self, error: TreasureNotFound) -> None:
        if self.policy.mode == SelectionMode.BY_NAME:
            reason, message = AbortReason.NOT_FOUND, NOT_FOUND_MESSAGE
        elif self.policy.mode == SelectionMode.SCOPED:
            reason, message = AbortReason.ALL_COLLECTED, SCOPE_COLLECTED_MESSAGE
        else:
            reason, message = AbortReason.ALL_COLLECTED, ALL_COLLECTED_MESSAGE

        logger.info(f"Session {self.session_id}: {str(error)} ({reason.value})")
        self._notify(message, NotificationLevel.WARNING, self.abort_message_duration)
        self._abort(reason)

    def _abort(self, reason: AbortReason) -> None:
        self._transition(SessionState.ABORTED)
        self.abort_reason = reason
        self._release()
        self._cancel_tasks()

    def _cancel_tasks(self) -> None:
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        for task in (self._run_task, self._collect_task):
            if task is not None and task is not current and not task.done():
                task.cancel()

    def _release(self) -> None:
        record, self.record = self.record, None
        if record is None or record.handle is None:
            return
        try:
            self.renderer.destroy(record.handle)
        except Exception as e:
            logger.error(f"Session {self.session_id}: failed to destroy collectible: {str(e)}")

    def _notify(self, message: str, level: NotificationLevel, duration: Optional[float] = None) -> None:
        try:
            if duration is None:
                self.notifier.notify(message, level)
            else:
                self.notifier.notify(message, level, duration)
        except Exception as e:
            logger.error(f"Session {self.session_id}: failed to notify \"{message}\": {str(e)}")

    def _transition(self, target: SessionState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise InvalidTransition(self.state, target)
        logger.info(f"Session {self.session_id}: {self.state.value} -> {target.value}")
        self.state = target
        self.history.append(target)

    def __repr__(self):
        return f"<TreasureHuntSession {self.session_id} state={self.state.value}>"
