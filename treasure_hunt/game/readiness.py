import asyncio
import logging
from typing import Optional

from treasure_hunt.models.enums import GateState, NotificationLevel, TrackingStatus
from treasure_hunt.game.collaborators import Notifier, TrackingProvider
from treasure_hunt.game.errors import TrackingTimeout

logger = logging.getLogger(__name__)

ACQUIRING_MESSAGE = "Scanning your surroundings... move your device around a little."


class ReadinessGate:
    """
    Holds a session back until the tracker reports a usable pose.

    The wait is an ordinary coroutine: cancelling the task that awaits it
    stops the polling immediately, and no notification is sent afterwards.
    """

    def __init__(
        self,
        tracker: TrackingProvider,
        notifier: Notifier,
        poll_interval: float = 1.0,
        timeout: Optional[float] = None,
        message_duration: float = 1.0,
    ):
        self.tracker = tracker
        self.notifier = notifier
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.message_duration = message_duration
        self.state = GateState.WAITING
        self.polls = 0

    @property
    def is_ready(self) -> bool:
        return self.state == GateState.READY

    async def wait_until_ready(self) -> None:
        """
        Poll tracking until it reports TRACKING.

        Raises:
            TrackingTimeout: If a timeout is configured and runs out first
        """
        if self.is_ready:
            return

        if self.timeout is None:
            await self._poll()
            return

        try:
            await asyncio.wait_for(self._poll(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Tracking not ready after {self.timeout}s ({self.polls} polls)")
            raise TrackingTimeout(self.timeout)

    async def _poll(self) -> None:
        self.state = GateState.WAITING
        while True:
            self.polls += 1
            status = self.tracker.tracking_status()
            if status == TrackingStatus.TRACKING:
                self.state = GateState.READY
                logger.info(f"Tracking ready after {self.polls} poll(s)")
                return

            logger.debug(f"Tracking status {status.value}, waiting")
            self.notifier.notify(ACQUIRING_MESSAGE, NotificationLevel.INFO, self.message_duration)
            await asyncio.sleep(self.poll_interval)
