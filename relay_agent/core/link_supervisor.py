"""Retry state machine shared by the network and broker links.

Each tick the supervisor checks the link, and while it is down starts at most
one attempt per retry interval. An attempt that leaves the link down counts
as a failure; crossing the failure ceiling escalates.
"""

import logging
from typing import Callable, Optional, Protocol

from relay_agent.domain.link.link_state import ConnectionAttemptState, LinkStatus
from relay_agent.domain.relay.enums import ActuatorState

logger = logging.getLogger(__name__)


class Link(Protocol):
    def attempt(self) -> None: ...

    def is_up(self) -> bool: ...


class Restarter(Protocol):
    def restart(self, reason: str) -> None: ...


class RestartEscalation:
    """Turns a persistent link failure into a device restart.

    A relay that is currently on is never interrupted: the counter is forgiven
    and retries continue.
    """

    def __init__(self, state_source: Callable[[], ActuatorState], restarter: Restarter):
        self._state_source = state_source
        self._restarter = restarter

    def escalate(self, link_state: ConnectionAttemptState) -> None:
        failures = link_state.consecutive_failures
        link_state.consecutive_failures = 0

        if self._state_source() is ActuatorState.ON:
            logger.warning(
                "%s link failed %s times; relay is ON, keep retrying",
                link_state.name,
                failures,
            )
            return

        self._restarter.restart(f"{link_state.name} link failed {failures} consecutive attempts")


class LinkSupervisor:

    def __init__(
        self,
        name: str,
        link: Link,
        retry_interval_ms: int,
        max_failures: int,
        escalation: RestartEscalation,
        clock: Callable[[], int],
        on_up: Optional[Callable[[], None]] = None,
        on_failed_attempt: Optional[Callable[[], None]] = None,
    ):
        self.state = ConnectionAttemptState(name=name)
        self.link = link
        self.retry_interval_ms = retry_interval_ms
        self.max_failures = max_failures
        self.escalation = escalation
        self._clock = clock
        self._on_up = on_up
        self._on_failed_attempt = on_failed_attempt

    @property
    def name(self) -> str:
        return self.state.name

    def is_up(self) -> bool:
        return self.state.is_up

    def step(self) -> LinkStatus:
        if self.link.is_up():
            if not self.state.is_up:
                self._enter_up()
            return LinkStatus.UP

        if self.state.is_up:
            logger.warning("%s link lost", self.name)
            self.state.is_up = False

        now = self._clock()
        last = self.state.last_attempt_ms
        if last is not None and now - last < self.retry_interval_ms:
            return self.state.status

        self.state.last_attempt_ms = now
        logger.info(
            "%s link down, attempt %s/%s",
            self.name,
            self.state.consecutive_failures + 1,
            self.max_failures,
        )
        self.link.attempt()

        # A blocking attempt may already have brought the link up.
        if self.link.is_up():
            self._enter_up()
            return LinkStatus.UP

        self.state.consecutive_failures += 1
        if self._on_failed_attempt is not None:
            self._on_failed_attempt()

        if self.state.consecutive_failures > self.max_failures:
            self.escalation.escalate(self.state)

        return self.state.status

    def _enter_up(self) -> None:
        logger.info(
            "%s link up after %s attempt(s)",
            self.name,
            self.state.consecutive_failures,
        )
        self.state.is_up = True
        self.state.consecutive_failures = 0
        if self._on_up is not None:
            self._on_up()
