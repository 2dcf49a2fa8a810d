# relay_agent/application/relay_service.py
import logging
import time
from typing import Callable

from relay_agent.core.status_publisher import StatusPublisher, StatusPublishTrigger
from relay_agent.domain.relay.enums import ActuatorState
from relay_agent.infrastructure.gpio.pins import RelayOutput, StatusLed

logging = logging.getLogger(__name__)


class RelayService:
    """The single actuator: relay output plus the status LED mirroring it."""

    def __init__(
        self,
        relay: RelayOutput,
        status_led: StatusLed,
        publisher: StatusPublisher,
        settle_ms: int = 50,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.relay = relay
        self.status_led = status_led
        self.publisher = publisher
        self.settle_ms = settle_ms
        self._sleep = sleep

    def current_state(self) -> ActuatorState:
        return self.relay.read_state()

    def set_state(self, target: ActuatorState, announce: bool) -> None:
        self.relay.write(target)
        self.status_led.set(target.is_on)

        # Intentional blocking point: masks relay-coil bounce.
        if self.settle_ms:
            self._sleep(self.settle_ms / 1000)

        logging.info(f"RelayService: relay set to {target.value.upper()} (announce={announce})")

        if announce:
            self.publisher.publish_state(target, StatusPublishTrigger.STATE_CHANGE)

    def toggle(self, announce: bool) -> ActuatorState:
        target = self.current_state().complement()
        self.set_state(target, announce)
        return target

    def blink_status_led(self) -> None:
        self.status_led.toggle()

    def sync_status_led(self) -> None:
        self.status_led.set(self.current_state().is_on)
