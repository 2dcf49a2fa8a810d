# relay_agent/core/lifecycle.py
import asyncio
import logging
import time
from typing import Callable, Optional

from relay_agent.core.button_monitor import ButtonMonitor
from relay_agent.core.link_supervisor import LinkSupervisor
from relay_agent.core.mqtt_client import MQTTClient
from relay_agent.core.scheduler import IntervalScheduler
from relay_agent.domain.link.link_state import LinkStatus

logging = logging.getLogger(__name__)


def monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


class LifecycleController:
    """Steps every component once per tick, always in the same order.

    network -> broker (network up) -> message delivery (session open)
    -> update channel -> scheduled jobs -> button.
    """

    def __init__(
        self,
        network: LinkSupervisor,
        broker: LinkSupervisor,
        mqtt_client: MQTTClient,
        scheduler: IntervalScheduler,
        button_monitor: ButtonMonitor,
        update_service: Optional[Callable[[], None]] = None,
        tick_delay_ms: int = 10,
    ):
        self.network = network
        self.broker = broker
        self.mqtt_client = mqtt_client
        self.scheduler = scheduler
        self.button_monitor = button_monitor
        self.update_service = update_service
        self.tick_delay_ms = tick_delay_ms

    def tick(self) -> None:
        if self.network.step() is LinkStatus.UP:
            self.broker.step()

        if self.mqtt_client.is_connected():
            self.mqtt_client.loop()

        if self.update_service is not None:
            self.update_service()

        self.scheduler.service()
        self.button_monitor.sample()

    async def run(self) -> None:
        logging.info("Lifecycle loop started")
        delay = self.tick_delay_ms / 1000

        while True:
            self.tick()
            await asyncio.sleep(delay)
