# relay_agent/application/device_factory.py
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from relay_agent.application.relay_service import RelayService
from relay_agent.application.session_service import SessionService
from relay_agent.core.button_monitor import ButtonDebouncer, ButtonMonitor
from relay_agent.core.config import Settings
from relay_agent.core.lifecycle import LifecycleController, monotonic_ms
from relay_agent.core.link_supervisor import LinkSupervisor, Restarter, RestartEscalation
from relay_agent.core.mqtt_client import MQTTClient
from relay_agent.core.scheduler import IntervalScheduler
from relay_agent.core.status_publisher import StatusPublisher
from relay_agent.core.update_hooks import UpdateLifecycleHooks
from relay_agent.domain.models.identity import Identity
from relay_agent.infrastructure.gpio.gpio_controller import GPIOController
from relay_agent.infrastructure.gpio.pins import ButtonInput, RelayOutput, StatusLed
from relay_agent.infrastructure.network.broker_link import BrokerLink
from relay_agent.infrastructure.network.network_link import HostNetworkLink
from relay_agent.infrastructure.system.restarter import SystemRestarter
from relay_agent.infrastructure.update.update_channel import UpdateChannel
from relay_agent.interfaces.handlers.command_handler import CommandDispatcher


@dataclass
class RelayAgent:
    identity: Identity
    gpio: GPIOController
    mqtt_client: MQTTClient
    network_link: HostNetworkLink
    relay_service: RelayService
    publisher: StatusPublisher
    dispatcher: CommandDispatcher
    update_channel: UpdateChannel
    controller: LifecycleController

    def close(self) -> None:
        self.mqtt_client.close()
        self.update_channel.close()
        self.gpio.cleanup()


def build_agent(
    settings: Settings,
    gpio_backend,
    *,
    mqtt_client: Optional[MQTTClient] = None,
    network_link: Optional[HostNetworkLink] = None,
    restarter: Optional[Restarter] = None,
    clock: Callable[[], int] = monotonic_ms,
    sleep: Callable[[float], None] = time.sleep,
) -> RelayAgent:
    identity = Identity.from_device_name(settings.DEVICE_NAME)
    restarter = restarter or SystemRestarter()

    gpio = GPIOController(gpio_backend)
    relay = RelayOutput(gpio, settings.RELAY_PIN)
    status_led = StatusLed(gpio, settings.LED_PIN)
    button = ButtonInput(gpio, settings.BUTTON_PIN)

    mqtt_client = mqtt_client or MQTTClient(
        client_id=identity.host_name,
        host=settings.MQTT_HOST,
        port=settings.MQTT_PORT,
        username=settings.MQTT_USERNAME,
        password=settings.MQTT_PASSWORD,
        keepalive=settings.MQTT_KEEPALIVE,
        connect_timeout=settings.MQTT_CONNECT_TIMEOUT,
    )
    network_link = network_link or HostNetworkLink(
        probe_address=settings.NETWORK_PROBE_ADDRESS or settings.MQTT_HOST,
        ssid=settings.WIFI_SSID,
        password=settings.WIFI_PASSWORD,
        interface=settings.WIFI_INTERFACE,
    )

    publisher = StatusPublisher(mqtt_client, identity, state_source=relay.read_state)
    relay_service = RelayService(
        relay,
        status_led,
        publisher,
        settle_ms=settings.RELAY_SETTLE_MS,
        sleep=sleep,
    )
    session = SessionService(mqtt_client, identity, relay_service, publisher)

    dispatcher = CommandDispatcher(
        identity,
        relay_service,
        publisher,
        address_source=network_link.address,
        payload_limit=settings.PAYLOAD_LIMIT,
    )
    mqtt_client.set_message_handler(dispatcher)

    escalation = RestartEscalation(relay_service.current_state, restarter)
    network = LinkSupervisor(
        "network",
        network_link,
        retry_interval_ms=settings.NETWORK_RETRY_MS,
        max_failures=settings.NETWORK_MAX_FAILURES,
        escalation=escalation,
        clock=clock,
        on_failed_attempt=relay_service.blink_status_led,
    )
    broker = LinkSupervisor(
        "broker",
        BrokerLink(mqtt_client),
        retry_interval_ms=settings.BROKER_RETRY_MS,
        max_failures=settings.BROKER_MAX_FAILURES,
        escalation=escalation,
        clock=clock,
        on_up=session.on_broker_up,
        on_failed_attempt=relay_service.blink_status_led,
    )

    scheduler = IntervalScheduler(clock)
    scheduler.every("status", settings.STATUS_INTERVAL_MS, publisher.on_tick)

    button_monitor = ButtonMonitor(
        ButtonDebouncer(button.is_pressed, clock, debounce_ms=settings.DEBOUNCE_MS),
        toggle=lambda: relay_service.toggle(announce=True),
        restarter=restarter,
        short_ms=settings.SHORT_PRESS_MS,
        medium_ms=settings.MEDIUM_PRESS_MS,
        long_ms=settings.LONG_PRESS_MS,
    )

    staging_dir = Path(settings.UPDATE_DIR)
    if not staging_dir.is_absolute():
        staging_dir = settings.BASE_DIR / staging_dir
    update_channel = UpdateChannel(
        settings.UPDATE_URL,
        settings.FIRMWARE_VERSION,
        staging_dir,
        UpdateLifecycleHooks(restarter),
        clock=clock,
        network_up=network.is_up,
        check_interval_ms=settings.UPDATE_CHECK_INTERVAL_MS,
    )

    controller = LifecycleController(
        network,
        broker,
        mqtt_client,
        scheduler,
        button_monitor,
        update_service=update_channel.service,
        tick_delay_ms=settings.TICK_DELAY_MS,
    )

    return RelayAgent(
        identity=identity,
        gpio=gpio,
        mqtt_client=mqtt_client,
        network_link=network_link,
        relay_service=relay_service,
        publisher=publisher,
        dispatcher=dispatcher,
        update_channel=update_channel,
        controller=controller,
    )
