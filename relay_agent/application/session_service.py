# relay_agent/application/session_service.py
import logging

from relay_agent.application.relay_service import RelayService
from relay_agent.core.mqtt_client import MQTTClient
from relay_agent.core.status_publisher import StatusPublisher, StatusPublishTrigger
from relay_agent.domain.models.identity import Identity

logging = logging.getLogger(__name__)


class SessionService:
    """Runs when the broker session (re)opens."""

    def __init__(
        self,
        mqtt_client: MQTTClient,
        identity: Identity,
        relay_service: RelayService,
        publisher: StatusPublisher,
    ):
        self.mqtt_client = mqtt_client
        self.identity = identity
        self.relay_service = relay_service
        self.publisher = publisher

    def on_broker_up(self) -> None:
        for topic in self.identity.subscriptions:
            self.mqtt_client.subscribe(topic)

        self.relay_service.sync_status_led()
        self.publisher.publish_current(StatusPublishTrigger.SESSION)
        logging.info(f"SessionService: session ready for {self.identity.host_name}")
