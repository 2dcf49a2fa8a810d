from enum import Enum
from typing import Callable

from relay_agent.core.logging_config import logger
from relay_agent.core.mqtt_client import MQTTClient
from relay_agent.domain.models.identity import Identity
from relay_agent.domain.relay.enums import ActuatorState


class StatusPublishTrigger(str, Enum):
    INTERVAL = "INTERVAL"
    STATE_CHANGE = "STATE_CHANGE"
    SESSION = "SESSION"
    QUERY = "QUERY"


class StatusPublisher:

    def __init__(
        self,
        mqtt_client: MQTTClient,
        identity: Identity,
        state_source: Callable[[], ActuatorState],
    ):
        self._mqtt = mqtt_client
        self._identity = identity
        self._state_source = state_source

    def session_open(self) -> bool:
        return self._mqtt.is_connected()

    def publish_state(self, state: ActuatorState, trigger: StatusPublishTrigger) -> bool:
        """Retained publish of ``state`` on the response topic.

        Returns False without queueing anything when no session is open.
        """
        if not self.session_open():
            logger.debug("Status publish skipped, no broker session | trigger=%s", trigger.value)
            return False

        topic = self._identity.response_topic
        logger.info(
            "Publishing status | trigger=%s topic=%s payload=%s",
            trigger.value,
            topic,
            state.value,
        )
        return self._mqtt.publish(topic, state.value, retain=True)

    def publish_current(self, trigger: StatusPublishTrigger) -> bool:
        return self.publish_state(self._state_source(), trigger)

    def on_tick(self) -> None:
        self.publish_current(StatusPublishTrigger.INTERVAL)

    def publish_address(self, address: str) -> bool:
        if not self.session_open():
            return False

        payload = f"{self._identity.host_name} ==> {address}"
        topic = self._identity.broadcast_response_topic
        logger.info("Publishing address | topic=%s payload=%s", topic, payload)
        return self._mqtt.publish(topic, payload, retain=False)
