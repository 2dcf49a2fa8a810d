# relay_agent/interfaces/handlers/command_handler.py
import logging
from typing import Callable, Optional

from relay_agent.application.relay_service import RelayService
from relay_agent.core.status_publisher import StatusPublisher, StatusPublishTrigger
from relay_agent.domain.commands.command import BoundedPayload, Command, CommandChannel, CommandKind
from relay_agent.domain.models.identity import Identity
from relay_agent.domain.relay.enums import ActuatorState

logging = logging.getLogger(__name__)

UNASSIGNED_ADDRESS = "0.0.0.0"


class CommandDispatcher:

    def __init__(
        self,
        identity: Identity,
        relay_service: RelayService,
        publisher: StatusPublisher,
        address_source: Callable[[], Optional[str]],
        payload_limit: int = 64,
    ):
        self.identity = identity
        self.relay_service = relay_service
        self.publisher = publisher
        self.address_source = address_source
        self.payload_limit = payload_limit

        self._channels = {
            identity.request_topic: CommandChannel.DEVICE,
            identity.broadcast_request_topic: CommandChannel.BROADCAST,
        }

    def __call__(self, topic: str, payload: bytes) -> None:
        self.dispatch(topic, payload)

    def parse(self, topic: str, payload: bytes) -> Optional[Command]:
        channel = self._channels.get(topic)
        if channel is None:
            logging.error(f"Message on unsubscribed topic ignored: {topic}")
            return None

        bounded = BoundedPayload(payload, self.payload_limit)
        if bounded.truncated:
            logging.warning(f"Payload on {topic} truncated to {bounded.length} bytes")

        command = Command.parse(channel, topic, bounded)
        if command is None:
            logging.debug(f"No action for payload {bounded.text!r} on {topic}")
        return command

    def dispatch(self, topic: str, payload: bytes) -> Optional[Command]:
        command = self.parse(topic, payload)
        if command is None:
            return None

        logging.info(f"Received command {command.kind.value} on {topic}")

        match command.kind:
            case CommandKind.SET_ON:
                self.relay_service.set_state(ActuatorState.ON, announce=True)

            case CommandKind.SET_OFF:
                self.relay_service.set_state(ActuatorState.OFF, announce=True)

            case CommandKind.QUERY_STATUS:
                self.publisher.publish_current(StatusPublishTrigger.QUERY)

            case CommandKind.DISCOVERY_PING:
                self._reply_address()

        return command

    def _reply_address(self) -> None:
        address = self.address_source()
        if address is None:
            logging.warning("showip requested but no network address is assigned")
            address = UNASSIGNED_ADDRESS
        self.publisher.publish_address(address)
