from relay_agent.core.mqtt_client import MQTTClient


class BrokerLink:
    """Adapts the MQTT session to the supervisor's attempt / up-check pair."""

    def __init__(self, mqtt_client: MQTTClient):
        self.mqtt_client = mqtt_client

    def attempt(self) -> None:
        # One blocking attempt, bounded by the client's connect timeout.
        self.mqtt_client.connect()

    def is_up(self) -> bool:
        return self.mqtt_client.is_connected()
