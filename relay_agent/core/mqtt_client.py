import logging
from typing import Callable, Optional

import paho.mqtt.client as mqtt

logging = logging.getLogger(__name__)

MessageHandler = Callable[[str, bytes], None]


class MQTTClient:
    """Broker session pumped from the caller's thread.

    ``connect`` performs one blocking attempt bounded by ``connect_timeout``;
    ``loop`` services the socket without waiting so inbound messages are
    delivered to the handler on the tick loop.
    """

    def __init__(
        self,
        client_id: str,
        host: str,
        port: int = 1883,
        username: Optional[str] = None,
        password: Optional[str] = None,
        keepalive: int = 15,
        connect_timeout: float = 0.5,
    ):
        self.host = host
        self.port = port
        self.keepalive = keepalive
        self.connect_timeout = connect_timeout
        self._handler: Optional[MessageHandler] = None

        self.client = mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2,
            client_id=client_id,
            clean_session=True,
        )
        if username:
            self.client.username_pw_set(username, password)
        self.client.on_message = self._on_message
        self.client.on_disconnect = self._on_disconnect
        self.client.connect_timeout = connect_timeout

    def set_message_handler(self, handler: MessageHandler) -> None:
        self._handler = handler

    def connect(self) -> bool:
        logging.info(f"Connecting to MQTT: {self.host}:{self.port}")
        try:
            rc = self.client.connect(self.host, self.port, keepalive=self.keepalive)
            if rc != mqtt.MQTT_ERR_SUCCESS:
                logging.warning(f"MQTT connect refused: {mqtt.error_string(rc)}")
                return False
            # Read CONNACK so is_connected() reflects the broker's answer.
            self.client.loop(timeout=self.connect_timeout)
        except (OSError, ValueError) as e:
            logging.warning(f"MQTT connect failed: {e}")
            return False

        connected = self.client.is_connected()
        if connected:
            logging.info("Connected to MQTT broker")
        else:
            logging.warning("MQTT broker did not acknowledge the session")
        return connected

    def is_connected(self) -> bool:
        return self.client.is_connected()

    def subscribe(self, topic: str, qos: int = 0) -> bool:
        rc, _ = self.client.subscribe(topic, qos=qos)
        if rc != mqtt.MQTT_ERR_SUCCESS:
            logging.warning(f"[MQTT] Subscribe to {topic} failed: {mqtt.error_string(rc)}")
            return False
        logging.info(f"[MQTT] Subscribed to topic: {topic}")
        return True

    def publish(self, topic: str, payload: str, retain: bool = False) -> bool:
        info = self.client.publish(topic, payload.encode("utf-8"), qos=0, retain=retain)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            logging.warning(f"[MQTT] Publish to {topic} failed: {mqtt.error_string(info.rc)}")
            return False
        return True

    def loop(self) -> None:
        rc = self.client.loop(timeout=0.0)
        if rc not in (mqtt.MQTT_ERR_SUCCESS, mqtt.MQTT_ERR_NO_CONN):
            logging.warning(f"[MQTT] loop error: {mqtt.error_string(rc)}")

    def _on_message(self, client, userdata, message) -> None:
        if self._handler is None:
            logging.debug(f"[MQTT] Dropping message on {message.topic}, no handler")
            return
        self._handler(message.topic, message.payload)

    def _on_disconnect(self, client, userdata, flags, reason_code, properties) -> None:
        logging.warning(f"MQTT session closed: {reason_code}")

    def close(self) -> None:
        if not self.client.is_connected():
            return

        logging.info("Closing MQTT connection...")
        self.client.disconnect()
        logging.info("MQTT connection closed.")
