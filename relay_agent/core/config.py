from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    BASE_DIR: Path = Path(__file__).resolve().parents[2]

    DEVICE_NAME: str = Field("relay", description="Device name, host name becomes esp8266-<name>")
    FIRMWARE_VERSION: str = Field("1.0.0", description="Version reported to the update channel")

    MQTT_HOST: str = Field("localhost", description="MQTT broker address")
    MQTT_PORT: int = Field(1883, ge=1, le=65535)
    MQTT_USERNAME: Optional[str] = None
    MQTT_PASSWORD: Optional[str] = None
    MQTT_KEEPALIVE: int = Field(15, ge=1)
    MQTT_CONNECT_TIMEOUT: float = Field(0.5, gt=0, description="Socket timeout of one connect attempt (s)")

    WIFI_SSID: Optional[str] = None
    WIFI_PASSWORD: Optional[str] = None
    WIFI_INTERFACE: str = "wlan0"
    NETWORK_PROBE_ADDRESS: Optional[str] = Field(
        None, description="Host whose route decides the assigned address, defaults to MQTT_HOST"
    )

    RELAY_PIN: int = 12
    LED_PIN: int = 13
    BUTTON_PIN: int = 0

    NETWORK_RETRY_MS: int = Field(1000, ge=1)
    NETWORK_MAX_FAILURES: int = Field(150, ge=1)
    BROKER_RETRY_MS: int = Field(5000, ge=1)
    BROKER_MAX_FAILURES: int = Field(10, ge=1)

    DEBOUNCE_MS: int = Field(35, ge=0)
    SHORT_PRESS_MS: int = 1000
    MEDIUM_PRESS_MS: int = 5000
    LONG_PRESS_MS: int = 60000

    STATUS_INTERVAL_MS: int = Field(60000, ge=1)
    RELAY_SETTLE_MS: int = Field(50, ge=0)
    PAYLOAD_LIMIT: int = Field(64, ge=1, description="Inbound payload bound in bytes")
    TICK_DELAY_MS: int = Field(10, ge=0)

    UPDATE_URL: Optional[str] = Field(None, description="Update manifest URL, disabled when unset")
    UPDATE_CHECK_INTERVAL_MS: int = Field(300000, ge=1000)
    UPDATE_DIR: str = "updates"

    LOG_DIR: str = Field("logs", description="Directory for rotating log files")

    @field_validator("DEVICE_NAME")
    @classmethod
    def validate_device_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("DEVICE_NAME must not be empty")
        if "/" in normalized or "+" in normalized or "#" in normalized:
            raise ValueError("DEVICE_NAME must not contain MQTT topic separators or wildcards")
        return normalized

    @model_validator(mode="after")
    def validate_press_thresholds(self):
        if not self.SHORT_PRESS_MS < self.MEDIUM_PRESS_MS < self.LONG_PRESS_MS:
            raise ValueError("Press thresholds must satisfy SHORT < MEDIUM < LONG")
        return self


settings = Settings()
