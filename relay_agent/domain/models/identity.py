from pydantic import BaseModel, ConfigDict, model_validator

HOST_PREFIX = "esp8266-"
BROADCAST_PREFIX = "sonoff_all"


class Identity(BaseModel):
    model_config = ConfigDict(frozen=True)

    host_name: str
    request_topic: str
    response_topic: str
    broadcast_request_topic: str = f"{BROADCAST_PREFIX}/request"
    broadcast_response_topic: str = f"{BROADCAST_PREFIX}/response"

    @classmethod
    def from_device_name(cls, device_name: str) -> "Identity":
        host_name = f"{HOST_PREFIX}{device_name}"
        return cls(
            host_name=host_name,
            request_topic=f"{host_name}/request",
            response_topic=f"{host_name}/response",
        )

    @model_validator(mode="after")
    def validate_topics(self):
        if self.request_topic != f"{self.host_name}/request":
            raise ValueError(f"request_topic must be '{self.host_name}/request'")
        if self.response_topic != f"{self.host_name}/response":
            raise ValueError(f"response_topic must be '{self.host_name}/response'")
        return self

    @property
    def subscriptions(self) -> list[str]:
        return [self.request_topic, self.broadcast_request_topic]
