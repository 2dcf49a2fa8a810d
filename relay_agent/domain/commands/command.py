from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class CommandKind(str, Enum):
    SET_ON = "SET_ON"
    SET_OFF = "SET_OFF"
    QUERY_STATUS = "QUERY_STATUS"
    DISCOVERY_PING = "DISCOVERY_PING"


class CommandChannel(str, Enum):
    DEVICE = "DEVICE"
    BROADCAST = "BROADCAST"


DEVICE_VOCABULARY = {
    "on": CommandKind.SET_ON,
    "off": CommandKind.SET_OFF,
    "status": CommandKind.QUERY_STATUS,
}

BROADCAST_VOCABULARY = {
    "showip": CommandKind.DISCOVERY_PING,
}


class BoundedPayload:
    """Inbound payload text cut to at most ``limit`` bytes.

    The cut happens on raw bytes; a multi-byte character split by the bound
    decodes to U+FFFD instead of raising.
    """

    __slots__ = ("text", "length", "truncated")

    def __init__(self, raw: bytes, limit: int):
        if limit < 1:
            raise ValueError("limit must be >= 1")
        data = bytes(raw[:limit])
        self.length = len(data)
        self.truncated = len(raw) > limit
        self.text = data.decode("utf-8", errors="replace")

    def __eq__(self, other):
        if isinstance(other, str):
            return self.text == other
        if isinstance(other, BoundedPayload):
            return self.text == other.text
        return NotImplemented

    def __hash__(self):
        return hash(self.text)

    def __repr__(self):
        return f"BoundedPayload({self.text!r}, length={self.length}, truncated={self.truncated})"


class Command(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: CommandKind
    channel: CommandChannel
    topic: str

    @classmethod
    def parse(cls, channel: CommandChannel, topic: str, payload: BoundedPayload) -> Optional["Command"]:
        vocabulary = DEVICE_VOCABULARY if channel is CommandChannel.DEVICE else BROADCAST_VOCABULARY
        kind = vocabulary.get(payload.text)
        if kind is None:
            return None
        return cls(kind=kind, channel=channel, topic=topic)
