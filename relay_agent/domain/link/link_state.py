from dataclasses import dataclass
from enum import Enum
from typing import Optional


class LinkStatus(str, Enum):
    DOWN = "DOWN"
    ATTEMPTING = "ATTEMPTING"
    UP = "UP"


@dataclass
class ConnectionAttemptState:
    name: str
    is_up: bool = False
    consecutive_failures: int = 0
    last_attempt_ms: Optional[int] = None

    @property
    def status(self) -> LinkStatus:
        if self.is_up:
            return LinkStatus.UP
        if self.consecutive_failures > 0:
            return LinkStatus.ATTEMPTING
        return LinkStatus.DOWN
