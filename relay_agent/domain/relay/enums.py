# relay_agent/domain/relay/enums.py

from enum import Enum


class ActuatorState(str, Enum):
    OFF = "off"
    ON = "on"

    @property
    def is_on(self) -> bool:
        return self is ActuatorState.ON

    def complement(self) -> "ActuatorState":
        return ActuatorState.OFF if self is ActuatorState.ON else ActuatorState.ON

    @classmethod
    def from_bool(cls, is_on: bool) -> "ActuatorState":
        return cls.ON if is_on else cls.OFF
