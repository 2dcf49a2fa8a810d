# relay_agent/domain/button/enums.py

from enum import Enum


class HoldTier(str, Enum):
    SHORT = "SHORT"
    MEDIUM = "MEDIUM"
    LONG = "LONG"
    VERY_LONG = "VERY_LONG"


class PressAction(str, Enum):
    TOGGLE = "TOGGLE"
    RESTART = "RESTART"
