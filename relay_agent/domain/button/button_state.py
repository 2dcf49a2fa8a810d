from dataclasses import dataclass
from typing import Optional


@dataclass
class ButtonDebounceState:
    raw_last_reading: bool = False
    stable_reading: bool = False
    last_change_ms: int = 0
    press_start_ms: Optional[int] = None


@dataclass(frozen=True)
class PressGesture:
    duration_ms: int
