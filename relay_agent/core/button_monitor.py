# relay_agent/core/button_monitor.py
import logging
from typing import Callable, Optional

from relay_agent.core.link_supervisor import Restarter
from relay_agent.domain.button.button_state import ButtonDebounceState, PressGesture
from relay_agent.domain.button.enums import HoldTier, PressAction

logging = logging.getLogger(__name__)

TIER_ACTIONS = {
    HoldTier.SHORT: PressAction.TOGGLE,
    HoldTier.MEDIUM: PressAction.RESTART,
    # LONG and VERY_LONG are kept apart so they can get their own action later.
    HoldTier.LONG: PressAction.RESTART,
    HoldTier.VERY_LONG: PressAction.RESTART,
}


def classify_hold(duration_ms: int, short_ms: int, medium_ms: int, long_ms: int) -> HoldTier:
    if duration_ms < short_ms:
        return HoldTier.SHORT
    if duration_ms < medium_ms:
        return HoldTier.MEDIUM
    if duration_ms < long_ms:
        return HoldTier.LONG
    return HoldTier.VERY_LONG


class ButtonDebouncer:
    """Accepts a raw level only after it held still for ``debounce_ms``.

    ``sample`` returns a gesture on the accepted release that completes a
    press, and None on every other tick.
    """

    def __init__(
        self,
        read_pressed: Callable[[], bool],
        clock: Callable[[], int],
        debounce_ms: int = 35,
    ):
        self._read_pressed = read_pressed
        self._clock = clock
        self.debounce_ms = debounce_ms
        self.state = ButtonDebounceState(last_change_ms=clock())

    def sample(self) -> Optional[PressGesture]:
        now = self._clock()
        raw = self._read_pressed()
        state = self.state

        if raw != state.raw_last_reading:
            state.raw_last_reading = raw
            state.last_change_ms = now

        if now - state.last_change_ms < self.debounce_ms:
            return None

        if raw == state.stable_reading:
            return None

        state.stable_reading = raw
        if raw:
            state.press_start_ms = now
            logging.debug("Button pressed")
            return None

        if state.press_start_ms is None:
            # Release without a seen press, e.g. held down at boot.
            return None

        gesture = PressGesture(duration_ms=now - state.press_start_ms)
        state.press_start_ms = None
        logging.debug(f"Button released after {gesture.duration_ms} ms")
        return gesture


class ButtonMonitor:

    def __init__(
        self,
        debouncer: ButtonDebouncer,
        toggle: Callable[[], object],
        restarter: Restarter,
        short_ms: int = 1000,
        medium_ms: int = 5000,
        long_ms: int = 60000,
    ):
        self.debouncer = debouncer
        self._toggle = toggle
        self._restarter = restarter
        self.short_ms = short_ms
        self.medium_ms = medium_ms
        self.long_ms = long_ms

    def sample(self) -> Optional[PressAction]:
        gesture = self.debouncer.sample()
        if gesture is None:
            return None
        return self.handle_gesture(gesture)

    def handle_gesture(self, gesture: PressGesture) -> PressAction:
        tier = classify_hold(gesture.duration_ms, self.short_ms, self.medium_ms, self.long_ms)
        action = TIER_ACTIONS[tier]

        logging.info(f"Button held {gesture.duration_ms} ms ({tier.value}) -> {action.value}")

        match action:
            case PressAction.TOGGLE:
                self._toggle()
            case PressAction.RESTART:
                self._restarter.restart(f"button held {gesture.duration_ms} ms ({tier.value})")

        return action
