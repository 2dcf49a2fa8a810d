import pytest

from relay_agent.core.button_monitor import ButtonDebouncer, ButtonMonitor, classify_hold
from relay_agent.domain.button.button_state import PressGesture
from relay_agent.domain.button.enums import HoldTier, PressAction

from tests.fakes import FakeRestarter


class RawButton:
    def __init__(self):
        self.pressed = False

    def __call__(self):
        return self.pressed


@pytest.fixture
def raw():
    return RawButton()


@pytest.fixture
def debouncer(raw, clock):
    return ButtonDebouncer(raw, clock, debounce_ms=35)


def hold(debouncer, raw, clock, pressed, duration_ms, step_ms=5):
    """Keep the raw level at ``pressed`` for ``duration_ms``, sampling every step."""
    raw.pressed = pressed
    gestures = []
    elapsed = 0
    while elapsed < duration_ms:
        gesture = debouncer.sample()
        if gesture is not None:
            gestures.append(gesture)
        clock.advance(step_ms)
        elapsed += step_ms
    return gestures


class TestButtonDebouncer:

    def test_clean_press_reports_duration_between_accepted_transitions(self, debouncer, raw, clock):
        hold(debouncer, raw, clock, False, 100)
        hold(debouncer, raw, clock, True, 500)
        gestures = hold(debouncer, raw, clock, False, 100)

        assert gestures == [PressGesture(duration_ms=500)]

    def test_press_is_accepted_only_after_debounce_window(self, debouncer, raw, clock):
        hold(debouncer, raw, clock, False, 100)

        raw.pressed = True
        debouncer.sample()
        clock.advance(34)
        debouncer.sample()
        assert debouncer.state.stable_reading is False

        clock.advance(1)
        debouncer.sample()
        assert debouncer.state.stable_reading is True
        assert debouncer.state.press_start_ms == clock.now

    def test_chatter_faster_than_window_is_ignored(self, debouncer, raw, clock):
        hold(debouncer, raw, clock, False, 100)

        for _ in range(200):
            raw.pressed = not raw.pressed
            assert debouncer.sample() is None
            clock.advance(20)

        assert debouncer.state.stable_reading is False
        assert debouncer.state.press_start_ms is None

    def test_bouncy_press_yields_single_gesture(self, debouncer, raw, clock):
        hold(debouncer, raw, clock, False, 100)
        for level in (True, False, True, False, True):
            raw.pressed = level
            debouncer.sample()
            clock.advance(3)
        hold(debouncer, raw, clock, True, 300)
        for level in (False, True, False):
            raw.pressed = level
            debouncer.sample()
            clock.advance(3)
        gestures = hold(debouncer, raw, clock, False, 100)

        assert len(gestures) == 1

    def test_release_without_seen_press_is_not_a_gesture(self, raw, clock):
        raw.pressed = True
        debouncer = ButtonDebouncer(raw, clock, debounce_ms=35)
        debouncer.state.stable_reading = True

        assert hold(debouncer, raw, clock, False, 100) == []


class TestClassification:

    @pytest.mark.parametrize(
        "duration, tier",
        [
            (0, HoldTier.SHORT),
            (999, HoldTier.SHORT),
            (1000, HoldTier.MEDIUM),
            (4999, HoldTier.MEDIUM),
            (5000, HoldTier.LONG),
            (59999, HoldTier.LONG),
            (60000, HoldTier.VERY_LONG),
        ],
    )
    def test_tiers(self, duration, tier):
        assert classify_hold(duration, 1000, 5000, 60000) is tier


class TestButtonMonitor:

    def make_monitor(self, raw, clock):
        toggles = []
        restarter = FakeRestarter()
        monitor = ButtonMonitor(
            ButtonDebouncer(raw, clock, debounce_ms=35),
            toggle=lambda: toggles.append(1),
            restarter=restarter,
        )
        return monitor, toggles, restarter

    def test_short_press_toggles(self, raw, clock):
        monitor, toggles, restarter = self.make_monitor(raw, clock)

        assert monitor.handle_gesture(PressGesture(duration_ms=200)) is PressAction.TOGGLE
        assert toggles == [1]
        assert restarter.reasons == []

    @pytest.mark.parametrize("duration", [1200, 5000, 70000])
    def test_longer_holds_restart(self, raw, clock, duration):
        monitor, toggles, restarter = self.make_monitor(raw, clock)

        assert monitor.handle_gesture(PressGesture(duration_ms=duration)) is PressAction.RESTART
        assert toggles == []
        assert len(restarter.reasons) == 1

    def test_hold_of_1200ms_restarts_instead_of_toggling(self, raw, clock):
        monitor, toggles, restarter = self.make_monitor(raw, clock)

        actions = []
        for pressed, duration in ((False, 100), (True, 1200), (False, 100)):
            raw.pressed = pressed
            end = clock.now + duration
            while clock.now < end:
                action = monitor.sample()
                if action is not None:
                    actions.append(action)
                clock.advance(5)

        assert actions == [PressAction.RESTART]
        assert toggles == []
        assert "1200" in restarter.reasons[0]
