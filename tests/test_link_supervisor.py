from relay_agent.core.link_supervisor import LinkSupervisor, RestartEscalation
from relay_agent.domain.link.link_state import LinkStatus
from relay_agent.domain.relay.enums import ActuatorState

from tests.fakes import FakeClock, FakeNetworkLink, FakeRestarter


class RelayState:
    def __init__(self, state=ActuatorState.OFF):
        self.state = state

    def __call__(self):
        return self.state


class BlockingLink:
    """Link whose attempt finishes before returning, like a broker connect."""

    def __init__(self, accept=False):
        self.accept = accept
        self.up = False
        self.attempts = 0

    def attempt(self):
        self.attempts += 1
        self.up = self.accept

    def is_up(self):
        return self.up


def make_supervisor(link, clock, relay_state=None, restarter=None, retry_ms=5000, max_failures=10, **kwargs):
    relay_state = relay_state or RelayState()
    restarter = restarter or FakeRestarter()
    escalation = RestartEscalation(relay_state, restarter)
    supervisor = LinkSupervisor(
        "broker",
        link,
        retry_interval_ms=retry_ms,
        max_failures=max_failures,
        escalation=escalation,
        clock=clock,
        **kwargs,
    )
    return supervisor, restarter


class TestLinkSupervisorRetry:

    def test_first_attempt_is_immediate(self):
        link = FakeNetworkLink(up=False)
        supervisor, _ = make_supervisor(link, FakeClock())

        status = supervisor.step()

        assert link.attempts == 1
        assert supervisor.state.consecutive_failures == 1
        assert status is LinkStatus.ATTEMPTING

    def test_attempts_never_more_often_than_retry_interval(self):
        link = FakeNetworkLink(up=False)
        clock = FakeClock()
        supervisor, _ = make_supervisor(link, clock, retry_ms=5000, max_failures=1000)

        attempt_times = []
        for _ in range(3000):
            before = link.attempts
            supervisor.step()
            if link.attempts != before:
                attempt_times.append(clock.now)
            clock.advance(7)

        assert len(attempt_times) > 2
        gaps = [b - a for a, b in zip(attempt_times, attempt_times[1:])]
        assert min(gaps) >= 5000

    def test_up_check_runs_every_tick_regardless_of_timer(self):
        link = FakeNetworkLink(up=False)
        clock = FakeClock()
        supervisor, _ = make_supervisor(link, clock)

        supervisor.step()
        link.up = True
        clock.advance(1)

        assert supervisor.step() is LinkStatus.UP
        assert supervisor.is_up()

    def test_entering_up_resets_failures_and_runs_hook(self):
        link = FakeNetworkLink(up=False)
        clock = FakeClock()
        calls = []
        supervisor, _ = make_supervisor(link, clock, on_up=lambda: calls.append("up"))

        for _ in range(3):
            supervisor.step()
            clock.advance(5000)
        assert supervisor.state.consecutive_failures == 3

        link.up = True
        supervisor.step()
        supervisor.step()

        assert supervisor.state.consecutive_failures == 0
        assert calls == ["up"]

    def test_link_loss_goes_back_to_retrying(self):
        link = FakeNetworkLink(up=True)
        clock = FakeClock()
        supervisor, _ = make_supervisor(link, clock)
        supervisor.step()

        link.up = False
        clock.advance(10)
        status = supervisor.step()

        assert not supervisor.is_up()
        assert link.attempts == 1
        assert status is LinkStatus.ATTEMPTING

    def test_failed_attempt_feedback_runs_per_attempt(self):
        link = FakeNetworkLink(up=False)
        clock = FakeClock()
        blinks = []
        supervisor, _ = make_supervisor(link, clock, retry_ms=100, on_failed_attempt=lambda: blinks.append(1))

        for _ in range(10):
            supervisor.step()
            clock.advance(50)

        assert len(blinks) == link.attempts == 5


class TestEscalation:

    def run_until_attempts(self, supervisor, link, clock, attempts):
        while link.attempts < attempts:
            supervisor.step()
            clock.advance(supervisor.retry_interval_ms)

    def test_restart_once_when_relay_off(self):
        link = FakeNetworkLink(up=False)
        clock = FakeClock()
        supervisor, restarter = make_supervisor(link, clock, max_failures=10)

        self.run_until_attempts(supervisor, link, clock, 10)
        assert restarter.reasons == []

        self.run_until_attempts(supervisor, link, clock, 11)
        assert len(restarter.reasons) == 1
        assert "broker" in restarter.reasons[0]

    def test_relay_on_forgives_failures(self):
        link = FakeNetworkLink(up=False)
        clock = FakeClock()
        supervisor, restarter = make_supervisor(
            link, clock, relay_state=RelayState(ActuatorState.ON), max_failures=10
        )

        self.run_until_attempts(supervisor, link, clock, 11)

        assert restarter.reasons == []
        assert supervisor.state.consecutive_failures == 0

        self.run_until_attempts(supervisor, link, clock, 40)
        assert restarter.reasons == []

    def test_network_ceiling(self):
        link = FakeNetworkLink(up=False)
        clock = FakeClock()
        supervisor, restarter = make_supervisor(link, clock, retry_ms=1000, max_failures=150)

        self.run_until_attempts(supervisor, link, clock, 150)
        assert restarter.reasons == []

        self.run_until_attempts(supervisor, link, clock, 151)
        assert len(restarter.reasons) == 1

    def test_successful_attempt_is_not_counted_as_failure(self):
        link = BlockingLink(accept=True)
        blinks = []
        ups = []
        supervisor, _ = make_supervisor(
            link,
            FakeClock(),
            on_up=lambda: ups.append("up"),
            on_failed_attempt=lambda: blinks.append(1),
        )

        status = supervisor.step()

        assert status is LinkStatus.UP
        assert supervisor.is_up()
        assert supervisor.state.consecutive_failures == 0
        assert ups == ["up"]
        assert blinks == []

    def test_connecting_on_last_allowed_attempt_does_not_restart(self):
        link = BlockingLink(accept=False)
        clock = FakeClock()
        supervisor, restarter = make_supervisor(link, clock, max_failures=10)

        self.run_until_attempts(supervisor, link, clock, 10)
        assert supervisor.state.consecutive_failures == 10

        link.accept = True
        status = supervisor.step()

        assert status is LinkStatus.UP
        assert link.attempts == 11
        assert restarter.reasons == []
        assert supervisor.state.consecutive_failures == 0
