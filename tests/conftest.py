import pytest

from relay_agent.application.device_factory import build_agent
from relay_agent.core.config import Settings

from tests.fakes import FakeClock, FakeGPIO, FakeMQTT, FakeNetworkLink, FakeRestarter


@pytest.fixture
def gpio():
    return FakeGPIO()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mqtt():
    return FakeMQTT()


@pytest.fixture
def network_link():
    return FakeNetworkLink()


@pytest.fixture
def restarter():
    return FakeRestarter()


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        DEVICE_NAME="kitchen",
        RELAY_PIN=12,
        LED_PIN=13,
        BUTTON_PIN=0,
        UPDATE_URL=None,
    )


@pytest.fixture
def agent(settings, gpio, mqtt, network_link, restarter, clock):
    return build_agent(
        settings,
        gpio,
        mqtt_client=mqtt,
        network_link=network_link,
        restarter=restarter,
        clock=clock,
        sleep=lambda seconds: None,
    )
