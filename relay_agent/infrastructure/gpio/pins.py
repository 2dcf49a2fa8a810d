# relay_agent/infrastructure/gpio/pins.py
from relay_agent.domain.relay.enums import ActuatorState
from relay_agent.infrastructure.gpio.gpio_controller import GPIOController


class RelayOutput:
    ACTIVE_LOW = False

    def __init__(self, controller: GPIOController, pin: int):
        self.controller = controller
        self.pin = pin
        controller.setup_output(pin, is_on=False, active_low=self.ACTIVE_LOW)

    def write(self, state: ActuatorState) -> None:
        self.controller.write(self.pin, state.is_on, self.ACTIVE_LOW)

    def read_state(self) -> ActuatorState:
        return ActuatorState.from_bool(self.controller.read(self.pin, self.ACTIVE_LOW))


class StatusLed:
    # Logical on pulls the line low.
    ACTIVE_LOW = True

    def __init__(self, controller: GPIOController, pin: int):
        self.controller = controller
        self.pin = pin
        controller.setup_output(pin, is_on=False, active_low=self.ACTIVE_LOW)

    def set(self, is_on: bool) -> None:
        self.controller.write(self.pin, is_on, self.ACTIVE_LOW)

    def is_on(self) -> bool:
        return self.controller.read(self.pin, self.ACTIVE_LOW)

    def toggle(self) -> None:
        self.set(not self.is_on())


class ButtonInput:
    # Pull-up wiring, pressed shorts the line to ground.
    ACTIVE_LOW = True

    def __init__(self, controller: GPIOController, pin: int):
        self.controller = controller
        self.pin = pin
        controller.setup_input(pin, pull_up=True)

    def is_pressed(self) -> bool:
        return self.controller.read(self.pin, self.ACTIVE_LOW)
