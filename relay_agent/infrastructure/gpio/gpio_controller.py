# relay_agent/infrastructure/gpio/gpio_controller.py
import logging

logging = logging.getLogger(__name__)


class GPIOController:
    """Thin wrapper over an RPi.GPIO compatible backend.

    Every method takes the logical level and translates it through
    ``active_low`` so callers never deal with raw HIGH/LOW.
    """

    def __init__(self, backend):
        self.gpio = backend

        try:
            self.gpio.setwarnings(False)
            self.gpio.setmode(self.gpio.BCM)
        except Exception as e:
            logging.error(f"GPIO init problem: {e}")

    def setup_output(self, pin: int, is_on: bool, active_low: bool) -> None:
        self.gpio.setup(pin, self.gpio.OUT)
        self.write(pin, is_on, active_low)
        logging.info(f"GPIOController: output pin {pin} initialised (is_on={is_on}, active_low={active_low})")

    def setup_input(self, pin: int, pull_up: bool = True) -> None:
        pull = self.gpio.PUD_UP if pull_up else self.gpio.PUD_DOWN
        self.gpio.setup(pin, self.gpio.IN, pull_up_down=pull)
        logging.info(f"GPIOController: input pin {pin} initialised (pull_up={pull_up})")

    def raw_level(self, is_on: bool, active_low: bool) -> int:
        if active_low:
            return self.gpio.LOW if is_on else self.gpio.HIGH
        return self.gpio.HIGH if is_on else self.gpio.LOW

    def write(self, pin: int, is_on: bool, active_low: bool) -> None:
        self.gpio.output(pin, self.raw_level(is_on, active_low))

    def read(self, pin: int, active_low: bool) -> bool:
        raw = self.gpio.input(pin)
        if active_low:
            return raw == self.gpio.LOW
        return raw == self.gpio.HIGH

    def cleanup(self) -> None:
        logging.info("Releasing GPIO pins.")
        self.gpio.cleanup()
