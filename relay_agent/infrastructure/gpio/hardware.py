# relay_agent/infrastructure/gpio/hardware.py
import RPi.GPIO as GPIO

__all__ = ["GPIO"]
