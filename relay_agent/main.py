# relay_agent/main.py

import asyncio
import logging
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parent.parent))

from relay_agent.application.device_factory import build_agent
from relay_agent.core.config import settings
from relay_agent.core.logging_config import setup_logging
from relay_agent.infrastructure.gpio.hardware import GPIO

logger = logging.getLogger(__name__)


async def main():
    setup_logging()

    agent = build_agent(settings, GPIO)
    logger.info(
        f"🚀 Relay agent {agent.identity.host_name} started "
        f"(version {settings.FIRMWARE_VERSION}, broker {settings.MQTT_HOST}:{settings.MQTT_PORT})"
    )

    try:
        await agent.controller.run()

    except asyncio.CancelledError:
        pass

    finally:
        logger.info("🛑 Relay agent stopping.")
        agent.close()


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Relay agent stopped by keyboard interrupt.")


if __name__ == "__main__":
    run()
