# relay_agent/infrastructure/network/network_link.py
import logging
import socket
import subprocess
from typing import Optional

logger = logging.getLogger(__name__)


def _is_valid_ip(ip: Optional[str]) -> bool:
    return bool(ip) and not ip.startswith("127.") and ip != "0.0.0.0"


class HostNetworkLink:
    """Network association of the host.

    The up-check asks the kernel which source address would route towards
    ``probe_address``, normally the broker host (no packet is sent). An attempt
    starts ``nmcli`` in the background when an SSID is configured and never
    waits for it.
    """

    def __init__(
        self,
        probe_address: str,
        ssid: Optional[str] = None,
        password: Optional[str] = None,
        interface: str = "wlan0",
    ):
        self.probe_address = probe_address
        self.ssid = ssid
        self.password = password
        self.interface = interface
        self._association: Optional[subprocess.Popen] = None

    def address(self) -> Optional[str]:
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
                sock.connect((self.probe_address, 80))
                candidate = sock.getsockname()[0]
        except OSError:
            return None
        return candidate if _is_valid_ip(candidate) else None

    def is_up(self) -> bool:
        return self.address() is not None

    def attempt(self) -> None:
        if not self.ssid:
            logger.info("Waiting for the host network manager to bring the network up")
            return

        if self._association is not None and self._association.poll() is None:
            logger.info(f"Association with {self.ssid} still in progress")
            return

        command = ["nmcli", "device", "wifi", "connect", self.ssid, "ifname", self.interface]
        if self.password:
            command += ["password", self.password]

        logger.info(f"Starting association with {self.ssid} on {self.interface}")
        try:
            self._association = subprocess.Popen(
                command,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            logger.warning(f"Could not start nmcli: {e}")
            self._association = None
