"""Best-guess LAN-reachable base URL for share links."""

import ipaddress
import logging
import socket
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# VirtualBox host-only, docker-machine and docker bridge networks.
VIRTUAL_ADAPTER_NETWORKS = (
    ipaddress.ip_network("192.168.56.0/24"),
    ipaddress.ip_network("192.168.99.0/24"),
    ipaddress.ip_network("172.17.0.0/16"),
)


def discover_ipv4_addresses() -> list[str]:
    """Return IPv4 addresses of this host, default-route address first."""
    candidates: list[str] = []
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        # UDP connect sends nothing; it only selects the outbound interface.
        sock.connect(("8.8.8.8", 80))
        candidates.append(sock.getsockname()[0])
    except OSError:
        logger.debug("No default route available for address discovery")
    finally:
        sock.close()

    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError:
        infos = []
    for info in infos:
        address = str(info[4][0])
        if address and address not in candidates:
            candidates.append(address)
    return candidates


@dataclass
class NetworkResolver:
    """Pick the address phones on the same network can reach."""

    network_ip: str | None = None
    preferred_ip: str | None = None
    port: int = 3000
    scheme: str = "http"
    address_source: Callable[[], list[str]] = field(default=discover_ipv4_addresses)

    def base_url(self) -> str:
        """Return the base URL for share links.

        Preference order: explicit ``network_ip`` override, the preferred
        private address when the host has it, the first private address
        outside known virtual-adapter ranges, the first non-loopback
        address, then ``localhost``.
        """
        if self.network_ip:
            override = self.network_ip.strip()
            if "://" in override:
                return override.rstrip("/")
            return self._format(override)
        return self._format(self.resolve_host())

    def resolve_host(self) -> str:
        addresses = [
            address
            for address in (self._parse(raw) for raw in self.address_source())
            if address is not None
        ]
        if self.preferred_ip:
            preferred = self._parse(self.preferred_ip)
            if preferred is not None and preferred in addresses:
                return str(preferred)
        routable = [
            address
            for address in addresses
            if not address.is_loopback and not address.is_link_local
        ]
        for address in routable:
            if address.is_private and not _is_virtual(address):
                return str(address)
        if routable:
            return str(routable[0])
        return "localhost"

    def _format(self, host: str) -> str:
        return f"{self.scheme}://{host}:{self.port}"

    @staticmethod
    def _parse(raw: str) -> ipaddress.IPv4Address | None:
        try:
            address = ipaddress.ip_address(raw.strip())
        except ValueError:
            logger.debug("Ignoring unparseable address", extra={"address": raw})
            return None
        if not isinstance(address, ipaddress.IPv4Address):
            return None
        return address


def _is_virtual(address: ipaddress.IPv4Address) -> bool:
    return any(address in network for network in VIRTUAL_ADAPTER_NETWORKS)
