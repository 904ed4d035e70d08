"""
Network interface discovery for binding camera sockets to the right NIC
"""

import ipaddress
import logging
import socket

import psutil

logger = logging.getLogger(__name__)


class NetworkInterface:
    """Represents a network interface with its details."""

    def __init__(self, name: str, ip: str, netmask: str):
        self.name = name
        self.ip = ip
        self.netmask = netmask

    @property
    def network(self) -> ipaddress.IPv4Network:
        """Get the network this interface belongs to."""
        return ipaddress.IPv4Network(f"{self.ip}/{self.netmask}", strict=False)

    def is_on_same_subnet(self, target_ip: str) -> bool:
        """Check if target IP is on the same subnet as this interface."""
        try:
            target = ipaddress.IPv4Address(target_ip)
            return target in self.network
        except (ValueError, ipaddress.AddressValueError):
            return False

    def __repr__(self):
        return f"NetworkInterface({self.name}, {self.ip}/{self.netmask})"


def get_network_interfaces() -> list[NetworkInterface]:
    """
    Get all network interfaces on this system.

    Returns:
        List of NetworkInterface objects, excluding loopback, link-local
        and down interfaces.
    """
    interfaces = []
    stats = psutil.net_if_stats()

    for iface_name, addrs in psutil.net_if_addrs().items():
        iface_stats = stats.get(iface_name)
        if iface_stats and not iface_stats.isup:
            continue

        for addr in addrs:
            # Only IPv4 addresses
            if addr.family != socket.AF_INET or not addr.netmask:
                continue
            ip = addr.address
            if ip.startswith("127.") or ip.startswith("169.254."):
                continue
            interfaces.append(NetworkInterface(name=iface_name, ip=ip, netmask=addr.netmask))

    return interfaces


def find_interface_for_camera(camera_ip: str) -> NetworkInterface | None:
    """
    Find the best network interface to use for connecting to a camera.

    Args:
        camera_ip: IP address of the camera

    Returns:
        NetworkInterface on the same subnet as camera, or None if no match
    """
    matching = [iface for iface in get_network_interfaces() if iface.is_on_same_subnet(camera_ip)]

    if not matching:
        logger.warning(f"Camera {camera_ip} not on same subnet as any interface")
        return None
    if len(matching) > 1:
        # Multiple matches - prefer interface with smallest network (most specific)
        best = min(matching, key=lambda x: x.network.num_addresses)
        logger.warning(f"Camera {camera_ip} matched multiple interfaces, using {best.ip} (smallest subnet)")
        return best
    logger.info(f"Camera {camera_ip} matched to interface {matching[0].ip} (subnet: {matching[0].network})")
    return matching[0]
