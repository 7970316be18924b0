"""Wake-on-LAN functionality."""

import logging
import socket
from typing import Optional

from wakeonlan import create_magic_packet

from wolgate.core.address import HardwareAddress
from wolgate.errors import SendError

logger = logging.getLogger(__name__)

BROADCAST_IP = "255.255.255.255"
DEFAULT_PORT = 9


def build_magic_packet(address: HardwareAddress, password: Optional[bytes] = None) -> bytes:
    """
    Build the magic packet for a hardware address.

    Six 0xFF bytes, the address repeated 16 times, then the secure-on
    password (4 or 6 bytes) when one is given.
    """
    packet = create_magic_packet(address.hex())
    if password is None:
        return packet
    if len(password) not in (4, 6):
        raise ValueError(f"secure-on password must be 4 or 6 bytes, got {len(password)}")
    return packet + bytes(password)


def wake(
    address: HardwareAddress,
    ip_address: str = BROADCAST_IP,
    port: int = DEFAULT_PORT,
    password: Optional[bytes] = None,
    interface: Optional[str] = None,
) -> None:
    """
    Send a Wake-on-LAN magic packet to wake a remote machine.

    Args:
        address: Hardware address of the target machine
        ip_address: Destination (broadcast) IP address (default: 255.255.255.255)
        port: UDP port for WOL packet (default: 9)
        password: Optional secure-on password bytes
        interface: Optional local IP address to send from

    Raises:
        SendError: If the socket could not be set up or the datagram was not sent
        ValueError: If the password is not 4 or 6 bytes long (nothing is sent)
    """
    packet = build_magic_packet(address, password)
    logger.info("Sending WOL magic packet to %s via %s:%d", address, ip_address, port)
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            if interface:
                sock.bind((interface, 0))
            sock.sendto(packet, (ip_address, port))
    except OSError as exc:
        logger.warning("WOL packet to %s failed: %s", address, exc)
        raise SendError(str(exc)) from exc
    logger.debug("WOL packet sent successfully (%d bytes)", len(packet))
