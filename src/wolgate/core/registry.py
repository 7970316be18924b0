"""Immutable device name to hardware address registry."""

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Union

from wolgate.core.address import HardwareAddress, parse_hardware_address, validate_device_name
from wolgate.errors import ConfigError, NotFoundError

logger = logging.getLogger(__name__)

RawDevices = Union[Mapping[str, str], Iterable[tuple[str, str]]]


class DeviceRegistry:
    """Read-only lookup table built once at startup and shared by all handlers."""

    def __init__(self, devices: Mapping[str, HardwareAddress]) -> None:
        self._devices = MappingProxyType(dict(devices))

    def lookup(self, name: str) -> HardwareAddress:
        """
        Resolve a device name.

        Raises:
            NotFoundError: If the name is not registered
        """
        try:
            return self._devices[name]
        except KeyError:
            raise NotFoundError(name) from None

    def items(self) -> Iterable[tuple[str, HardwareAddress]]:
        return self._devices.items()

    def __contains__(self, name: object) -> bool:
        return name in self._devices

    def __iter__(self) -> Iterator[str]:
        return iter(self._devices)

    def __len__(self) -> int:
        return len(self._devices)

    def __repr__(self) -> str:
        return f"DeviceRegistry({len(self)} device(s))"


def build_registry(raw: RawDevices) -> DeviceRegistry:
    """
    Validate raw configuration entries and build a registry.

    Args:
        raw: Mapping of device name to MAC address text, or an iterable of
            ``(name, mac)`` pairs (which lets duplicate names be detected)

    Returns:
        DeviceRegistry holding every entry

    Raises:
        ConfigError: On the first invalid name, invalid address or duplicate name
    """
    pairs = raw.items() if isinstance(raw, Mapping) else raw
    devices: dict[str, HardwareAddress] = {}
    for name, mac_text in pairs:
        try:
            validate_device_name(name)
            address = parse_hardware_address(mac_text)
        except ConfigError as exc:
            raise ConfigError(f"device '{name}': {exc}") from exc
        if name in devices:
            raise ConfigError(f"device '{name}': duplicate device name")
        devices[name] = address
        logger.debug("Registered device %s -> %s", name, address)
    return DeviceRegistry(devices)
