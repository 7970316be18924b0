"""Hardware address, device name and secure-on password parsing."""

import re
from dataclasses import dataclass
from typing import Optional

from wolgate.errors import ParseError, ValidationError

_DEVICE_NAME_RE = re.compile(r"[a-z0-9_]+")


def _octets_re(count: int) -> "re.Pattern[str]":
    # Hex pairs joined by ":" or "-" (the same one throughout) or by nothing.
    return re.compile(
        r"[0-9A-Fa-f]{2}([:\-]?)[0-9A-Fa-f]{2}" + r"(?:\1[0-9A-Fa-f]{2})" * (count - 2)
    )


_MAC_RE = _octets_re(6)
_PASSWORD4_RE = _octets_re(4)


def _decode_octets(text: str, separator: str) -> bytes:
    return bytes.fromhex(text.replace(separator, "") if separator else text)


@dataclass(frozen=True)
class HardwareAddress:
    """A 6-octet link-layer (MAC) address."""

    octets: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.octets, bytes) or len(self.octets) != 6:
            raise ParseError(f"hardware address must be exactly 6 octets, got {self.octets!r}")

    def hex(self) -> str:
        """Return the 12 lowercase hex digits with no separators."""
        return self.octets.hex()

    def __str__(self) -> str:
        return self.octets.hex(":")


def parse_hardware_address(text: str) -> HardwareAddress:
    """
    Parse a MAC address string.

    Accepts ``aa:bb:cc:dd:ee:ff``, ``AA-BB-CC-DD-EE-FF`` or ``aabbccddeeff``
    in any case. Separators must be used consistently.

    Raises:
        ParseError: If the text is not a well-formed 6-octet address
    """
    if not isinstance(text, str):
        raise ParseError(
            f"invalid MAC address {text!r}: expected a string (quote MAC addresses in YAML files)"
        )
    match = _MAC_RE.fullmatch(text)
    if not match:
        raise ParseError(f"invalid MAC address '{text}'")
    return HardwareAddress(_decode_octets(text, match.group(1)))


def validate_device_name(name: str) -> None:
    """
    Check a device name against the naming policy.

    Raises:
        ValidationError: If the name is empty or contains characters outside [a-z0-9_]
    """
    if not isinstance(name, str):
        raise ValidationError(f"Device name {name!r} must be a string")
    if not name:
        raise ValidationError("Device name cannot be empty")
    if not _DEVICE_NAME_RE.fullmatch(name):
        raise ValidationError(
            f"Device name '{name}' must be lowercase alphanumeric or underscore"
        )


def parse_secure_on_password(text: Optional[str]) -> Optional[bytes]:
    """
    Decode a secure-on password into its raw bytes.

    A MAC-shaped value yields 6 bytes, four hex pairs yield 4 bytes.
    ``None`` or an empty string means no password.
    """
    if text is None or text == "":
        return None
    if not isinstance(text, str):
        raise ParseError(f"invalid secure-on password {text!r}: expected a string")
    match = _MAC_RE.fullmatch(text)
    if match:
        return _decode_octets(text, match.group(1))
    match = _PASSWORD4_RE.fullmatch(text)
    if match:
        return _decode_octets(text, match.group(1))
    raise ParseError("invalid secure-on password: expected 4 or 6 hex octets")
