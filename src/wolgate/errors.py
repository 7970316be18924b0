"""Exception hierarchy for wol-gateway."""


class WolGatewayError(Exception):
    """Base class for all gateway errors."""


class ConfigError(WolGatewayError):
    """Raised for invalid or missing configuration."""


class ParseError(ConfigError):
    """Raised when a hardware address or password string cannot be decoded."""


class ValidationError(ConfigError):
    """Raised when a device name violates the naming policy."""


class NotFoundError(WolGatewayError):
    """Raised when a device name is not present in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No such device: {name}")
        self.name = name


class SendError(WolGatewayError):
    """Raised when a wake datagram could not be handed to the network stack."""
