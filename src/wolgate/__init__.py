"""wol-gateway: HTTP-triggered Wake-on-LAN gateway."""

__version__ = "0.1.0"
