"""TOML/YAML configuration loader and validator."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from wolgate.core.address import parse_secure_on_password
from wolgate.core.registry import DeviceRegistry, build_registry
from wolgate.core.wol import BROADCAST_IP, DEFAULT_PORT
from wolgate.errors import ConfigError

DEFAULT_HOST = "0.0.0.0"
DEFAULT_HTTP_PORT = 8000
AUTH_TOKEN_ENV = "WOLGATE_AUTH_TOKEN"


class _UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that refuses mappings with repeated keys."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    None, None, f"duplicate key '{key}'", key_node.start_mark
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


@dataclass(frozen=True)
class GatewayConfig:
    """Validated gateway settings plus the device registry."""

    devices: DeviceRegistry
    host: str = DEFAULT_HOST
    port: int = DEFAULT_HTTP_PORT
    broadcast_ip: str = BROADCAST_IP
    wol_port: int = DEFAULT_PORT
    password: Optional[bytes] = None
    interface: Optional[str] = None
    auth_token: Optional[str] = None


def load_config(path: Path) -> Optional[dict[str, Any]]:
    """
    Load configuration from a TOML or YAML file.

    Files ending in ``.yaml`` or ``.yml`` are read as YAML, everything else as TOML.

    Args:
        path: Path to the config file

    Returns:
        Parsed configuration dictionary, or None if file is empty

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If the file is not valid TOML/YAML
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return None
    if path.suffix.lower() in (".yaml", ".yml"):
        try:
            result: Optional[dict[str, Any]] = yaml.load(text, Loader=_UniqueKeyLoader)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
        return result
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc


def _check_port(value: Any, field: str) -> Optional[str]:
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 65535:
        return f"'{field}' must be an integer between 1 and 65535, got {value!r}"
    return None


def _check_optional_str(section: dict[str, Any], key: str, prefix: str = "") -> Optional[str]:
    value = section.get(key)
    if value is not None and not isinstance(value, str):
        return f"'{prefix}{key}' must be a string"
    return None


def validate_config(config: dict[str, Any]) -> list[str]:
    """
    Validate a loaded configuration dictionary.

    Returns:
        List of validation error messages (empty list = valid)
    """
    errors: list[str] = []

    if not isinstance(config, dict):
        return ["Config root must be a mapping"]

    devices = config.get("devices")
    if devices is None:
        errors.append("'devices' key is required")
    elif not isinstance(devices, dict):
        errors.append("'devices' must be a mapping of device name to MAC address")
    else:
        for name, mac in devices.items():
            try:
                build_registry([(name, mac)])
            except ConfigError as exc:
                errors.append(f"devices: {exc}")

    if "port" in config:
        err = _check_port(config["port"], "port")
        if err:
            errors.append(err)
    for key in ("host", "auth_token"):
        err = _check_optional_str(config, key)
        if err:
            errors.append(err)

    wol = config.get("wol", {})
    if not isinstance(wol, dict):
        errors.append("'wol' must be a mapping")
        return errors
    if "port" in wol:
        err = _check_port(wol["port"], "wol.port")
        if err:
            errors.append(err)
    for key in ("broadcast_ip", "interface", "password"):
        err = _check_optional_str(wol, key, prefix="wol.")
        if err:
            errors.append(err)
    if isinstance(wol.get("password"), str):
        try:
            parse_secure_on_password(wol["password"])
        except ConfigError as exc:
            errors.append(f"wol.password: {exc}")

    return errors


def gateway_config_from_raw(config: dict[str, Any]) -> GatewayConfig:
    """
    Construct a GatewayConfig from a raw config dict.

    Args:
        config: Parsed config dictionary

    Returns:
        GatewayConfig with a fully validated device registry

    Raises:
        ConfigError: If the configuration is invalid
    """
    errors = validate_config(config)
    if errors:
        raise ConfigError(errors[0])

    wol = config.get("wol", {})
    auth_token = os.environ.get(AUTH_TOKEN_ENV) or config.get("auth_token") or None
    return GatewayConfig(
        devices=build_registry(config["devices"]),
        host=config.get("host", DEFAULT_HOST),
        port=int(config.get("port", DEFAULT_HTTP_PORT)),
        broadcast_ip=wol.get("broadcast_ip", BROADCAST_IP),
        wol_port=int(wol.get("port", DEFAULT_PORT)),
        password=parse_secure_on_password(wol.get("password")),
        interface=wol.get("interface") or None,
        auth_token=auth_token,
    )


def load_gateway_config(path: Path) -> GatewayConfig:
    """
    Read, validate and build the gateway configuration in one step.

    Raises:
        ConfigError: If the file is missing, empty or invalid
    """
    path = Path(path)
    try:
        raw = load_config(path)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    if not raw:
        raise ConfigError(f"Config file is empty: {path}")
    return gateway_config_from_raw(raw)
