"""Command-line interface for wol-gateway (wolgate)."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from wolgate import __version__
from wolgate.config.loader import GatewayConfig

DEFAULT_CONFIG = Path("config.toml")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_cfg(config: str) -> GatewayConfig:
    from wolgate.config.loader import load_gateway_config
    from wolgate.errors import ConfigError

    try:
        return load_gateway_config(Path(config))
    except ConfigError as exc:
        click.echo(f"Failed to load {config}: {exc}", err=True)
        sys.exit(1)


# ── Root group ────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version=__version__, prog_name="wolgate")
@click.option(
    "--config",
    "-c",
    default=str(DEFAULT_CONFIG),
    envvar="WOLGATE_CONFIG",
    show_default=True,
    help="Path to config.toml (or a .yaml file)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config: str, verbose: bool) -> None:
    """wol-gateway — wake LAN devices by name over HTTP."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# ── check command ─────────────────────────────────────────────────────────────


@main.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Validate the configuration file and report every problem found."""
    from wolgate.config.loader import load_config, validate_config
    from wolgate.errors import ConfigError

    path = Path(ctx.obj["config"])
    if not path.exists():
        click.echo(f"Config file not found: {path}", err=True)
        sys.exit(1)
    try:
        raw = load_config(path)
    except ConfigError as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)
    if not raw:
        click.echo("Config file is empty.", err=True)
        sys.exit(1)
    errors = validate_config(raw)
    if errors:
        click.echo("Config validation errors:", err=True)
        for e in errors:
            click.echo(f"  • {e}", err=True)
        sys.exit(1)
    count = len(raw["devices"])
    if count == 0:
        click.echo(f"!  {path}: no devices configured, every wake request will return 404")
        return
    click.echo(f"✓  {path}: {count} device(s) configured")


# ── devices command ───────────────────────────────────────────────────────────


@main.command()
@click.pass_context
def devices(ctx: click.Context) -> None:
    """List all configured devices."""
    cfg = _load_cfg(ctx.obj["config"])
    click.echo(f"{'NAME':<24} {'MAC ADDRESS'}")
    click.echo("─" * 42)
    for name, address in cfg.devices.items():
        click.echo(f"{name:<24} {address}")


# ── wake command ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("device_name")
@click.pass_context
def wake(ctx: click.Context, device_name: str) -> None:
    """Send a Wake-on-LAN packet to a configured device."""
    cfg = _load_cfg(ctx.obj["config"])

    from wolgate.core.wol import wake as do_wake
    from wolgate.errors import NotFoundError, SendError

    try:
        address = cfg.devices.lookup(device_name)
    except NotFoundError as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)

    try:
        do_wake(
            address,
            ip_address=cfg.broadcast_ip,
            port=cfg.wol_port,
            password=cfg.password,
            interface=cfg.interface,
        )
    except SendError as exc:
        click.echo(f"Failed to send WOL packet: {exc}", err=True)
        sys.exit(2)
    click.echo(f"Waking up device: {device_name} (Mac Address: {address})")


# ── token command ─────────────────────────────────────────────────────────────


@main.command()
def token() -> None:
    """Print a new random bearer token for auth_token."""
    from wolgate.auth.token import generate_token

    click.echo(generate_token())


# ── serve command ─────────────────────────────────────────────────────────────


@main.command()
@click.option("--host", default=None, help="Bind host  [default: config host or 0.0.0.0]")
@click.option("--port", default=None, type=int, help="Bind port  [default: config port or 8000]")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int]) -> None:
    """Start the wake gateway HTTP server."""
    import uvicorn

    from wolgate.api.routes import create_app

    cfg = _load_cfg(ctx.obj["config"])
    bind_host = host or cfg.host
    bind_port = port or cfg.port
    app = create_app(cfg)
    logging.getLogger(__name__).info(
        "Starting HTTP server at http://%s:%d with %d device(s)", bind_host, bind_port, len(cfg.devices)
    )
    uvicorn.run(app, host=bind_host, port=bind_port)


if __name__ == "__main__":
    main()
