"""Tests for the wolgate CLI."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from wolgate.cli import main
from wolgate.errors import SendError

# ── Helpers ───────────────────────────────────────────────────────────────────


def _write_config(path: Path, extra: str = "") -> Path:
    """Write a minimal valid config with one device named 'bedroom_pc'."""
    path.write_text(f'{extra}\n[devices]\nbedroom_pc = "AA:BB:CC:DD:EE:FF"\n')
    return path


@pytest.fixture(autouse=True)
def _no_env_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WOLGATE_AUTH_TOKEN", raising=False)
    monkeypatch.delenv("WOLGATE_CONFIG", raising=False)


# ── config error paths ────────────────────────────────────────────────────────


class TestConfigErrors:
    def test_missing_config_exits_1(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["--config", str(tmp_path / "nope.toml"), "devices"])
        assert result.exit_code == 1

    def test_empty_config_exits_1(self, tmp_path: Path) -> None:
        cfg = tmp_path / "empty.toml"
        cfg.write_text("")
        result = CliRunner().invoke(main, ["--config", str(cfg), "devices"])
        assert result.exit_code == 1

    def test_invalid_device_name_exits_1(self, tmp_path: Path) -> None:
        cfg = tmp_path / "bad.toml"
        cfg.write_text('[devices]\nBedroom-PC = "aa:bb:cc:dd:ee:ff"\n')
        result = CliRunner().invoke(main, ["--config", str(cfg), "devices"])
        assert result.exit_code == 1
        assert "Bedroom-PC" in result.output

    @patch("uvicorn.run")
    def test_serve_refuses_bad_config(self, mock_run: MagicMock, tmp_path: Path) -> None:
        cfg = tmp_path / "bad.toml"
        cfg.write_text('[devices]\nBedroom-PC = "aa:bb:cc:dd:ee:ff"\n')
        result = CliRunner().invoke(main, ["--config", str(cfg), "serve"])
        assert result.exit_code == 1
        mock_run.assert_not_called()


# ── check ─────────────────────────────────────────────────────────────────────


class TestCheck:
    def test_valid_config(self, tmp_path: Path) -> None:
        cfg = _write_config(tmp_path / "config.toml")
        result = CliRunner().invoke(main, ["--config", str(cfg), "check"])
        assert result.exit_code == 0
        assert "1 device(s)" in result.output

    def test_empty_devices_table_warns(self, tmp_path: Path) -> None:
        cfg = tmp_path / "config.toml"
        cfg.write_text("port = 8000\n[devices]\n")
        result = CliRunner().invoke(main, ["--config", str(cfg), "check"])
        assert result.exit_code == 0
        assert "no devices configured" in result.output

    def test_lists_every_error(self, tmp_path: Path) -> None:
        cfg = tmp_path / "config.toml"
        cfg.write_text('port = 0\n[devices]\nBAD = "aa:bb:cc:dd:ee:ff"\nnas = "xyz"\n')
        result = CliRunner().invoke(main, ["--config", str(cfg), "check"])
        assert result.exit_code == 1
        assert "BAD" in result.output
        assert "nas" in result.output
        assert "'port'" in result.output

    def test_unparseable_file(self, tmp_path: Path) -> None:
        cfg = tmp_path / "config.toml"
        cfg.write_text("devices = [")
        result = CliRunner().invoke(main, ["--config", str(cfg), "check"])
        assert result.exit_code == 1


# ── devices ───────────────────────────────────────────────────────────────────


class TestDevices:
    def test_shows_device_and_canonical_mac(self, tmp_path: Path) -> None:
        cfg = _write_config(tmp_path / "config.toml")
        result = CliRunner().invoke(main, ["--config", str(cfg), "devices"])
        assert result.exit_code == 0
        assert "bedroom_pc" in result.output
        assert "aa:bb:cc:dd:ee:ff" in result.output


# ── wake ──────────────────────────────────────────────────────────────────────


class TestWake:
    @patch("wolgate.core.wol.wake")
    def test_wake_known_device(self, mock_wake: MagicMock, tmp_path: Path) -> None:
        cfg = _write_config(tmp_path / "config.toml", extra='[wol]\nbroadcast_ip = "10.0.0.255"')
        result = CliRunner().invoke(main, ["--config", str(cfg), "wake", "bedroom_pc"])

        assert result.exit_code == 0
        assert "Waking up device: bedroom_pc (Mac Address: aa:bb:cc:dd:ee:ff)" in result.output
        assert mock_wake.call_args.kwargs["ip_address"] == "10.0.0.255"

    @patch("wolgate.core.wol.wake")
    def test_wake_unknown_device(self, mock_wake: MagicMock, tmp_path: Path) -> None:
        cfg = _write_config(tmp_path / "config.toml")
        result = CliRunner().invoke(main, ["--config", str(cfg), "wake", "ghost"])

        assert result.exit_code == 1
        assert "No such device: ghost" in result.output
        mock_wake.assert_not_called()

    @patch("wolgate.core.wol.wake", side_effect=SendError("Permission denied"))
    def test_wake_send_failure_exits_2(self, mock_wake: MagicMock, tmp_path: Path) -> None:
        cfg = _write_config(tmp_path / "config.toml")
        result = CliRunner().invoke(main, ["--config", str(cfg), "wake", "bedroom_pc"])

        assert result.exit_code == 2
        assert "Failed to send WOL packet: Permission denied" in result.output


# ── token ─────────────────────────────────────────────────────────────────────


class TestToken:
    def test_prints_token(self) -> None:
        result = CliRunner().invoke(main, ["token"])
        assert result.exit_code == 0
        assert len(result.output.strip()) >= 40


# ── serve ─────────────────────────────────────────────────────────────────────


class TestServe:
    @patch("uvicorn.run")
    def test_serve_uses_config_port(self, mock_run: MagicMock, tmp_path: Path) -> None:
        cfg = _write_config(tmp_path / "config.toml", extra="port = 9090")
        result = CliRunner().invoke(main, ["--config", str(cfg), "serve"])

        assert result.exit_code == 0
        _, kwargs = mock_run.call_args
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 9090

    @patch("uvicorn.run")
    def test_serve_cli_overrides(self, mock_run: MagicMock, tmp_path: Path) -> None:
        cfg = _write_config(tmp_path / "config.toml")
        result = CliRunner().invoke(
            main, ["--config", str(cfg), "serve", "--host", "127.0.0.1", "--port", "8123"]
        )

        assert result.exit_code == 0
        _, kwargs = mock_run.call_args
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 8123

    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "wolgate" in result.output
