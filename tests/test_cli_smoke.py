"""Smoke tests for CLI commands.

Uses Click's CliRunner with discovery patched out, so no USB access is
needed.
"""

import logging
from unittest.mock import MagicMock, Mock, patch

import pytest
from click.testing import CliRunner

from monomegrid.cli.main import cli
from monomegrid.exceptions import DeviceError, USBAccessError


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def base_args(temp_dir):
    """Keep logs and config inside the temporary directory."""
    root = logging.getLogger()
    before = list(root.handlers)

    yield ['--log-file', str(temp_dir / "test.log"), '--config', str(temp_dir / "config.json")]

    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()


@pytest.mark.integration
class TestCLIHelp:
    """Test that all commands have working help text."""

    def test_main_help(self, runner):
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        assert 'monome grids' in result.output

    def test_version_flag(self, runner):
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert '0.1.0' in result.output

    @pytest.mark.parametrize("command", ["list", "marquee", "print", "demo"])
    def test_command_help(self, runner, command):
        result = runner.invoke(cli, [command, '--help'])
        assert result.exit_code == 0


@pytest.mark.integration
class TestListCommand:
    """Test the list command."""

    def test_no_devices(self, runner, base_args):
        with patch("monomegrid.cli.commands.list.usb_devices", return_value=[]):
            result = runner.invoke(cli, base_args + ['list'])

        assert result.exit_code == 0
        assert "No USB devices found for 0403:6001" in result.output

    def test_lists_devices(self, runner, base_args):
        dev = MagicMock(idVendor=0x0403, idProduct=0x6001, bus=1, address=7)

        with patch("monomegrid.cli.commands.list.usb_devices", return_value=[dev]):
            result = runner.invoke(cli, base_args + ['list'])

        assert result.exit_code == 0
        assert "[0] 0403:6001 (bus 1, address 7)" in result.output

    def test_probe_shows_kind(self, runner, base_args):
        dev = MagicMock(idVendor=0x0403, idProduct=0x6001, bus=1, address=7)
        conn = MagicMock(rows=8, cols=16, num_buttons=128)
        conn.__enter__.return_value = conn
        conn.__str__.return_value = "monome128"

        with patch("monomegrid.cli.commands.list.usb_devices", return_value=[dev]), \
                patch("monomegrid.cli.commands.list.connect", return_value=conn):
            result = runner.invoke(cli, base_args + ['list', '--probe'])

        assert result.exit_code == 0
        assert "Kind: monome128 (8x16, 128 buttons)" in result.output

    def test_usb_not_accessible(self, runner, base_args):
        error = USBAccessError("No backend available")

        with patch("monomegrid.cli.commands.list.usb_devices", side_effect=error):
            result = runner.invoke(cli, base_args + ['list'])

        assert result.exit_code == 1
        assert "Could not access the USB bus" in result.output
        assert "libusb" in result.output


@pytest.mark.integration
class TestShowCommands:
    """Test marquee and print with a mocked row device."""

    def test_marquee_uses_config_delay(self, runner, base_args):
        row = Mock()

        with patch("monomegrid.cli.commands.show.open_row", return_value=row):
            result = runner.invoke(cli, base_args + ['marquee', 'hello'])

        assert result.exit_code == 0
        row.marquee.assert_called_once_with('hello', 0.08)
        row.close.assert_called_once()

    def test_print_with_delay(self, runner, base_args):
        row = Mock()

        with patch("monomegrid.cli.commands.show.open_row", return_value=row):
            result = runner.invoke(cli, base_args + ['print', 'hi', '--delay', '0.2'])

        assert result.exit_code == 0
        row.print_text.assert_called_once_with('hi', 0.2)

    def test_device_error_exits(self, runner, base_args):
        row = Mock()
        row.marquee.side_effect = DeviceError("monome64", 0, 0, "switch on", OSError("pipe"))

        with patch("monomegrid.cli.commands.show.open_row", return_value=row):
            result = runner.invoke(cli, base_args + ['marquee', 'x'])

        assert result.exit_code == 1
        assert "ERROR:" in result.output
        row.close.assert_called_once()

    def test_no_devices(self, runner, base_args):
        with patch("monomegrid.cli.commands.common.connections", return_value=([], None)):
            result = runner.invoke(cli, base_args + ['marquee', 'x'])

        assert result.exit_code != 0
        assert "no monome devices found" in result.output


@pytest.mark.integration
class TestConfigHandling:
    """Test config errors in the group callback."""

    def test_invalid_config(self, runner, base_args, temp_dir):
        (temp_dir / "config.json").write_text('{"row_name": "ROW",}')

        result = runner.invoke(cli, base_args + ['list'])

        assert result.exit_code == 1
        assert "trailing comma" in result.output
