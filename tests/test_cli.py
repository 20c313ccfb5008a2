"""
Tests for the CLI host and interactive session
"""

import pytest
from unittest.mock import patch

from rich.console import Console

from mac_changer.applier import AddressApplier
from mac_changer.changer import MacChanger
from mac_changer.cli import create_parser, execute, main, run_session
from mac_changer.config import ChangerState, InterfaceHandle
from mac_changer.errors import (
    AlreadyConfiguredError, ConfigurationError, InvalidAddressError, UnknownCommandError
)
from mac_changer.settings import Settings

from conftest import FakeRunner


@pytest.fixture
def console() -> Console:
    return Console(record=True, width=120)


class TestExecute:
    """Test single session commands"""

    def test_on_off(self, changer, console, eth0):
        assert execute("mac.changer on", changer, console)
        assert changer.running
        assert execute("mac.changer off", changer, console)
        assert eth0.hw_address == "de:ad:be:ef:00:01"

    def test_blank_line(self, changer, console):
        assert execute("   ", changer, console)

    @pytest.mark.parametrize("line", ["quit", "exit", "q", "QUIT"])
    def test_quit(self, changer, console, line):
        assert not execute(line, changer, console)

    def test_set_and_get(self, changer, console):
        execute("set mac.changer.address 02-00-00-00-00-07", changer, console)
        assert changer.settings.address == "02-00-00-00-00-07"

        execute("get mac.changer.address", changer, console)
        assert "02-00-00-00-00-07" in console.export_text()

    def test_set_random_sentinel(self, changer, console):
        execute("set mac.changer.address <random mac>", changer, console)
        assert changer.settings.address == "<random mac>"

    def test_set_invalid_address(self, changer, console):
        with pytest.raises(InvalidAddressError):
            execute("set mac.changer.address 11:22", changer, console)
        assert changer.settings.address == "11:22:33:44:55:66"

    @patch("mac_changer.cli.open_interface")
    def test_set_iface_reopens_handle(self, mock_open, changer, console, fake_runner):
        """Test changing the interface also switches the handle written to"""
        wlan0 = InterfaceHandle("wlan0", "02:aa:bb:cc:dd:ee")
        mock_open.return_value = wlan0

        execute("set mac.changer.iface wlan0", changer, console)
        execute("mac.changer on", changer, console)
        execute("mac.changer off", changer, console)

        mock_open.assert_called_once_with("wlan0")
        assert changer.handle is wlan0
        assert wlan0.hw_address == "02:aa:bb:cc:dd:ee"
        assert fake_runner.calls[-1] == ["ifconfig", "wlan0", "hw", "ether", "02:aa:bb:cc:dd:ee"]

    @patch("mac_changer.cli.open_interface")
    def test_set_iface_while_running(self, mock_open, changer, console, eth0):
        mock_open.return_value = InterfaceHandle("wlan0", "02:aa:bb:cc:dd:ee")
        execute("mac.changer on", changer, console)

        with pytest.raises(AlreadyConfiguredError):
            execute("set mac.changer.iface wlan0", changer, console)

        assert changer.handle is eth0
        assert changer.settings.iface == "eth0"

    @patch("mac_changer.cli.open_interface")
    def test_set_same_iface(self, mock_open, changer, console):
        execute("set mac.changer.iface eth0", changer, console)
        mock_open.assert_not_called()

    def test_unknown_param(self, changer, console):
        with pytest.raises(ConfigurationError, match="Unknown parameter"):
            execute("get mac.changer.color", changer, console)

    def test_unknown_command(self, changer, console):
        with pytest.raises(UnknownCommandError):
            execute("reboot", changer, console)

    def test_status(self, changer, console):
        execute("status", changer, console)
        output = console.export_text()
        assert "unconfigured" in output
        assert "eth0" in output

    def test_help(self, changer, console):
        execute("help", changer, console)
        assert "mac.changer off" in console.export_text()


class TestRunSession:
    """Test the interactive loop"""

    def test_restores_on_quit(self, changer, console, eth0, fake_runner):
        """Test leaving the session while running restores the original"""
        with patch("mac_changer.cli.Prompt.ask", side_effect=["mac.changer on", "quit"]):
            assert run_session(changer, console) == 0

        assert changer.state is ChangerState.UNCONFIGURED
        assert eth0.hw_address == "de:ad:be:ef:00:01"
        assert len(fake_runner.calls) == 2

    def test_restores_on_interrupt(self, changer, console, eth0):
        with patch("mac_changer.cli.Prompt.ask", side_effect=["mac.changer on", KeyboardInterrupt]):
            assert run_session(changer, console) == 130

        assert eth0.hw_address == "de:ad:be:ef:00:01"

    def test_errors_keep_session_alive(self, changer, console, caplog):
        with patch("mac_changer.cli.Prompt.ask", side_effect=["mac.changer off", "quit"]):
            assert run_session(changer, console) == 0
        assert "[FAIL]" in caplog.text

    def test_failed_restore_on_exit(self, eth0, fixed_settings, console):
        runner = FakeRunner()
        changer = MacChanger(eth0, fixed_settings, AddressApplier("linux", runner=runner))
        changer.start()
        runner.returncode = 1

        with patch("mac_changer.cli.Prompt.ask", side_effect=["quit"]):
            assert run_session(changer, console) == 1

        assert changer.running


class TestMain:
    """Test the entry point"""

    @pytest.fixture(autouse=True)
    def no_config_files(self, monkeypatch):
        monkeypatch.setattr("mac_changer.settings.get_config_paths", lambda: [])
        for name in ("IFACE", "ADDRESS", "PROFILE", "SUDO", "TIMEOUT"):
            monkeypatch.delenv(f"MAC_CHANGER_{name}", raising=False)

    def test_parser_defaults_from_settings(self):
        parser = create_parser(Settings(iface="en7", sudo=False))
        args = parser.parse_args([])
        assert args.iface == "en7"
        assert args.sudo is False
        assert args.address == "<random mac>"

    def test_show_config(self):
        assert main(["--show-config", "--iface", "eth3"]) == 0

    def test_missing_profile_lists_available(self, capsys):
        assert main(["--profile", "nowhere", "--show-config"]) == 0
        assert "Profile 'nowhere' not found" in capsys.readouterr().out

    @patch("mac_changer.applier.sys.platform", "win32")
    def test_unsupported_platform(self):
        assert main(["--iface", "eth0"]) == 3

    @patch("mac_changer.applier.sys.platform", "linux")
    def test_missing_iface(self):
        assert main([]) == 2

    @patch("mac_changer.applier.sys.platform", "linux")
    def test_invalid_address(self):
        assert main(["--iface", "eth0", "--address", "zz:zz:zz:zz:zz:zz"]) == 2

    @patch("mac_changer.applier.sys.platform", "linux")
    def test_on_then_quit(self):
        """Test --on applies the address and quitting restores it"""
        runner = FakeRunner()
        with patch("mac_changer.cli.open_interface") as open_interface, \
                patch("mac_changer.cli.SubprocessRunner", return_value=runner), \
                patch("mac_changer.cli.Prompt.ask", side_effect=["quit"]):
            open_interface.return_value = InterfaceHandle("eth0", "de:ad:be:ef:00:01")
            code = main(["--iface", "eth0", "--address", "11:22:33:44:55:66", "--on"])

        assert code == 0
        assert runner.calls == [
            ["ifconfig", "eth0", "hw", "ether", "11:22:33:44:55:66"],
            ["ifconfig", "eth0", "hw", "ether", "de:ad:be:ef:00:01"],
        ]
