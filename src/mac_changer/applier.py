"""
Platform-specific application of hardware addresses through ifconfig
"""

import logging
import os
import subprocess
import sys
from typing import Optional, Protocol, Sequence

from .config import InterfaceName, MACAddress, Platform
from .errors import ApplyFailureError, UnsupportedPlatformError

logger = logging.getLogger(__name__)

IFCONFIG = "ifconfig"


class CommandRunner(Protocol):
    """
    Protocol for external command execution (structural subtyping).

    Implementations return a CompletedProcess and must not raise for a
    non-zero exit status; the applier decides what counts as failure.
    """

    def run(self, cmd: Sequence[str]) -> subprocess.CompletedProcess: ...


class SubprocessRunner:
    """
    Run commands with subprocess, escalating through sudo when needed.

    Attributes:
        sudo: Prefix commands with sudo when not running as root
        timeout: Seconds before the command is killed; None waits forever
    """

    def __init__(self, sudo: bool = True, timeout: Optional[float] = None):
        self.sudo = sudo
        self.timeout = timeout

    def _full_command(self, cmd: Sequence[str]) -> list[str]:
        if self.sudo and hasattr(os, "geteuid") and os.geteuid() != 0:
            return ["sudo"] + list(cmd)
        return list(cmd)

    def run(self, cmd: Sequence[str]) -> subprocess.CompletedProcess:
        full_cmd = self._full_command(cmd)
        logger.debug(f"Running: {' '.join(full_cmd)}")
        try:
            return subprocess.run(
                full_cmd,
                timeout=self.timeout,
                check=False,
                capture_output=True,
                text=True
            )
        except FileNotFoundError as e:
            raise ApplyFailureError(full_cmd, None, str(e)) from e
        except subprocess.TimeoutExpired as e:
            raise ApplyFailureError(
                full_cmd, None, f"timed out after {self.timeout} seconds"
            ) from e


def detect_platform(identifier: Optional[str] = None) -> Platform:
    """
    Map an OS identifier onto a supported Platform.

    Args:
        identifier: OS identifier such as sys.platform; None uses the host

    Returns:
        Matching Platform member

    Raises:
        UnsupportedPlatformError: If the identifier is not recognized
    """
    if identifier is None:
        identifier = sys.platform
    os_id = identifier.lower()

    if os_id == "darwin":
        return Platform.DARWIN
    elif "bsd" in os_id:
        return Platform.BSD
    elif os_id.startswith("linux"):
        return Platform.LINUX
    elif os_id == "android":
        return Platform.ANDROID
    else:
        raise UnsupportedPlatformError(identifier)


class AddressApplier:
    """
    Applies hardware addresses to live interfaces.

    The platform is resolved lazily on each call so an unsupported host
    fails before any command is attempted.

    Example:
        >>> applier = AddressApplier("linux")
        >>> applier.build_command("eth0", "11:22:33:44:55:66")
        ['ifconfig', 'eth0', 'hw', 'ether', '11:22:33:44:55:66']
    """

    def __init__(
        self,
        platform_identifier: Optional[str] = None,
        runner: Optional[CommandRunner] = None
    ):
        self.platform_identifier = platform_identifier
        self.runner = runner or SubprocessRunner()

    @property
    def platform(self) -> Platform:
        return detect_platform(self.platform_identifier)

    def build_command(self, interface: InterfaceName, address: MACAddress) -> list[str]:
        """Build the full ifconfig command for the host platform"""
        return [IFCONFIG] + self.platform.ifconfig_args(interface, address)

    def apply(self, interface: InterfaceName, address: MACAddress) -> subprocess.CompletedProcess:
        """
        Set the hardware address of an interface.

        Args:
            interface: Interface to modify
            address: Canonical address to apply

        Returns:
            CompletedProcess of the successful command

        Raises:
            UnsupportedPlatformError: If the host platform is unknown
            ApplyFailureError: If the command fails, with its output verbatim
        """
        cmd = self.build_command(interface, address)
        result = self.runner.run(cmd)

        if result.returncode != 0:
            output = result.stderr or result.stdout or ""
            raise ApplyFailureError(cmd, result.returncode, output)

        return result
