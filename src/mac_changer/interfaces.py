"""
Reading the current hardware address of a named interface
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .address import parse_mac
from .applier import IFCONFIG, CommandRunner, SubprocessRunner
from .config import InterfaceHandle, InterfaceName, MACAddress
from .errors import ApplyFailureError, ConfigurationError, InvalidAddressError

logger = logging.getLogger(__name__)

SYSFS_NET = Path("/sys/class/net")

# Tokens preceding the hardware address in ifconfig output
# (BSD/macOS: ether, old Linux net-tools: HWaddr, OpenBSD: lladdr)
_ADDRESS_KEYWORDS = ("ether", "HWaddr", "lladdr")


def _read_sysfs(interface: InterfaceName) -> Optional[str]:
    address_file = SYSFS_NET / interface / "address"
    if address_file.exists():
        try:
            return address_file.read_text().strip()
        except OSError as e:
            logger.debug(f"Could not read {address_file}: {e}")
    return None


def parse_ifconfig_output(output: str) -> Optional[str]:
    """Extract the first hardware address from ifconfig output"""
    for line in output.splitlines():
        parts = line.split()
        for keyword in _ADDRESS_KEYWORDS:
            if keyword in parts:
                idx = parts.index(keyword)
                if idx + 1 < len(parts):
                    return parts[idx + 1]
    return None


def read_hardware_address(
    interface: InterfaceName,
    runner: Optional[CommandRunner] = None
) -> MACAddress:
    """
    Read the current hardware address of one interface.

    Uses sysfs on Linux and falls back to parsing ``ifconfig <iface>``.

    Args:
        interface: Interface name
        runner: Optional command runner (defaults to a non-sudo subprocess runner)

    Returns:
        Canonical hardware address

    Raises:
        ConfigurationError: If the address cannot be determined
    """
    raw = _read_sysfs(interface) if sys.platform.startswith("linux") else None

    if raw is None:
        runner = runner or SubprocessRunner(sudo=False)
        try:
            result = runner.run([IFCONFIG, interface])
        except ApplyFailureError as e:
            raise ConfigurationError(f"Cannot read hardware address of {interface}: {e}") from e
        if result.returncode != 0:
            raise ConfigurationError(
                f"Cannot read hardware address of {interface}: "
                f"{(result.stderr or '').strip() or 'ifconfig failed'}"
            )
        raw = parse_ifconfig_output(result.stdout or "")

    if raw is None:
        raise ConfigurationError(f"Interface {interface} has no hardware address")

    try:
        return parse_mac(raw)
    except InvalidAddressError as e:
        raise ConfigurationError(f"Interface {interface} reports an unusable address: {e}") from e


def open_interface(
    interface: InterfaceName,
    runner: Optional[CommandRunner] = None
) -> InterfaceHandle:
    """Create a handle populated with the interface's live address"""
    return InterfaceHandle(name=interface, hw_address=read_hardware_address(interface, runner=runner))
