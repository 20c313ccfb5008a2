"""
Data model and type definitions
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

InterfaceName = str
MACAddress = str


class ChangerState(Enum):
    """Lifecycle states of a MacChanger"""
    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    RUNNING = "running"


class Platform(Enum):
    """
    Operating systems the changer knows how to drive.

    Each member carries the ifconfig arguments that follow the interface
    name, with ``{address}`` standing in for the new hardware address.
    """
    BSD = ("bsd", ("ether", "{address}"))
    DARWIN = ("darwin", ("ether", "{address}"))
    LINUX = ("linux", ("hw", "ether", "{address}"))
    ANDROID = ("android", ("hw", "ether", "{address}"))

    def __init__(self, identifier: str, template: tuple[str, ...]):
        self.identifier = identifier
        self.template = template

    def ifconfig_args(self, interface: InterfaceName, address: MACAddress) -> list[str]:
        """Build the ifconfig argument list for this platform"""
        return [interface] + [part.format(address=address) for part in self.template]


@dataclass(slots=True)
class InterfaceHandle:
    """
    Owned view of the interface a changer operates on.

    The changer holding the handle is its only writer: ``hw_address`` is
    updated after every successful apply, never before.

    Attributes:
        name: Interface name (e.g., eth0, en7)
        hw_address: Current hardware address in canonical form
    """
    name: InterfaceName
    hw_address: Optional[MACAddress] = None

    def __str__(self) -> str:
        return f"{self.name} ({self.hw_address or 'unknown'})"
