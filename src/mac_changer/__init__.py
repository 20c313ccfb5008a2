"""
Interface hardware address changer
Temporarily override a MAC address and restore the original on demand

Version 1.0.0
"""

__version__ = "1.0.0"

from .address import RANDOM_MAC, normalize_mac, parse_mac, random_mac
from .applier import AddressApplier, CommandRunner, SubprocessRunner, detect_platform
from .changer import MacChanger
from .config import ChangerState, InterfaceHandle, Platform
from .errors import (
    AlreadyConfiguredError,
    ApplyFailureError,
    ConfigurationError,
    InvalidAddressError,
    MacChangerError,
    NotConfiguredError,
    UnknownCommandError,
    UnsupportedPlatformError,
)
from .settings import Settings, load_settings, init_config

__all__ = [
    "RANDOM_MAC",
    "normalize_mac",
    "parse_mac",
    "random_mac",
    "AddressApplier",
    "CommandRunner",
    "SubprocessRunner",
    "detect_platform",
    "MacChanger",
    "ChangerState",
    "InterfaceHandle",
    "Platform",
    "AlreadyConfiguredError",
    "ApplyFailureError",
    "ConfigurationError",
    "InvalidAddressError",
    "MacChangerError",
    "NotConfiguredError",
    "UnknownCommandError",
    "UnsupportedPlatformError",
    "Settings",
    "load_settings",
    "init_config",
]
