"""
Configuration loading for mac-changer

Search order (later overrides earlier):
1. Built-in defaults (random address, sudo enabled, no timeout)
2. /etc/mac-changer/config.toml (system-wide)
3. ~/.config/mac-changer/config.toml (user global)
4. ./.mac-changer.toml (local directory - adjacent invocation)
5. Environment variables (MAC_CHANGER_*)
6. CLI arguments (highest priority)

Profile support allows named interface/address pairs.
"""

from __future__ import annotations

import os
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any

# Python 3.11+ has tomllib in stdlib
try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found]

from .address import RANDOM_MAC


logger = logging.getLogger(__name__)

# Config file names
CONFIG_FILENAME = "config.toml"
LOCAL_CONFIG_FILENAME = ".mac-changer.toml"
ALT_LOCAL_CONFIG = "mac-changer.toml"

# Environment variable prefix
ENV_PREFIX = "MAC_CHANGER_"

# Parameter names as exposed to the interactive session
PARAM_IFACE = "mac.changer.iface"
PARAM_ADDRESS = "mac.changer.address"


def get_config_dir() -> Path:
    """Get user config directory (XDG-compliant)."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "mac-changer"
    return Path.home() / ".config" / "mac-changer"


def get_config_paths() -> list[Path]:
    """
    Return list of config paths to check, in precedence order (lowest first).

    Returns paths that WOULD be checked - caller should verify existence.
    """
    cwd = Path.cwd()
    return [
        Path("/etc/mac-changer") / CONFIG_FILENAME,
        get_config_dir() / CONFIG_FILENAME,
        Path.home() / ".mac-changer.toml",
        cwd / LOCAL_CONFIG_FILENAME,
        cwd / ALT_LOCAL_CONFIG,
    ]


@dataclass
class ChangerProfile:
    """A named interface/address pair."""
    iface: str = ""
    address: str = RANDOM_MAC
    description: str = ""


@dataclass
class Settings:
    """
    Merged configuration settings from all sources.

    ``iface`` and ``address`` back the mac.changer.iface and
    mac.changer.address parameters and may be changed at runtime; the
    changer reads them each time it is configured.
    """
    iface: str = ""
    address: str = RANDOM_MAC

    # Command execution
    sudo: bool = True
    timeout: float | None = None

    # Profile management
    default_profile: str | None = None
    profiles: dict[str, ChangerProfile] = field(default_factory=dict)

    # Metadata
    config_sources: list[str] = field(default_factory=list)

    def get_param(self, name: str) -> str:
        """Get a session parameter by its dotted name."""
        if name == PARAM_IFACE:
            return self.iface
        if name == PARAM_ADDRESS:
            return self.address
        raise KeyError(name)

    def set_param(self, name: str, value: str) -> None:
        """Set a session parameter by its dotted name."""
        if name == PARAM_IFACE:
            self.iface = value
        elif name == PARAM_ADDRESS:
            self.address = value
        else:
            raise KeyError(name)

    def apply_profile(self, name: str) -> bool:
        """
        Apply a named profile to current settings.

        Returns True if profile was found and applied.
        """
        profile = self.profiles.get(name)
        if not profile:
            return False

        if profile.iface:
            self.iface = profile.iface
        self.address = profile.address
        return True

    def list_profiles(self) -> list[str]:
        """List available profile names."""
        return list(self.profiles.keys())


def _parse_timeout(value: Any) -> float | None:
    if value in (None, "", 0, "0"):
        return None
    try:
        return float(value)
    except TypeError:
        raise ValueError(f"invalid timeout: {value!r}") from None


def _merge_defaults(settings: Settings, data: dict[str, Any]) -> None:
    """Merge [defaults] section into settings."""
    defaults = data.get("defaults", {})

    # Validate before assigning so a bad file leaves settings untouched
    timeout = _parse_timeout(defaults["timeout"]) if "timeout" in defaults else settings.timeout

    if "iface" in defaults:
        settings.iface = str(defaults["iface"])
    if "address" in defaults:
        settings.address = str(defaults["address"])
    if "sudo" in defaults:
        settings.sudo = bool(defaults["sudo"])
    settings.timeout = timeout


def _merge_profiles(settings: Settings, data: dict[str, Any]) -> None:
    """Merge [profiles.*] sections into settings."""
    for name, profile_data in data.get("profiles", {}).items():
        if not isinstance(profile_data, dict):
            continue

        settings.profiles[name] = ChangerProfile(
            iface=str(profile_data.get("iface", "")),
            address=str(profile_data.get("address", RANDOM_MAC)),
            description=str(profile_data.get("description", "")),
        )


def _merge_config(settings: Settings, data: dict[str, Any], source: str) -> None:
    """Merge a config dict into settings."""
    _merge_defaults(settings, data)
    _merge_profiles(settings, data)

    if "default_profile" in data:
        settings.default_profile = data["default_profile"]

    settings.config_sources.append(source)


def _apply_env_overrides(settings: Settings) -> None:
    """Apply environment variable overrides."""
    env_mappings = {
        f"{ENV_PREFIX}IFACE": "iface",
        f"{ENV_PREFIX}ADDRESS": "address",
        f"{ENV_PREFIX}PROFILE": "default_profile",
    }

    for env_var, attr in env_mappings.items():
        value = os.environ.get(env_var)
        if value:
            setattr(settings, attr, value)
            settings.config_sources.append(f"env:{env_var}")

    sudo = os.environ.get(f"{ENV_PREFIX}SUDO")
    if sudo is not None:
        settings.sudo = sudo.lower() in ("1", "true", "yes")
        settings.config_sources.append(f"env:{ENV_PREFIX}SUDO")

    timeout = os.environ.get(f"{ENV_PREFIX}TIMEOUT")
    if timeout is not None:
        try:
            settings.timeout = _parse_timeout(timeout)
            settings.config_sources.append(f"env:{ENV_PREFIX}TIMEOUT")
        except ValueError:
            logger.warning(f"Ignoring invalid {ENV_PREFIX}TIMEOUT: {timeout!r}")


def load_settings(profile: str | None = None) -> Settings:
    """
    Load and merge settings from all config sources.

    Args:
        profile: Optional profile name to apply after loading.
                 If None and default_profile is set in config, uses that.

    Returns:
        Merged Settings object with all values resolved.
    """
    settings = Settings()

    for config_path in get_config_paths():
        if config_path.exists():
            try:
                with open(config_path, "rb") as f:
                    data = tomllib.load(f)
                _merge_config(settings, data, str(config_path))
                logger.debug(f"Loaded config from {config_path}")
            except (OSError, tomllib.TOMLDecodeError, ValueError) as e:
                logger.warning(f"Failed to load {config_path}: {e}")

    _apply_env_overrides(settings)

    active_profile = profile or settings.default_profile
    if active_profile:
        if settings.apply_profile(active_profile):
            logger.debug(f"Applied profile: {active_profile}")
        else:
            logger.warning(f"Profile not found: {active_profile}")

    return settings


def get_default_config_content() -> str:
    """Return default config file content as a string."""
    return f'''# mac-changer - User Configuration
# Place this file at: ~/.config/mac-changer/config.toml
# Or use a local override: ./.mac-changer.toml

# Profile to apply when none is given via --profile
# default_profile = "cafe"

[defaults]
# iface = "eth0"
address = "{RANDOM_MAC}"
sudo = true
# Seconds to wait for ifconfig; 0 waits forever
timeout = 0

# Named profiles, use with: mac-changer --profile cafe
[profiles.cafe]
iface = "wlan0"
address = "{RANDOM_MAC}"
description = "Fresh random address on the wireless card"

# [profiles.lab]
# iface = "eth1"
# address = "02:00:00:00:00:01"
'''


def init_config(force: bool = False) -> Path | None:
    """
    Initialize user config file with defaults.

    Args:
        force: If True, overwrite existing config.

    Returns:
        Path to created config file, or None if it already exists and force=False.
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / CONFIG_FILENAME

    if config_path.exists() and not force:
        return None

    config_path.write_text(get_default_config_content())
    return config_path
