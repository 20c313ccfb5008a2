"""
Controller owning the configure / start / stop lifecycle of a fake address
"""

import logging
from typing import Callable, Optional

from .address import parse_mac
from .applier import AddressApplier
from .config import ChangerState, InterfaceHandle, MACAddress
from .errors import (
    AlreadyConfiguredError, ConfigurationError, NotConfiguredError, UnknownCommandError
)
from .settings import Settings

logger = logging.getLogger(__name__)


class MacChanger:
    """
    Temporarily overrides the hardware address of one interface.

    Lifecycle:
    1. configure() captures the interface's current address as the
       original and validates the desired one (no device writes)
    2. start() applies the desired address
    3. stop() restores the original address and allows reconfiguration

    The original address is captured once per cycle and is the only
    source used for restoring. Calls must be serialized by the caller;
    there is no internal locking.

    Attributes:
        handle: Interface handle, written only after successful applies
        settings: Parameter source read on every configure()
        applier: Platform-specific address applier
    """

    NAME = "mac.changer"
    DESCRIPTION = "Change active interface mac address."

    CMD_ON = "mac.changer on"
    CMD_OFF = "mac.changer off"

    def __init__(
        self,
        handle: InterfaceHandle,
        settings: Optional[Settings] = None,
        applier: Optional[AddressApplier] = None
    ):
        self.handle = handle
        self.settings = settings or Settings()
        self.applier = applier or AddressApplier()

        self._iface: Optional[str] = None
        self._original: Optional[MACAddress] = None
        self._desired: Optional[MACAddress] = None
        self._running = False

    @property
    def state(self) -> ChangerState:
        if self._original is None:
            return ChangerState.UNCONFIGURED
        if self._running:
            return ChangerState.RUNNING
        return ChangerState.CONFIGURED

    @property
    def running(self) -> bool:
        return self.state is ChangerState.RUNNING

    @property
    def original(self) -> Optional[MACAddress]:
        return self._original

    @property
    def desired(self) -> Optional[MACAddress]:
        return self._desired

    @property
    def iface(self) -> Optional[str]:
        return self._iface

    @property
    def handlers(self) -> dict[str, Callable[[], None]]:
        """Verbs exposed to the surrounding session"""
        return {
            self.CMD_ON: self.start,
            self.CMD_OFF: self.stop,
        }

    def handle_command(self, command: str) -> None:
        """
        Dispatch a session verb.

        Raises:
            UnknownCommandError: If the verb is not handled by this changer
        """
        handler = self.handlers.get(" ".join(command.split()))
        if handler is None:
            raise UnknownCommandError(f"Unknown command: {command}")
        handler()

    def configure(self) -> None:
        """
        Read parameters and capture the original address.

        Raises:
            AlreadyConfiguredError: If not turned off since the last configure
            ConfigurationError: If no interface name is available, or it is not
                the interface held by the handle
            InvalidAddressError: If the desired address is malformed
        """
        if self._original is not None:
            raise AlreadyConfiguredError(self.NAME)

        iface = self.settings.iface or self.handle.name
        if not iface:
            raise ConfigurationError("mac.changer.iface is not set")
        if iface != self.handle.name:
            raise ConfigurationError(
                f"mac.changer.iface is {iface} but the session interface is "
                f"{self.handle.name}, its address cannot be restored"
            )

        # Random sentinel is resolved here, once per cycle
        desired = parse_mac(self.settings.address)

        if self.handle.hw_address is None:
            raise ConfigurationError(
                f"Hardware address of {self.handle.name} is unknown, cannot restore it later"
            )

        self._iface = iface
        self._desired = desired
        self._original = self.handle.hw_address
        logger.debug(f"{self.NAME} configured: {iface} {self._original} -> {desired}")

    def attach(self, handle: InterfaceHandle) -> None:
        """
        Switch to another interface between configuration cycles.

        Raises:
            AlreadyConfiguredError: If not turned off first
        """
        if self._original is not None:
            raise AlreadyConfiguredError(self.NAME)
        self.handle = handle

    def _set_mac(self, address: MACAddress) -> None:
        self.applier.apply(self._iface, address)
        self.handle.hw_address = address

    def start(self) -> None:
        """
        Apply the desired address, configuring first when needed.

        On failure the changer stays configured and start() may be retried.
        """
        state = self.state
        if state is ChangerState.RUNNING:
            raise AlreadyConfiguredError(self.NAME)
        if state is ChangerState.UNCONFIGURED:
            self.configure()

        self._set_mac(self._desired)
        self._running = True
        logger.info(f"[OK] Interface mac address set to {self._desired}")

    def stop(self) -> None:
        """
        Restore the original address and return to the unconfigured state.

        If restoring fails nothing is cleared, so stop() can be retried.
        """
        if self._original is None:
            raise NotConfiguredError(f"{self.NAME} is not running")

        restored = self._original
        self._set_mac(restored)

        self._original = None
        self._desired = None
        self._running = False
        logger.info(f"[OK] Interface mac address restored to {restored}")
