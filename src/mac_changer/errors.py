"""
Exception hierarchy for the mac changer
"""


class MacChangerError(Exception):
    """Base class for every error raised by mac_changer"""


class AlreadyConfiguredError(MacChangerError, RuntimeError):
    """Raised when configuring a changer that was not turned off first"""

    def __init__(self, name: str = "mac.changer"):
        super().__init__(
            f"{name} has already been configured, "
            "you will need to turn it off to re-configure"
        )


class NotConfiguredError(MacChangerError, RuntimeError):
    """Raised when turning off a changer that is not running"""


class InvalidAddressError(MacChangerError, ValueError):
    """Raised for hardware address strings that are not 6 hex octets"""

    def __init__(self, value: str, reason: str = "expected 6 hexadecimal octets"):
        self.value = value
        super().__init__(f"Invalid hardware address '{value}': {reason}")


class ConfigurationError(MacChangerError, ValueError):
    """Raised when a required parameter is missing or unusable"""


class UnsupportedPlatformError(MacChangerError, NotImplementedError):
    """Raised when the host OS has no known ifconfig syntax"""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"OS {identifier} is not supported by mac.changer module.")


class ApplyFailureError(MacChangerError, OSError):
    """
    Raised when the external command changing the address fails.

    Attributes:
        command: Full argument list that was executed
        returncode: Exit status, or None if the command never started
        output: Captured stderr (or stdout when stderr was empty), verbatim
    """

    def __init__(self, command, returncode, output: str):
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        detail = output.strip() or f"exit status {returncode}"
        super().__init__(f"'{' '.join(self.command)}' failed: {detail}")


class UnknownCommandError(MacChangerError, ValueError):
    """Raised when dispatching a verb the changer does not handle"""
