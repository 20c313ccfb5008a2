"""
Hardware address normalization, validation and generation
"""

import re
import secrets

from .config import MACAddress
from .errors import InvalidAddressError

# Parameter value asking for a freshly generated address
RANDOM_MAC = "<random mac>"

# Validation pattern advertised for the address parameter
ADDRESS_PATTERN = ":".join(["[a-fA-F0-9]{2}"] * 6)

HEX_DIGITS = "0123456789abcdef"

_CANONICAL_RE = re.compile(r"^([0-9a-f]{2}:){5}[0-9a-f]{2}$")
_DOTTED_RE = re.compile(r"^[0-9a-fA-F]{4}(\.[0-9a-fA-F]{4}){2}$")


def random_mac() -> MACAddress:
    """
    Generate a random hardware address.

    Every hex digit is drawn independently, so the result matches
    ADDRESS_PATTERN and is never reused between calls.
    """
    digits = [secrets.choice(HEX_DIGITS) for _ in range(12)]
    return ":".join("".join(digits[i:i + 2]) for i in range(0, 12, 2))


def normalize_mac(value: str) -> str:
    """
    Bring an address string into colon separated lowercase form.

    Accepts ``aa:bb:cc:dd:ee:ff``, ``aa-bb-cc-dd-ee-ff`` and
    ``aabb.ccdd.eeff`` notations. Single digit octets are zero padded.
    The RANDOM_MAC sentinel is replaced with a new random address.

    No validation happens here; see parse_mac().
    """
    value = value.strip()
    if value == RANDOM_MAC:
        value = random_mac()

    if _DOTTED_RE.match(value):
        groups = value.split(".")
        parts = [group[i:i + 2] for group in groups for i in (0, 2)]
    elif "-" in value:
        parts = value.split("-")
    else:
        parts = value.split(":")

    parts = ["0" + part if len(part) == 1 else part for part in parts]
    return ":".join(parts).lower()


def parse_mac(value: str) -> MACAddress:
    """
    Normalize and validate a hardware address.

    Args:
        value: Address in any accepted notation, or RANDOM_MAC

    Returns:
        Canonical address (e.g., 11:22:33:44:55:66)

    Raises:
        InvalidAddressError: If the value is not exactly 6 hex octets
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidAddressError(str(value), "address is empty")

    normalized = normalize_mac(value)
    if not _CANONICAL_RE.match(normalized):
        raise InvalidAddressError(value)

    return normalized
