"""Small helpers shared by the synchronisation code."""

import enum
import ipaddress
import socket
from dataclasses import dataclass


class MismatchingIpVersionError(Exception):
    """No address of the requested IP version was found for a hostname."""


def get_hostname_ip(hostname, isipv6):
    """Resolve ``hostname`` and return its first IPv6 or IPv4 address."""
    wanted_version = 6 if isipv6 else 4
    for *_, sockaddr in socket.getaddrinfo(hostname, None):
        address = ipaddress.ip_address(str(sockaddr[0]).split("%", 1)[0])
        if address.version == wanted_version:
            return address
    raise MismatchingIpVersionError(
        f"{hostname} has no IPv{wanted_version} address"
    )


def wrap_diff(from_value, to_value, max_value):
    """Signed difference between two values on a scale that wraps at ``max_value``."""
    threshold = max_value * 0.5
    if abs(from_value - to_value) > threshold:
        if from_value < threshold and to_value > threshold:
            return -(from_value + max_value - to_value)
        return to_value + max_value - from_value
    return to_value - from_value


class Category(enum.Enum):
    """Who a synchronised variable is sent by."""

    SHARED = enum.auto()
    MASTER = enum.auto()
    SERVER = enum.auto()
    INIT = enum.auto()


class InDataTypes(enum.Enum):
    """Wire data types of simulation variables."""

    BOOL = "bool"
    I32 = "i32"
    I64 = "i64"
    F64 = "f64"


class NumberDigits:
    """Decimal digits of a non-negative number, ones place first."""

    def __init__(self, value):
        digits = []
        while value > 0:
            value, digit = divmod(value, 10)
            digits.append(digit)
        self._digits = tuple(digits)

    def get(self, index):
        """Digit at ``index``; missing places read as 0, like zero padding."""
        if index >= len(self._digits):
            return 0
        return self._digits[index]


@dataclass(frozen=True)
class Vector3:
    """A three component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)