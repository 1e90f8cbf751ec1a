import re
from typing import Iterator, Tuple

from .errors import ConfigurationError

_OCTET_RE = re.compile(r'[0-9]{1,3}')
_PREFIX_RE = re.compile(r'[0-9]{1,2}')
_MAX_U32 = 0xFFFFFFFF


def _parse_octets(text: str, count: int) -> Tuple[int, ...]:
    parts = text.strip().split('.')
    if len(parts) != count:
        raise ConfigurationError(f"Expected {count} dot-separated octets, got '{text}'")

    octets = []
    for part in parts:
        if not _OCTET_RE.fullmatch(part):
            raise ConfigurationError(f"Invalid octet '{part}' in '{text}'")
        value = int(part)
        if value > 255:
            raise ConfigurationError(f"Octet {value} out of range 0-255 in '{text}'")
        octets.append(value)
    return tuple(octets)


def ip_to_int(ip: str) -> int:
    """
    Converts a dotted-quad IPv4 address to its 32-bit unsigned value.
    Example: "10.0.1.2" -> 167772418
    """
    a, b, c, d = _parse_octets(ip, 4)
    return (a << 24) | (b << 16) | (c << 8) | d


def int_to_ip(value: int) -> str:
    if not 0 <= value <= _MAX_U32:
        raise ValueError(f"{value} is not a 32-bit unsigned value")
    return f"{(value >> 24) & 0xFF}.{(value >> 16) & 0xFF}.{(value >> 8) & 0xFF}.{value & 0xFF}"


def parse_base(base: str) -> str:
    """Validates a 3-octet prefix like '192.168.1' and returns it normalised."""
    return '.'.join(str(o) for o in _parse_octets(base, 3))


def parse_cidr(cidr: str) -> Tuple[int, int]:
    """
    Parses 'a.b.c.d/n' into (address_int, prefix).
    Host bits are kept; masking happens in the expander.
    """
    if cidr.count('/') != 1:
        raise ConfigurationError(f"CIDR must look like a.b.c.d/n, got '{cidr}'")

    address, prefix_text = cidr.strip().split('/')
    if not _PREFIX_RE.fullmatch(prefix_text):
        raise ConfigurationError(f"Invalid CIDR prefix '{prefix_text}'")

    prefix = int(prefix_text)
    if prefix > 32:
        raise ConfigurationError(f"CIDR prefix {prefix} outside 0-32")
    return ip_to_int(address), prefix


class AddressRangeExpander:
    """
    Lazily enumerates the targets of a RangeSpec in ascending 32-bit order.

    Every call to iter() starts a fresh pass, so the same expander can be
    walked once for counting/progress and again for probing.

    CIDR ranges drop the network and broadcast addresses for /0-/30.
    /31 and /32 have no separate broadcast, so the whole block is used.
    """

    def __init__(self, spec):
        self.spec = spec
        if spec.cidr is not None:
            address, prefix = parse_cidr(spec.cidr)
            mask = (_MAX_U32 << (32 - prefix)) & _MAX_U32
            network = address & mask
            broadcast = network | (~mask & _MAX_U32)
            if prefix <= 30:
                self._first, self._last = network + 1, broadcast - 1
            else:
                self._first, self._last = network, broadcast
        else:
            base_int = ip_to_int(f"{parse_base(spec.base)}.0")
            self._first, self._last = base_int + spec.start, base_int + spec.end

    def bounds(self) -> Tuple[int, int]:
        return self._first, self._last

    def __len__(self) -> int:
        return max(0, self._last - self._first + 1)

    def __iter__(self) -> Iterator[str]:
        for value in range(self._first, self._last + 1):
            yield int_to_ip(value)

    def __repr__(self):
        return f"AddressRangeExpander({self.spec.label}, {len(self)} targets)"


def expand_range(spec) -> AddressRangeExpander:
    return AddressRangeExpander(spec)
