"""Resolved definition commands and their fingerprints."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from glassine.modules.definition.command_type import CommandType

_INT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000

# Space separators, ASCII whitespace, the line and paragraph separators
# and the byte order mark. \x1c-\x1f and \x85 are value characters.
TRIM_CHARACTERS = (
    "\t\n\v\f\r \u00a0\u1680"
    + "".join(chr(code) for code in range(0x2000, 0x200B))
    + "\u2028\u2029\u202f\u205f\u3000\ufeff"
)


def trim_value(text: str) -> str:
    """Strip TRIM_CHARACTERS from both ends of a command value."""
    return text.strip(TRIM_CHARACTERS)


def to_int32(value: int) -> int:
    """Wrap an integer to signed 32-bit two's complement."""
    value &= _INT32_MASK
    return value - (1 << 32) if value & _INT32_SIGN else value


def utf16_code_units(text: str) -> Iterator[int]:
    """Yield the UTF-16 code units of text.

    Characters outside the Basic Multilingual Plane yield their
    surrogate pair.
    """
    for char in text:
        code = ord(char)
        if code > 0xFFFF:
            code -= 0x10000
            yield 0xD800 + (code >> 10)
            yield 0xDC00 + (code & 0x3FF)
        else:
            yield code


def fold_hash(seed: int, codes: Iterable[int]) -> int:
    """Fold codes into seed with the 31-multiplier string hash."""
    h = to_int32((seed << 5) - seed)
    for code in codes:
        h = to_int32(((h << 5) - h) + code)
    return h


def compute_fingerprint(kind: CommandType, value: str) -> int:
    """Fingerprint of a (kind, value) pair as a signed 32-bit integer."""
    return fold_hash(kind.ordinal, utf16_code_units(value))


@dataclass(frozen=True)
class Command:
    """A command that should be communicated to the build engine.

    The value is trimmed with trim_value on construction and must not
    be empty.
    """

    kind: CommandType
    value: str
    fingerprint: int = field(init=False, compare=False)

    def __post_init__(self) -> None:
        value = trim_value(self.value)
        if not value:
            msg = f"Command {self.kind.symbolic_name} requires a non-empty value"
            raise ValueError(msg)
        object.__setattr__(self, "value", value)
        object.__setattr__(
            self, "fingerprint", compute_fingerprint(self.kind, value),
        )

    def __str__(self) -> str:
        return f"{self.kind.symbolic_name} {self.value}"
