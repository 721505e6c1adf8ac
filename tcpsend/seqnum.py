"""32-bit wrapping sequence numbers and conversion to and from absolute ones."""

from __future__ import annotations

from dataclasses import dataclass

_MODULUS = 1 << 32
_MASK = _MODULUS - 1
_HALF = 1 << 31


@dataclass(frozen=True)
class WrappingInt32:
    """A 32-bit sequence number that wraps around at 2**32."""

    raw_value: int

    def __post_init__(self) -> None:
        if not 0 <= self.raw_value <= _MASK:
            raise ValueError(f"raw value {self.raw_value} does not fit in 32 bits")

    def __add__(self, other: int) -> WrappingInt32:
        if not isinstance(other, int):
            return NotImplemented
        return WrappingInt32((self.raw_value + other) & _MASK)

    def __sub__(self, other: WrappingInt32 | int) -> WrappingInt32 | int:
        """Subtract an offset, or take the signed 32-bit distance to another number."""
        if isinstance(other, WrappingInt32):
            diff = (self.raw_value - other.raw_value) & _MASK
            return diff - _MODULUS if diff >= _HALF else diff
        if isinstance(other, int):
            return WrappingInt32((self.raw_value - other) & _MASK)
        return NotImplemented

    def __str__(self) -> str:
        return str(self.raw_value)


def wrap(n: int, isn: WrappingInt32) -> WrappingInt32:
    """Convert an absolute sequence number to a wrapped one relative to ``isn``."""
    if n < 0:
        raise ValueError("absolute sequence numbers cannot be negative")
    return WrappingInt32((isn.raw_value + n) & _MASK)


def unwrap(n: WrappingInt32, isn: WrappingInt32, checkpoint: int) -> int:
    """Return the absolute sequence number for ``n`` that is closest to ``checkpoint``."""
    if checkpoint < 0:
        raise ValueError("checkpoint cannot be negative")
    offset = (n.raw_value - isn.raw_value) & _MASK
    delta = (offset - checkpoint) & _MASK
    if delta >= _HALF:
        delta -= _MODULUS
    result = checkpoint + delta
    if result < 0:
        result += _MODULUS
    return result