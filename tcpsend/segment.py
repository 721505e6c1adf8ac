"""Outgoing segments and the byte stream that feeds them."""

from __future__ import annotations

from dataclasses import dataclass

from tcpsend.seqnum import WrappingInt32


@dataclass(frozen=True)
class Segment:
    """A segment produced by the sender: sequence number, flags and payload."""

    seqno: WrappingInt32
    syn: bool = False
    fin: bool = False
    payload: bytes = b""

    def length_in_sequence_space(self) -> int:
        """Sequence numbers occupied: payload bytes plus one each for SYN and FIN."""
        return len(self.payload) + int(self.syn) + int(self.fin)


class OutboundStream:
    """A bounded in-memory byte stream, written by the application and read by the sender."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity cannot be negative")
        self._capacity = capacity
        self._buffer = bytearray()
        self._ended = False
        self._written = 0
        self._read = 0

    def write(self, data: bytes) -> int:
        """Append as much of ``data`` as fits; return the number of bytes accepted."""
        if self._ended:
            raise ValueError("stream input has ended")
        accepted = data[: self.remaining_capacity()]
        self._buffer.extend(accepted)
        self._written += len(accepted)
        return len(accepted)

    def read(self, size: int) -> bytes:
        """Remove and return up to ``size`` bytes from the front of the buffer."""
        if size < 0:
            raise ValueError("read size cannot be negative")
        chunk = bytes(self._buffer[:size])
        del self._buffer[:size]
        self._read += len(chunk)
        return chunk

    def end_input(self) -> None:
        self._ended = True

    def input_ended(self) -> bool:
        return self._ended

    def buffer_empty(self) -> bool:
        return not self._buffer

    def buffer_size(self) -> int:
        return len(self._buffer)

    def remaining_capacity(self) -> int:
        return self._capacity - len(self._buffer)

    def bytes_written(self) -> int:
        return self._written

    def bytes_read(self) -> int:
        return self._read