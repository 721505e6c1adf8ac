"""The sending half of a TCP endpoint: segmentation, flow control and retransmission."""

from __future__ import annotations

import secrets
from collections import deque

from tcpsend.segment import OutboundStream, Segment
from tcpsend.seqnum import WrappingInt32, unwrap, wrap

MAX_PAYLOAD_SIZE = 1452
DEFAULT_CAPACITY = 64000
TIMEOUT_DFLT = 1000
_MAX_WINDOW = 0xFFFF


class TCPSender:
    """Splits an outgoing byte stream into segments, tracks them and retransmits on timeout."""

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        retx_timeout: int = TIMEOUT_DFLT,
        fixed_isn: WrappingInt32 | None = None,
    ) -> None:
        self._isn = fixed_isn if fixed_isn is not None else WrappingInt32(secrets.randbits(32))
        self._initial_rto = retx_timeout
        self._rto = retx_timeout
        self._stream = OutboundStream(capacity)
        self.segments_out: deque[Segment] = deque()
        self._outstanding: deque[Segment] = deque()
        self._next_seqno = 0
        self._total_ms = 0
        self._window_size = 1
        self._receiver_window = 1
        self._bytes_in_flight = 0
        self._consecutive_retransmissions = 0
        self._timer_running = False
        self._timer_expired = False
        self._timer_deadline = 0

    @property
    def stream_in(self) -> OutboundStream:
        """The stream the application writes outgoing bytes into."""
        return self._stream

    def _timer_start(self) -> None:
        if not self._timer_running:
            self._timer_running = True
            self._timer_deadline = self._total_ms + self._rto

    def _timer_stop(self) -> None:
        self._timer_running = False
        self._timer_expired = False
        self._timer_deadline = 0

    def _send(self, seg: Segment) -> int:
        length = seg.length_in_sequence_space()
        self.segments_out.append(seg)
        self._outstanding.append(seg)
        self._next_seqno += length
        self._bytes_in_flight += length
        self._timer_start()
        return length

    def _shrink_window(self, consumed: int) -> None:
        self._window_size = max(self._window_size - consumed, 0)

    def fill_window(self) -> None:
        """Send as many new segments as the window allows."""
        if self._window_size == 0:
            return
        stream = self._stream
        drained = stream.input_ended() and stream.bytes_read() == stream.bytes_written()
        if drained and self._next_seqno == stream.bytes_written() + 2:
            return

        if self._next_seqno == 0:
            consumed = self._send(Segment(seqno=wrap(0, self._isn), syn=True))
            self._shrink_window(consumed)
            return
        if drained and self._next_seqno == stream.bytes_written() + 1:
            consumed = self._send(Segment(seqno=wrap(self._next_seqno, self._isn), fin=True))
            self._shrink_window(consumed)
            return
        if stream.buffer_empty():
            return

        remaining = self._window_size
        consumed = 0
        while not stream.buffer_empty() and remaining:
            payload = stream.read(min(remaining, MAX_PAYLOAD_SIZE))
            fin = (
                len(payload) < remaining
                and stream.input_ended()
                and stream.bytes_read() == stream.bytes_written()
            )
            seg = Segment(seqno=wrap(self._next_seqno, self._isn), fin=fin, payload=payload)
            consumed += self._send(seg)
            if fin:
                break
            remaining -= len(payload)
        self._shrink_window(consumed)

    def ack_received(self, ackno: WrappingInt32, window_size: int) -> None:
        """Process an acknowledgment and window advertisement from the receiver."""
        if not 0 <= window_size <= _MAX_WINDOW:
            raise ValueError(f"window size {window_size} does not fit in 16 bits")
        absackno = unwrap(ackno, self._isn, self._next_seqno)
        if absackno > self._next_seqno:
            return
        self._receiver_window = window_size
        effective = window_size or 1
        self._window_size = max(absackno + effective - self._next_seqno, 0)

        restart = False
        while self._outstanding and self._segment_end(self._outstanding[0]) <= absackno:
            restart = True
            self._bytes_in_flight -= self._outstanding.popleft().length_in_sequence_space()

        if not self._outstanding:
            self._timer_stop()

        if restart:
            self._rto = self._initial_rto
            if self._outstanding:
                self._timer_stop()
                self._timer_start()
            self._consecutive_retransmissions = 0

    def _segment_end(self, seg: Segment) -> int:
        return unwrap(seg.seqno, self._isn, self._next_seqno) + seg.length_in_sequence_space()

    def tick(self, ms_since_last_tick: int) -> None:
        """Advance time, retransmitting the oldest outstanding segment if the timer expires."""
        self._total_ms += ms_since_last_tick
        if (
            self._timer_running
            and self._timer_deadline != 0
            and self._timer_deadline <= self._total_ms
        ):
            self._timer_expired = True
        if self._timer_expired:
            self.segments_out.append(self._outstanding[0])
            if self._receiver_window != 0:
                self._consecutive_retransmissions += 1
                self._rto *= 2
            self._timer_stop()
            self._timer_running = True
            self._timer_deadline = self._total_ms + self._rto

    def send_empty_segment(self) -> None:
        """Queue a segment with no payload and no flags at the next sequence number."""
        self.segments_out.append(Segment(seqno=wrap(self._next_seqno, self._isn)))

    def bytes_in_flight(self) -> int:
        return self._bytes_in_flight

    def consecutive_retransmissions(self) -> int:
        return self._consecutive_retransmissions

    def next_seqno_absolute(self) -> int:
        return self._next_seqno

    def next_seqno(self) -> WrappingInt32:
        return wrap(self._next_seqno, self._isn)