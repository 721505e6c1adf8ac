# tcpsend

The sending half of a TCP connection, in plain Python with no dependencies.

A `TCPSender` takes the bytes an application writes into its outbound stream. It cuts them into segments that fit the receiver's advertised window and keeps the segments that have not been acknowledged. When the retransmission timer runs out, it sends the oldest of them again.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `tcpsend.seqnum`
  - `WrappingInt32`: a frozen 32-bit sequence number that wraps at 2**32. It raises `ValueError` if its raw value does not fit in 32 bits.
  - `WrappingInt32 + int` and `WrappingInt32 - int` give a new wrapped number.
  - `WrappingInt32 - WrappingInt32` gives the signed 32-bit distance between the two numbers.
  - `wrap(n, isn)` turns an absolute sequence number into a wrapped one.
  - `unwrap(n, isn, checkpoint)` turns a wrapped number back into the absolute number closest to `checkpoint`.
- `tcpsend.segment`
  - `Segment`: a frozen record of `seqno`, `syn`, `fin` and `payload`.
  - `Segment.length_in_sequence_space()` counts the payload bytes, plus one for SYN and one for FIN.
  - `OutboundStream`: a bounded byte buffer.
  - `OutboundStream.write()` accepts as much as fits and returns the count. It raises `ValueError` once `end_input()` has been called.
  - `OutboundStream.read(size)` removes up to `size` bytes from the front of the buffer.
  - Further methods: `input_ended()`, `buffer_empty()`, `buffer_size()`, `remaining_capacity()`, `bytes_written()` and `bytes_read()`.
- `tcpsend.sender`
  - `TCPSender`.
  - The constants `MAX_PAYLOAD_SIZE` (1452), `DEFAULT_CAPACITY` (64000) and `TIMEOUT_DFLT` (1000 ms).

## Using the sender

```python
from tcpsend.sender import TCPSender
from tcpsend.seqnum import WrappingInt32

sender = TCPSender(capacity=64000, retx_timeout=1000, fixed_isn=WrappingInt32(0))

sender.fill_window()                      # queues the SYN
syn = sender.segments_out.popleft()

sender.ack_received(WrappingInt32(1), 1000)
sender.stream_in.write(b"hello")
sender.fill_window()                      # queues a segment carrying b"hello"

sender.tick(1000)                         # timer expires: oldest segment is queued again
print(sender.consecutive_retransmissions())  # 1
print(sender.bytes_in_flight())              # 5
```

Without `fixed_isn`, the initial sequence number is chosen at random.

### Reading output and feeding input

- `segments_out` is a `deque` of `Segment`s waiting to be sent. The caller removes segments from it.
- `stream_in` is the `OutboundStream` the application writes into. Call `stream_in.end_input()` to close it. The next `fill_window()` then sends a FIN.

### Flow control

- `fill_window()` sends new data without going past the receiver's window.
- Each segment carries at most `MAX_PAYLOAD_SIZE` bytes.
- The FIN rides on the last data segment when there is room for it.
- A window advertisement of zero is treated as one, so that the sender keeps probing.

### Acknowledgments and retransmission

`ack_received(ackno, window_size)` handles an acknowledgment:

- It ignores acknowledgments beyond what has been sent.
- It drops segments that are fully acknowledged.
- It resets the retransmission timeout and the count of consecutive retransmissions.
- It raises `ValueError` for a window size outside 16 bits.

`tick(ms)` advances time. When the timer expires, `tick` queues the oldest unacknowledged segment again. If the receiver's last window was non-zero, it also doubles the timeout and counts the retransmission.

### Other methods

- `send_empty_segment()` queues a flagless, empty segment at the next sequence number.
- `bytes_in_flight()` reports how many sequence numbers are sent but not acknowledged. Counts are in sequence space, so the SYN and the FIN each take one sequence number.
- `next_seqno_absolute()` gives the next sequence number as an absolute value.
- `next_seqno()` gives the next sequence number wrapped.

## What it does not do

- The package is only the sender. It has no receiver and no reassembly of incoming data.
- It has no connection state machine.
- Segments carry no acknowledgment number, window or ports, and nothing is serialized to or parsed from the wire.
- It opens no sockets. The caller decides what to do with `segments_out`.
- It does not stop retrying after some number of attempts. It only reports `consecutive_retransmissions()`.