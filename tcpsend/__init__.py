"""The sending half of a TCP implementation: sequence numbers, segments, and a sender with flow control and retransmission."""

__version__ = "0.1.0"
__all__ = ["seqnum", "segment", "sender"]