"""Streaming modhex encoder and decoder.

Both wrappers are raw I/O objects over a caller supplied sink or source. They
own one fixed buffer each and never hold more than ``buffer_size`` encoded
characters, so payloads of any size can be piped through them.
"""

import dataclasses
import enum
import errno
import io
import logging
from typing import Any, Mapping, Optional, Protocol

from .alphabet import REVERSE_TABLE
from .codec import decode, encode
from .errors import InvalidByteError, ModhexError, ShortWriteError, TruncatedStreamError

logger = logging.getLogger(__name__)

# Number of modhex characters buffered by the encoder and decoder.
BUFFER_SIZE = 1024


class Sink(Protocol):
    """Anything with a ``write`` that accepts bytes and reports how many it took.

    The buffer passed to ``write`` is reused afterwards, so a sink must copy
    what it keeps. Returning None means the write would block and nothing
    was taken, as with a non-blocking raw file.
    """

    def write(self, data: memoryview) -> Optional[int]: ...


class Source(Protocol):
    """Anything with a ``read`` that returns ``b""`` at end of input.

    A non-blocking source may return None when no data is available yet.
    """

    def read(self, size: int) -> Optional[bytes]: ...


@dataclasses.dataclass
class StreamConfig:
    buffer_size: int = BUFFER_SIZE

    def __post_init__(self) -> None:
        if (
            isinstance(self.buffer_size, bool)
            or not isinstance(self.buffer_size, int)
            or self.buffer_size < 2
            or self.buffer_size % 2 != 0
        ):
            raise ValueError(
                f"buffer_size must be an even integer >= 2, got {self.buffer_size!r}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StreamConfig":
        buffer_size = int(data.get("buffer_size", BUFFER_SIZE))
        return cls(buffer_size=buffer_size)


class StreamState(enum.Enum):
    # No terminal condition yet.
    OPEN = "open"
    # Condition latched, decodable characters still buffered.
    DRAINING = "draining"
    # Condition latched and buffer drained; every read reports it.
    CLOSED = "closed"


class Encoder(io.RawIOBase):
    """Writable stream that modhex-encodes everything written to it into ``sink``.

    The first failure of the sink is latched, whether it raised, took fewer
    bytes than offered or returned None because it would block. The encoder
    then stays failed and every later write raises the same error. A write
    that had already consumed input when the sink failed returns the number
    of source bytes whose encoding fully reached the sink, and the error
    surfaces on the next call.
    """

    def __init__(self, sink: Sink, buffer_size: int = BUFFER_SIZE) -> None:
        super().__init__()
        StreamConfig(buffer_size=buffer_size)
        self._sink = sink
        self._out = bytearray(buffer_size)
        self._view = memoryview(self._out)
        self._err: Optional[BaseException] = None

    @property
    def error(self) -> Optional[BaseException]:
        return self._err

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        if self.closed:
            raise ValueError("write to closed modhex encoder")
        if self._err is not None:
            raise self._err.with_traceback(None)
        src = memoryview(data).cast("B")
        chunk_size = len(self._out) // 2
        consumed = 0
        try:
            for offset in range(0, len(src), chunk_size):
                encoded = encode(self._view, src[offset : offset + chunk_size])
                try:
                    written = self._sink.write(self._view[:encoded])
                except Exception as exc:
                    self._latch(exc.with_traceback(None))
                    written = 0
                else:
                    if written is None:
                        written = 0
                        self._latch(
                            BlockingIOError(errno.EAGAIN, "modhex: sink would block")
                        )
                    elif written < encoded:
                        self._latch(ShortWriteError(written, encoded))
                consumed += written // 2
                if self._err is not None:
                    break
        finally:
            # Drop the export on the caller's buffer even if the sink failed.
            src.release()
        if self._err is not None and consumed == 0:
            raise self._err.with_traceback(None)
        return consumed

    def _latch(self, exc: BaseException) -> None:
        self._err = exc
        logger.debug("modhex encoder failed: %r", exc)


class Decoder(io.RawIOBase):
    """Readable stream of the bytes decoded from the modhex text in ``source``.

    Decoded data is always handed out before any error: malformed input, a
    truncated final pair or a failure of the source is raised only once
    every byte decodable ahead of it has been returned. From then on every
    read raises the same error. A clean end of input reads as ``b""``, and a
    read returns None while a non-blocking source has nothing new.
    """

    def __init__(self, source: Source, buffer_size: int = BUFFER_SIZE) -> None:
        super().__init__()
        StreamConfig(buffer_size=buffer_size)
        self._source = source
        self._buf = bytearray(buffer_size)
        self._view = memoryview(self._buf)
        self._start = 0
        self._end = 0
        self._state = StreamState.OPEN
        self._err: Optional[BaseException] = None

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def error(self) -> Optional[BaseException]:
        return self._err

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> Optional[int]:
        if self.closed:
            raise ValueError("read from closed modhex decoder")
        dst = memoryview(b).cast("B")
        try:
            if len(dst) == 0:
                return 0
            n = self._decode_into(dst)
        finally:
            dst.release()
        if n is None or n:
            return n
        if self._err is not None:
            raise self._err.with_traceback(None)
        return 0

    def readall(self) -> Optional[bytes]:
        """Read until end of input.

        If decoding fails part way, the raised ModhexError carries the bytes
        read by this call in ``partial``. Returns what is available (or None
        if nothing is) when a non-blocking source runs dry.
        """
        out = bytearray()
        while True:
            try:
                data = self.read(io.DEFAULT_BUFFER_SIZE)
            except ModhexError as exc:
                exc.partial = bytes(out)
                exc.count = len(out)
                raise
            if data is None:
                return bytes(out) if out else None
            if not data:
                return bytes(out)
            out += data

    def _decode_into(self, dst: memoryview) -> Optional[int]:
        while self._state is StreamState.OPEN and self._end - self._start < 2:
            if not self._fill():
                # Source would block; fewer than two characters are buffered.
                return None

        count = min(len(dst), (self._end - self._start) // 2)
        n = 0
        if count:
            try:
                n = decode(dst[:count], self._view[self._start : self._start + 2 * count])
            except ModhexError as exc:
                # Nothing after a bad pair is trusted.
                n = exc.count
                self._start = self._end = 0
                self._latch(exc.with_traceback(None))
            else:
                self._start += 2 * n

        if self._state is StreamState.DRAINING and self._end - self._start < 2:
            self._state = StreamState.CLOSED
        return n

    def _fill(self) -> bool:
        """Read more encoded input; False when the source would block."""
        residual = self._end - self._start
        if residual:
            self._buf[0] = self._buf[self._start]
        self._start, self._end = 0, residual

        capacity = len(self._buf) - residual
        try:
            data = self._source.read(capacity)
        except Exception as exc:
            self._latch(exc.with_traceback(None))
            return True

        if data is None:
            return False
        if not data:
            if residual % 2 == 1:
                last = self._buf[residual - 1]
                if REVERSE_TABLE[last] is None:
                    self._latch(InvalidByteError(last))
                else:
                    self._latch(TruncatedStreamError())
            else:
                self._latch(None)
            return True
        if len(data) > capacity:
            raise ValueError(
                f"source returned {len(data)} bytes, at most {capacity} were requested"
            )
        self._view[residual : residual + len(data)] = data
        self._end = residual + len(data)
        return True

    def _latch(self, exc: Optional[BaseException]) -> None:
        self._err = exc
        self._state = StreamState.DRAINING
        logger.debug(
            "modhex decoder latched %s with %d characters buffered",
            "end of input" if exc is None else repr(exc),
            self._end - self._start,
        )


def new_encoder(sink: Sink, config: Optional[StreamConfig] = None) -> Encoder:
    cfg = config if config is not None else StreamConfig()
    return Encoder(sink, buffer_size=cfg.buffer_size)


def new_decoder(source: Source, config: Optional[StreamConfig] = None) -> Decoder:
    cfg = config if config is not None else StreamConfig()
    return Decoder(source, buffer_size=cfg.buffer_size)


__all__ = [
    "BUFFER_SIZE",
    "Decoder",
    "Encoder",
    "Sink",
    "Source",
    "StreamConfig",
    "StreamState",
    "new_decoder",
    "new_encoder",
]
