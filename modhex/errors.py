"""Exceptions raised by the modhex codec and its stream wrappers."""


class ModhexError(ValueError):
    """Malformed modhex input.

    ``count`` is the number of bytes decoded before the failure and
    ``partial`` holds those bytes when the caller did not supply its own
    destination buffer.
    """

    def __init__(self, message: str, count: int = 0) -> None:
        super().__init__(message)
        self.count = count
        self.partial = b""


class InvalidByteError(ModhexError):
    def __init__(self, byte: int, count: int = 0) -> None:
        self.byte = byte
        char = chr(byte)
        shown = f"U+{byte:04X} {char!r}" if char.isprintable() else f"U+{byte:04X}"
        super().__init__(f"modhex: invalid byte: {shown}", count)


class OddLengthError(ModhexError):
    def __init__(self, count: int = 0) -> None:
        super().__init__("modhex: odd length modhex string", count)


class TruncatedStreamError(ModhexError, EOFError):
    """The source ended between the two characters of a pair.

    Raised by the streaming decoder instead of OddLengthError, since a stream
    cannot tell a truncated payload from one still in flight until it ends.
    """

    def __init__(self, count: int = 0) -> None:
        super().__init__("modhex: unexpected end of input", count)


class ShortWriteError(OSError):
    """The sink accepted fewer encoded bytes than it was given."""

    def __init__(self, written: int, expected: int) -> None:
        super().__init__(f"modhex: short write ({written} of {expected} bytes)")
        self.written = written
        self.expected = expected


__all__ = [
    "InvalidByteError",
    "ModhexError",
    "OddLengthError",
    "ShortWriteError",
    "TruncatedStreamError",
]
