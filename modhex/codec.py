from typing import Union

from .alphabet import PAIR_TABLE, REVERSE_TABLE
from .errors import InvalidByteError, ModhexError, OddLengthError

BytesLike = Union[bytes, bytearray, memoryview]


def encoded_len(n: int) -> int:
    return n * 2


def decoded_len(n: int) -> int:
    # Does not check that n is even.
    return n // 2


def _as_bytes(src: Union[str, BytesLike]) -> BytesLike:
    if isinstance(src, str):
        return src.encode("utf-8")
    if isinstance(src, (bytes, bytearray)):
        return src
    return memoryview(src).cast("B")


def encode(dst: Union[bytearray, memoryview], src: BytesLike) -> int:
    """Encode ``src`` into the first ``encoded_len(len(src))`` bytes of ``dst``.

    Output is always lowercase. Returns the number of bytes written.
    """
    src = _as_bytes(src)
    size = encoded_len(len(src))
    with memoryview(dst) as out:
        if len(out) < size:
            raise ValueError(
                f"destination holds {len(out)} bytes, encoding needs {size}"
            )
        out[:size] = b"".join([PAIR_TABLE[b] for b in src])
    return size


def decode(dst: Union[bytearray, memoryview], src: Union[str, BytesLike]) -> int:
    """Decode modhex ``src`` into ``dst`` and return the number of bytes written.

    Both cases of the alphabet are accepted. On malformed input the error is
    raised as soon as it is found and its ``count`` attribute tells how many
    bytes were already written to ``dst``. An invalid trailing character in
    odd-length input is reported as InvalidByteError rather than
    OddLengthError. ``dst`` may be the same buffer as ``src``.
    """
    src = _as_bytes(src)
    length = len(src)
    table = REVERSE_TABLE
    with memoryview(dst) as out:
        room = len(out)
        i = 0
        for j in range(1, length, 2):
            hi = table[src[j - 1]]
            if hi is None:
                raise InvalidByteError(src[j - 1], i)
            lo = table[src[j]]
            if lo is None:
                raise InvalidByteError(src[j], i)
            if i == room:
                raise ValueError(
                    f"destination holds {room} bytes, decoding needs {decoded_len(length)}"
                )
            out[i] = (hi << 4) | lo
            i += 1
    if length % 2 == 1:
        if table[src[length - 1]] is None:
            raise InvalidByteError(src[length - 1], i)
        raise OddLengthError(i)
    return i


def encode_to_string(src: BytesLike) -> str:
    return encode_to_bytes(src).decode("ascii")


def encode_to_bytes(src: BytesLike) -> bytes:
    src = _as_bytes(src)
    dst = bytearray(encoded_len(len(src)))
    encode(dst, src)
    return bytes(dst)


def decode_string(s: Union[str, BytesLike]) -> bytes:
    """Return the bytes represented by the modhex text ``s``.

    On malformed input the raised ModhexError carries the bytes decoded
    before the failure in ``partial``.
    """
    buf = bytearray(_as_bytes(s))
    # Decoding in place is safe: the write cursor never passes the read cursor.
    try:
        n = decode(buf, buf)
    except ModhexError as exc:
        exc.partial = bytes(buf[: exc.count])
        raise
    return bytes(buf[:n])


__all__ = [
    "decode",
    "decode_string",
    "decoded_len",
    "encode",
    "encode_to_bytes",
    "encode_to_string",
    "encoded_len",
]
