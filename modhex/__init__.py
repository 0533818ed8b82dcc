"""Modhex encoding and decoding, in one shot or as streams."""

from .alphabet import ALPHABET, char_to_value, value_to_char
from .codec import (
    decode,
    decode_string,
    decoded_len,
    encode,
    encode_to_bytes,
    encode_to_string,
    encoded_len,
)
from .errors import (
    InvalidByteError,
    ModhexError,
    OddLengthError,
    ShortWriteError,
    TruncatedStreamError,
)
from .stream import (
    BUFFER_SIZE,
    Decoder,
    Encoder,
    Sink,
    Source,
    StreamConfig,
    StreamState,
    new_decoder,
    new_encoder,
)

__all__ = [
    "ALPHABET",
    "BUFFER_SIZE",
    "Decoder",
    "Encoder",
    "InvalidByteError",
    "ModhexError",
    "OddLengthError",
    "ShortWriteError",
    "Sink",
    "Source",
    "StreamConfig",
    "StreamState",
    "TruncatedStreamError",
    "char_to_value",
    "decode",
    "decode_string",
    "decoded_len",
    "encode",
    "encode_to_bytes",
    "encode_to_string",
    "encoded_len",
    "new_decoder",
    "new_encoder",
    "value_to_char",
]

__version__ = "0.1.0"
