"""JSON serialization helpers used for JSON and array parameters."""

from typing import Any, Literal, Union, overload

import msgspec

__all__ = ("from_json", "to_json")

_encoder = msgspec.json.Encoder(enc_hook=str)
_decoder = msgspec.json.Decoder()


@overload
def to_json(data: Any, *, as_bytes: Literal[False] = ...) -> str: ...


@overload
def to_json(data: Any, *, as_bytes: Literal[True]) -> bytes: ...


def to_json(data: Any, *, as_bytes: bool = False) -> Union[str, bytes]:
    """Encode data to a JSON string or bytes.

    Values msgspec cannot encode natively (for example :class:`~decimal.Decimal`
    subclasses or arbitrary objects) are encoded through ``str``.

    Args:
        data: Data to encode.
        as_bytes: Whether to return bytes instead of string.

    Returns:
        JSON string or bytes.
    """
    encoded = _encoder.encode(data)
    return encoded if as_bytes else encoded.decode("utf-8")


def from_json(data: Union[str, bytes]) -> Any:
    """Decode a JSON string or bytes to Python objects."""
    return _decoder.decode(data)
