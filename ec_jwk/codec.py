"""Fixed-width coordinate encoding and base64url helpers."""

import base64
import binascii
import contextlib
import threading
from typing import Dict, Iterator, List

from .curves import Curve, width_of
from .errors import MalformedCoordinate

# Idle buffers kept per width
_MAX_IDLE_BUFFERS = 16


class _BufferPool:
    """Pool of scratch buffers keyed by width."""

    def __init__(self, max_idle: int = _MAX_IDLE_BUFFERS):
        self._max_idle = max_idle
        self._free: Dict[int, List[bytearray]] = {}
        self._zeros: Dict[int, bytes] = {}
        self._lock = threading.Lock()

    @contextlib.contextmanager
    def acquire(self, width: int) -> Iterator[bytearray]:
        """
        Lend a zeroed buffer of ``width`` bytes for the duration of the block.

        The buffer is scrubbed and returned to the pool when the block exits,
        whether normally or by an exception. Callers must copy out anything
        they need before leaving the block.
        """
        with self._lock:
            free = self._free.setdefault(width, [])
            buf = free.pop() if free else bytearray(width)
            zeros = self._zeros.setdefault(width, bytes(width))
        try:
            yield buf
        finally:
            # Buffers may have held a private scalar
            buf[:] = zeros
            with self._lock:
                if len(free) < self._max_idle:
                    free.append(buf)


_pool = _BufferPool()


def encode_point(value: int, curve: Curve) -> bytes:
    """
    Encode a coordinate as a fixed-width big-endian byte string.

    Args:
        value: Non-negative integer (x, y or d)
        curve: Curve that determines the width

    Returns:
        Exactly ``width_of(curve)`` bytes, left zero padded
    """
    width = width_of(curve)
    if value < 0:
        raise ValueError(f"Coordinate must be non-negative, got {value}")

    with _pool.acquire(width) as buf:
        try:
            buf[:] = value.to_bytes(width, byteorder="big")
        except OverflowError:
            raise ValueError(f"Coordinate does not fit in {width} bytes for {curve}") from None
        return bytes(buf)


def decode_point(data: bytes) -> int:
    """Decode a big-endian byte string to an integer."""
    return int.from_bytes(data, byteorder="big")


def decode_coordinate(text: str, curve: Curve, name: str, allow_short: bool = False) -> bytes:
    """
    Decode a base64url JWK coordinate member and check its width.

    Args:
        text: Base64url-encoded member value
        curve: Declared curve of the key
        name: Member name ("x", "y" or "d"), used in error messages
        allow_short: Left pad values shorter than the curve width
            instead of rejecting them

    Raises:
        MalformedCoordinate: If the value is not base64url or has the wrong width
    """
    if not isinstance(text, str):
        raise MalformedCoordinate(f"{name} must be a string")
    try:
        data = base64url_decode(text)
    except (binascii.Error, ValueError):
        raise MalformedCoordinate(f"{name} is not valid base64url")

    width = width_of(curve)
    if len(data) == width:
        return data
    if allow_short and len(data) < width:
        return data.rjust(width, b"\x00")
    raise MalformedCoordinate(
        f"Invalid {name} length for {curve}: expected {width} bytes, got {len(data)}"
    )


def base64url_encode(data: bytes) -> str:
    """Base64url encode without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def base64url_decode(data: str) -> bytes:
    """Base64url decode with padding handling."""
    if "=" in data:
        raise ValueError("Padding is not allowed in base64url members")
    if "+" in data or "/" in data:
        raise ValueError("Standard base64 alphabet is not allowed in base64url members")
    padding = 4 - len(data) % 4
    if padding != 4:
        data += "=" * padding
    return base64.b64decode(data, altchars="-_", validate=True)
