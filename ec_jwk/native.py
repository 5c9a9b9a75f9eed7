"""Conversion of stored key material to ``cryptography`` EC keys."""

from typing import Optional, Union

from cryptography.hazmat.primitives.asymmetric import ec

from .codec import decode_point
from .curves import Curve
from .errors import IncompatibleDestination, MalformedCoordinate

NativeKey = Union[ec.EllipticCurvePublicKey, ec.EllipticCurvePrivateKey]


def build_public_key(curve: Curve, x: bytes, y: bytes) -> ec.EllipticCurvePublicKey:
    """Build a native public key from fixed-width coordinates."""
    numbers = ec.EllipticCurvePublicNumbers(decode_point(x), decode_point(y), curve.native())
    try:
        return numbers.public_key()
    except ValueError as e:
        raise MalformedCoordinate(f"x and y are not a point on {curve}: {e}") from e


def build_private_key(curve: Curve, x: bytes, y: bytes, d: bytes) -> ec.EllipticCurvePrivateKey:
    """Build a native private key; ``x`` and ``y`` must belong to ``d``."""
    public_numbers = ec.EllipticCurvePublicNumbers(decode_point(x), decode_point(y), curve.native())
    numbers = ec.EllipticCurvePrivateNumbers(decode_point(d), public_numbers)
    try:
        return numbers.private_key()
    except ValueError as e:
        raise MalformedCoordinate(f"d does not match x and y on {curve}: {e}") from e


def assign_if_compatible(key: NativeKey, destination: Optional[type]) -> NativeKey:
    """
    Return ``key`` if it can be used as ``destination``.

    Args:
        key: Freshly built native key
        destination: Requested native type, or None for any

    Raises:
        IncompatibleDestination: If ``key`` is not an instance of ``destination``
    """
    if destination is None:
        return key
    if not isinstance(destination, type):
        raise IncompatibleDestination(f"Destination must be a type, got {destination!r}")
    if not isinstance(key, destination):
        raise IncompatibleDestination(
            f"Cannot assign {type(key).__name__} to {destination.__name__}"
        )
    return key
