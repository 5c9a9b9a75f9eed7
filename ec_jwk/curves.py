"""Supported JWK elliptic curves (RFC 7518 section 6.2.1.1, RFC 8812)."""

import enum
import logging

from cryptography.hazmat.primitives.asymmetric import ec

from .errors import UnsupportedCurve

logger = logging.getLogger(__name__)


class Curve(enum.Enum):
    """
    A JWK ``crv`` value together with its field width and native curve class.

    Members are looked up by the exact ``cryptography`` curve class, never by
    parameters, so a subclass of ``ec.SECP256R1`` does not resolve to P-256.
    """

    P256 = ("P-256", 32, ec.SECP256R1)
    P384 = ("P-384", 48, ec.SECP384R1)
    P521 = ("P-521", 66, ec.SECP521R1)
    SECP256K1 = ("secp256k1", 32, ec.SECP256K1)

    def __init__(self, jwk_name: str, width: int, native_type: type):
        self.jwk_name = jwk_name
        self.width = width
        self.native_type = native_type

    def __str__(self) -> str:
        return self.jwk_name

    def native(self) -> ec.EllipticCurve:
        """Return a new ``cryptography`` curve instance for this curve."""
        return self.native_type()

    @classmethod
    def from_name(cls, name: str) -> "Curve":
        """Resolve a JWK ``crv`` string."""
        for curve in cls:
            if curve.jwk_name == name:
                return curve
        raise UnsupportedCurve(str(name))


def resolve(native_curve: ec.EllipticCurve) -> Curve:
    """
    Resolve a ``cryptography`` curve instance to a Curve.

    Raises:
        UnsupportedCurve: If the curve's class is not one of the four
            supported classes
    """
    for curve in Curve:
        if type(native_curve) is curve.native_type:
            return curve

    name = getattr(native_curve, "name", type(native_curve).__name__)
    logger.warning("Rejected elliptic curve %s", name)
    raise UnsupportedCurve(name)


def width_of(curve: Curve) -> int:
    """Byte width of a coordinate on ``curve``."""
    return curve.width
