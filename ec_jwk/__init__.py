"""
EC JWK - Elliptic-curve JSON Web Keys (RFC 7517, RFC 7518)

Conversion between EC JWK members and ``cryptography`` keys, and
JWK thumbprints (RFC 7638).
"""

from .codec import decode_point, encode_point
from .config import DEFAULT_CONFIG, JWKConfig
from .curves import Curve, resolve, width_of
from .errors import (
    FieldCopyFailure,
    IncompatibleDestination,
    InvalidKeyType,
    JWKError,
    MalformedCoordinate,
    UnsupportedCurve,
)
from .keys import ECKey, ECPrivateKey, ECPublicKey, make_public_key
from .thumbprint import canonical_payload, compute_thumbprint, thumbprint

__version__ = "0.1.0"
__all__ = [
    "Curve",
    "DEFAULT_CONFIG",
    "ECKey",
    "ECPrivateKey",
    "ECPublicKey",
    "FieldCopyFailure",
    "IncompatibleDestination",
    "InvalidKeyType",
    "JWKConfig",
    "JWKError",
    "MalformedCoordinate",
    "UnsupportedCurve",
    "canonical_payload",
    "compute_thumbprint",
    "decode_point",
    "encode_point",
    "make_public_key",
    "resolve",
    "thumbprint",
    "width_of",
]
