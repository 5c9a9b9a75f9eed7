"""JWK Thumbprint computation (RFC 7638)"""

from typing import Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from .codec import base64url_encode, encode_point
from .config import DEFAULT_CONFIG, JWKConfig
from .curves import resolve
from .native import NativeKey


def canonical_payload(public_key: ec.EllipticCurvePublicKey) -> bytes:
    """
    Build the RFC 7638 thumbprint input for an EC public key.

    Members are the required ones only, in lexicographic order, with no
    whitespace. Coordinates are re-encoded at the full curve width.
    """
    curve = resolve(public_key.curve)
    numbers = public_key.public_numbers()
    x = base64url_encode(encode_point(numbers.x, curve))
    y = base64url_encode(encode_point(numbers.y, curve))
    canonical = f'{{"crv":"{curve.jwk_name}","kty":"EC","x":"{x}","y":"{y}"}}'
    return canonical.encode("utf-8")


def thumbprint(key: NativeKey, algorithm: hashes.HashAlgorithm) -> bytes:
    """
    Compute the raw JWK thumbprint of a native EC key.

    Only the public portion of a private key is hashed, so a private key and
    its public key have the same thumbprint.

    Args:
        key: An EC public or private key
        algorithm: Hash algorithm, e.g. ``hashes.SHA256()``

    Returns:
        The digest bytes
    """
    if isinstance(key, ec.EllipticCurvePrivateKey):
        key = key.public_key()
    return _digest(canonical_payload(key), algorithm)


def compute_thumbprint(
    key,
    algorithm: Optional[hashes.HashAlgorithm] = None,
    config: Optional[JWKConfig] = None,
) -> str:
    """
    Compute the base64url JWK thumbprint of a key.

    Args:
        key: An ``ECKey`` or a native EC public or private key
        algorithm: Hash algorithm; defaults to the configured hash
        config: Configuration; defaults to ``DEFAULT_CONFIG``

    Returns:
        Base64url-encoded thumbprint
    """
    if algorithm is None:
        algorithm = (config or DEFAULT_CONFIG).default_hash

    if isinstance(key, (ec.EllipticCurvePublicKey, ec.EllipticCurvePrivateKey)):
        digest = thumbprint(key, algorithm)
    else:
        digest = key.thumbprint(algorithm)
    return base64url_encode(digest)


def _digest(data: bytes, algorithm: hashes.HashAlgorithm) -> bytes:
    h = hashes.Hash(algorithm)
    h.update(data)
    return h.finalize()
