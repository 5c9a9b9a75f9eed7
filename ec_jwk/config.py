"""EC JWK configuration."""

from dataclasses import dataclass, field

from cryptography.hazmat.primitives import hashes


@dataclass
class JWKConfig:
    """EC JWK decoding and thumbprint configuration."""

    default_hash: hashes.HashAlgorithm = field(default_factory=hashes.SHA256)
    # Accept x/y/d shorter than the curve width and left pad them
    allow_short_coordinates: bool = False


DEFAULT_CONFIG = JWKConfig()
