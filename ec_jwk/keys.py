"""EC JSON Web Keys (RFC 7517, RFC 7518 section 6.2)."""

import copy
import logging
from collections import namedtuple
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from ._rwlock import ReadWriteLock
from .codec import base64url_encode, decode_coordinate, encode_point
from .config import DEFAULT_CONFIG, JWKConfig
from .curves import Curve, resolve
from .errors import FieldCopyFailure, IncompatibleDestination, InvalidKeyType
from .native import NativeKey, assign_if_compatible, build_private_key, build_public_key
from .thumbprint import thumbprint

logger = logging.getLogger(__name__)

KEY_TYPE = "EC"

# Members holding key material; only from_raw and from_fields change them
MATERIAL_MEMBERS = ("kty", "crv", "x", "y", "d")

# Private key parameters across JWK key types (RFC 7518 section 6)
PRIVATE_MEMBERS = frozenset({"d", "p", "q", "dp", "dq", "qi", "oth", "k"})

KEY_USES = ("sig", "enc")
KEY_OPS = frozenset(
    {"sign", "verify", "encrypt", "decrypt", "wrapKey", "unwrapKey", "deriveKey", "deriveBits"}
)

# d is None for public keys
_ECMaterial = namedtuple("_ECMaterial", ["curve", "x", "y", "d"])


class ECKey:
    """
    Base class for EC JWKs.

    Instances may be shared between threads. Readers (``raw``, ``thumbprint``,
    ``iterate``, ``to_fields``) run in parallel; ``from_raw`` and ``set`` take
    the instance lock exclusively.
    """

    is_private = False
    _native_type: Optional[type] = None

    def __init__(self, raw_key: Optional[NativeKey] = None):
        if self._native_type is None:
            raise TypeError(f"{type(self).__name__} is abstract; use ECPublicKey or ECPrivateKey")
        self._lock = ReadWriteLock()
        self._material: Optional[_ECMaterial] = None
        self._params: Dict[str, Any] = {}
        if raw_key is not None:
            self.from_raw(raw_key)

    def __repr__(self) -> str:
        material = self._material
        crv = material.curve.jwk_name if material else None
        return f"<{type(self).__name__} crv={crv} kid={self._params.get('kid')}>"

    @property
    def curve(self) -> Optional[Curve]:
        with self._lock.read():
            return self._material.curve if self._material else None

    @property
    def x(self) -> Optional[bytes]:
        with self._lock.read():
            return self._material.x if self._material else None

    @property
    def y(self) -> Optional[bytes]:
        with self._lock.read():
            return self._material.y if self._material else None

    def from_raw(self, raw_key: NativeKey) -> None:
        """
        Replace this key's material with that of a native key.

        Args:
            raw_key: A ``cryptography`` EC key of the matching kind

        Raises:
            UnsupportedCurve: If the key's curve is not supported. The
                previous material is kept.
        """
        if not isinstance(raw_key, self._native_type):
            raise TypeError(
                f"{type(self).__name__} requires {self._native_type.__name__}, "
                f"got {type(raw_key).__name__}"
            )

        with self._lock.write():
            curve = resolve(raw_key.curve)
            self._material = self._encode_native(raw_key, curve)

        logger.debug("Imported %s on %s", type(self).__name__, curve)

    def raw(self, destination: Optional[type] = None) -> NativeKey:
        """
        Build the native ``cryptography`` key for this JWK.

        Args:
            destination: Type the result must be usable as, e.g.
                ``ec.EllipticCurvePublicKey``. None accepts either kind.

        Raises:
            IncompatibleDestination: If the key cannot be used as ``destination``
            MalformedCoordinate: If the stored coordinates are not a valid key
        """
        with self._lock.read():
            key = self._materialize()
        return assign_if_compatible(key, destination)

    def thumbprint(self, algorithm: hashes.HashAlgorithm) -> bytes:
        """
        Compute the RFC 7638 thumbprint of this key.

        The private scalar never takes part, so a private key and its public
        key have the same thumbprint.
        """
        with self._lock.read():
            key = self._materialize()
        return thumbprint(key, algorithm)

    def public_key(self) -> "ECPublicKey":
        """Return a new public-only copy of this key."""
        return make_public_key(self)

    def get(self, name: str, default: Any = None) -> Any:
        """Return a member by its JWK name."""
        for key, value in self.iterate():
            if key == name:
                return value
        return default

    def set(self, name: str, value: Any) -> None:
        """
        Set a generic member such as ``kid``, ``alg``, ``use`` or ``key_ops``.

        Raises:
            ValueError: If the member is key material or the value is invalid
            TypeError: If the value has the wrong type
        """
        value = self._validate_member(name, value)
        with self._lock.write():
            self._params[name] = value

    def iterate(self) -> Iterator[Tuple[str, Any]]:
        """
        Iterate over ``(name, value)`` pairs of every member that is set.

        Key material comes first (``kty``, ``crv`` as a Curve, ``x``, ``y``,
        and ``d`` for private keys, as fixed-width bytes), followed by generic
        members in insertion order. The pairs are a consistent snapshot.
        """
        with self._lock.read():
            pairs = [("kty", KEY_TYPE)]
            material = self._material
            if material is not None:
                pairs.append(("crv", material.curve))
                pairs.append(("x", material.x))
                pairs.append(("y", material.y))
                if material.d is not None:
                    pairs.append(("d", material.d))
            pairs.extend((name, copy.deepcopy(value)) for name, value in self._params.items())
        return iter(pairs)

    def to_fields(self) -> Dict[str, Any]:
        """Return the JWK members as a dictionary ready for JSON serialization."""
        fields: Dict[str, Any] = {}
        for name, value in self.iterate():
            if name == "crv":
                value = value.jwk_name
            elif name in ("x", "y", "d"):
                value = base64url_encode(value)
            elif name == "key_ops":
                value = list(value)
            fields[name] = value
        return fields

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any], config: Optional[JWKConfig] = None) -> "ECKey":
        """
        Decode a parsed EC JWK.

        Called on ``ECKey`` this returns an ``ECPrivateKey`` when ``d`` is
        present and an ``ECPublicKey`` otherwise.

        Args:
            fields: JWK members as parsed from JSON
            config: Decoding configuration; defaults to ``DEFAULT_CONFIG``

        Raises:
            InvalidKeyType: If ``kty`` is not "EC" or a member is missing or invalid
            UnsupportedCurve: If ``crv`` is unknown
            MalformedCoordinate: If a coordinate has the wrong width
        """
        if cls is ECKey:
            cls = ECPrivateKey if "d" in fields else ECPublicKey
        config = config or DEFAULT_CONFIG

        kty = fields.get("kty")
        if kty != KEY_TYPE:
            raise InvalidKeyType(f"Expected kty={KEY_TYPE}, got kty={kty}")
        if "crv" not in fields:
            raise InvalidKeyType("Missing crv")
        curve = Curve.from_name(fields["crv"])

        key = cls()
        names = ["x", "y"]
        if cls.is_private:
            names.append("d")
        elif "d" in fields:
            raise InvalidKeyType("Public key must not contain d")

        coordinates = {}
        for name in names:
            if name not in fields:
                raise InvalidKeyType(f"Missing {name}")
            coordinates[name] = decode_coordinate(
                fields[name], curve, name, allow_short=config.allow_short_coordinates
            )

        params = {}
        for name, value in fields.items():
            if name in MATERIAL_MEMBERS:
                continue
            try:
                params[name] = key._validate_member(name, value)
            except (TypeError, ValueError) as e:
                raise InvalidKeyType(f"Invalid {name}: {e}") from e

        key._replace(
            _ECMaterial(curve, coordinates["x"], coordinates["y"], coordinates.get("d")),
            params,
        )
        logger.debug("Decoded %s on %s", cls.__name__, curve)
        return key

    def _replace(self, material: Optional[_ECMaterial], params: Dict[str, Any]) -> None:
        with self._lock.write():
            self._material = material
            self._params = params

    def _materialize(self) -> NativeKey:
        # Caller holds the read lock
        if self._material is None:
            raise IncompatibleDestination(f"{type(self).__name__} holds no key material")
        return self._build_native(self._material)

    def _validate_member(self, name: str, value: Any) -> Any:
        if not isinstance(name, str):
            raise TypeError(f"Member name must be a string, got {type(name).__name__}")
        if name in MATERIAL_MEMBERS:
            raise ValueError(f"{name} is key material")
        if not self.is_private and name in PRIVATE_MEMBERS:
            raise ValueError(f"{name} is a private key parameter")

        if name in ("kid", "alg"):
            if not isinstance(value, str):
                raise TypeError(f"{name} must be a string")
        elif name == "use":
            if value not in KEY_USES:
                raise ValueError(f"use must be one of {', '.join(KEY_USES)}")
        elif name == "key_ops":
            if isinstance(value, str) or not all(isinstance(op, str) for op in value):
                raise TypeError("key_ops must be a list of strings")
            value = list(value)
            unknown = [op for op in value if op not in KEY_OPS]
            if unknown:
                raise ValueError(f"Unknown key operations: {', '.join(unknown)}")
            if len(set(value)) != len(value):
                raise ValueError("key_ops must not contain duplicates")
        # Stored values are never shared with callers
        return copy.deepcopy(value)

    def _encode_native(self, raw_key: NativeKey, curve: Curve) -> _ECMaterial:
        raise NotImplementedError

    def _build_native(self, material: _ECMaterial) -> NativeKey:
        raise NotImplementedError


class ECPublicKey(ECKey):
    """EC public JWK."""

    _native_type = ec.EllipticCurvePublicKey

    def _encode_native(self, raw_key: ec.EllipticCurvePublicKey, curve: Curve) -> _ECMaterial:
        numbers = raw_key.public_numbers()
        return _ECMaterial(curve, encode_point(numbers.x, curve), encode_point(numbers.y, curve), None)

    def _build_native(self, material: _ECMaterial) -> ec.EllipticCurvePublicKey:
        return build_public_key(material.curve, material.x, material.y)


class ECPrivateKey(ECKey):
    """EC private JWK."""

    is_private = True
    _native_type = ec.EllipticCurvePrivateKey

    @property
    def d(self) -> Optional[bytes]:
        with self._lock.read():
            return self._material.d if self._material else None

    def _encode_native(self, raw_key: ec.EllipticCurvePrivateKey, curve: Curve) -> _ECMaterial:
        numbers = raw_key.private_numbers()
        public_numbers = numbers.public_numbers
        return _ECMaterial(
            curve,
            encode_point(public_numbers.x, curve),
            encode_point(public_numbers.y, curve),
            encode_point(numbers.private_value, curve),
        )

    def _build_native(self, material: _ECMaterial) -> ec.EllipticCurvePrivateKey:
        return build_private_key(material.curve, material.x, material.y, material.d)


def make_public_key(key: ECKey) -> ECPublicKey:
    """
    Derive a public-only key from an EC key.

    ``crv``, ``x`` and ``y`` are copied as one unit and ``d`` is always
    dropped. Every generic member is copied through the public key's
    validation.

    Raises:
        FieldCopyFailure: If a member cannot be set on the public key. No key
            is returned in that case.
    """
    new_key = ECPublicKey()
    material: Dict[str, Any] = {}
    params: Dict[str, Any] = {}

    for name, value in key.iterate():
        if name == "d":
            continue
        if name == "kty":
            if value != KEY_TYPE:
                raise FieldCopyFailure(name, f"unexpected key type {value}")
        elif name in ("crv", "x", "y"):
            material[name] = value
        else:
            try:
                params[name] = new_key._validate_member(name, value)
            except (TypeError, ValueError) as e:
                raise FieldCopyFailure(name, str(e)) from e

    if material:
        new_key._replace(_ECMaterial(material["crv"], material["x"], material["y"], None), params)
    else:
        new_key._replace(None, params)

    logger.debug("Derived public key from %s (%d members)", type(key).__name__, len(params))
    return new_key
