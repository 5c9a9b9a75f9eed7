"""Errors raised by EC JWK operations."""


class JWKError(Exception):
    """EC JWK error."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


class UnsupportedCurve(JWKError):
    """Curve is not one of P-256, P-384, P-521 or secp256k1."""

    def __init__(self, curve: str):
        self.curve = curve
        super().__init__("UNSUPPORTED_CURVE", f"Unsupported elliptic curve: {curve}")


class IncompatibleDestination(JWKError):
    """Key material cannot be materialized as the requested native type."""

    def __init__(self, message: str):
        super().__init__("INCOMPATIBLE_DESTINATION", message)


class FieldCopyFailure(JWKError):
    """A member could not be copied while deriving a public key."""

    def __init__(self, field: str, reason: str):
        self.field = field
        super().__init__("FIELD_COPY_FAILURE", f"Failed to set field {field}: {reason}")


class MalformedCoordinate(JWKError):
    """Coordinate bytes do not describe a valid key on the declared curve."""

    def __init__(self, message: str):
        super().__init__("MALFORMED_COORDINATE", message)


class InvalidKeyType(JWKError):
    """Field set is not an EC JWK."""

    def __init__(self, message: str):
        super().__init__("INVALID_KEY_TYPE", message)
