"""JWK helpers for bundle keys."""

import base64
import binascii
import json
from collections.abc import Mapping

from spiffe_bundle_explorer.models import JsonWebKey

# JOSE curve names mapped to display labels
CURVE_LABELS: dict[str, str] = {
    "P-256": "ECDSA P-256",
    "P-384": "ECDSA P-384",
    "P-521": "ECDSA P-521",
}


def base64url_encode(data: str | bytes) -> str:
    """Encode to unpadded base64url."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def base64url_decode(value: str) -> bytes:
    """Decode base64url, with or without padding.

    Raises:
        ValueError: If the value is not base64url
    """
    padded = value + "=" * (-len(value) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as error:
        raise ValueError(f"Invalid base64url value: {error}") from error


def _optional_str(value: object) -> str | None:
    return value if isinstance(value, str) else None


def _str_tuple(value: object) -> tuple:
    if isinstance(value, list | tuple):
        return tuple(value)
    return ()


def jwk_from_mapping(data: Mapping) -> JsonWebKey:
    """Build a JsonWebKey from a decoded JSON object.

    Members of the wrong JSON type are treated as absent.
    """
    return JsonWebKey(
        kty=_optional_str(data.get("kty")),
        use=_optional_str(data.get("use")),
        kid=_optional_str(data.get("kid")),
        alg=_optional_str(data.get("alg")),
        n=_optional_str(data.get("n")),
        e=_optional_str(data.get("e")),
        crv=_optional_str(data.get("crv")),
        x=_optional_str(data.get("x")),
        y=_optional_str(data.get("y")),
        x5c=_str_tuple(data.get("x5c")),
        key_ops=_str_tuple(data.get("key_ops")),
        x5t=_optional_str(data.get("x5t")),
        x5t_s256=_optional_str(data.get("x5t#S256")),
    )


def jwk_to_dict(key: JsonWebKey) -> dict:
    """Convert back to JWK member names, omitting absent members."""
    data = {
        "kty": key.kty,
        "use": key.use,
        "kid": key.kid,
        "alg": key.alg,
        "n": key.n,
        "e": key.e,
        "crv": key.crv,
        "x": key.x,
        "y": key.y,
        "x5c": list(key.x5c) or None,
        "key_ops": list(key.key_ops) or None,
        "x5t": key.x5t,
        "x5t#S256": key.x5t_s256,
    }
    return {name: value for name, value in data.items() if value is not None}


def jwk_to_json(key: JsonWebKey) -> str:
    """Pretty-printed JWK JSON, as offered for copying."""
    return json.dumps(jwk_to_dict(key), indent=2)


def describe_jwk_algorithm(key: JsonWebKey) -> str | None:
    """Short algorithm label such as "RSA 2048" or "ECDSA P-256".

    RSA sizes come from the decoded modulus length. Returns None for key
    types other than RSA and EC.
    """
    if key.kty == "RSA" and key.n:
        try:
            return f"RSA {len(base64url_decode(key.n)) * 8}"
        except ValueError:
            return "RSA"

    if key.kty == "EC" and key.crv:
        return CURVE_LABELS.get(key.crv, f"ECDSA {key.crv}")

    return None
