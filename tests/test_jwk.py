import json

import pytest

from spiffe_bundle_explorer.bundle.jwk import (
    base64url_decode,
    base64url_encode,
    describe_jwk_algorithm,
    jwk_from_mapping,
    jwk_to_dict,
    jwk_to_json,
)
from spiffe_bundle_explorer.models import JsonWebKey


def test_base64url_round_trip_without_padding():
    encoded = base64url_encode(b"\xfb\xff")
    assert encoded == "-_8"
    assert base64url_decode(encoded) == b"\xfb\xff"


def test_base64url_accepts_text():
    assert base64url_encode("hi") == "aGk"


def test_base64url_decode_rejects_garbage():
    with pytest.raises(ValueError):
        base64url_decode("a")


def test_describe_rsa_key_from_modulus_length():
    key = JsonWebKey(kty="RSA", n=base64url_encode(b"\x01" * 256), e="AQAB")
    assert describe_jwk_algorithm(key) == "RSA 2048"


def test_describe_rsa_key_with_undecodable_modulus():
    assert describe_jwk_algorithm(JsonWebKey(kty="RSA", n="é")) == "RSA"


@pytest.mark.parametrize(
    "crv, label",
    [("P-256", "ECDSA P-256"), ("P-384", "ECDSA P-384"), ("secp256k1", "ECDSA secp256k1")],
)
def test_describe_ec_key(crv, label):
    assert describe_jwk_algorithm(JsonWebKey(kty="EC", crv=crv)) == label


def test_describe_other_key_types():
    assert describe_jwk_algorithm(JsonWebKey(kty="OKP", crv="Ed25519")) is None
    assert describe_jwk_algorithm(JsonWebKey()) is None


def test_jwk_from_mapping_ignores_wrongly_typed_members():
    key = jwk_from_mapping({"kty": "EC", "kid": 7, "x5c": "abc", "key_ops": ["verify"]})
    assert key.kty == "EC"
    assert key.kid is None
    assert key.x5c == ()
    assert key.key_ops == ("verify",)


def test_jwk_dict_uses_jose_member_names():
    source = {
        "kty": "EC",
        "use": "x509-svid",
        "crv": "P-256",
        "x": "xx",
        "y": "yy",
        "x5c": ["MIIB"],
        "x5t#S256": "thumb",
    }
    assert jwk_to_dict(jwk_from_mapping(source)) == source


def test_jwk_json_is_indented():
    text = jwk_to_json(JsonWebKey(kty="RSA", kid="k"))
    assert json.loads(text) == {"kty": "RSA", "kid": "k"}
    assert "\n  " in text
