import base64
import ipaddress
from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

DEFAULT_SUBJECT = x509.Name(
    [
        x509.NameAttribute(NameOID.COUNTRY_NAME, "US"),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "SPIRE"),
        x509.NameAttribute(NameOID.COMMON_NAME, "workload"),
    ]
)

DEFAULT_ISSUER = x509.Name(
    [
        x509.NameAttribute(NameOID.COUNTRY_NAME, "US"),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "SPIFFE"),
    ]
)

DEFAULT_KEY_USAGE = {
    "digital_signature": True,
    "key_encipherment": True,
    "key_agreement": True,
}


@pytest.fixture
def now():
    return NOW


@pytest.fixture(scope="session")
def ec_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ed25519_key():
    return ed25519.Ed25519PrivateKey.generate()


@pytest.fixture
def make_certificate(ec_key):
    """Factory for self-signed test certificates with configurable extensions."""

    def _make(
        key=None,
        *,
        subject=DEFAULT_SUBJECT,
        issuer=DEFAULT_ISSUER,
        serial_number=0x1A2B3C,
        not_before=NOW - timedelta(days=1),
        not_after=NOW + timedelta(days=90),
        uris=("spiffe://example.org/workload",),
        dns_names=(),
        ip_addresses=(),
        emails=(),
        extra_names=(),
        key_usage=DEFAULT_KEY_USAGE,
        extended_key_usage=(ExtendedKeyUsageOID.SERVER_AUTH, ExtendedKeyUsageOID.CLIENT_AUTH),
        ca=False,
        path_length=None,
        basic_constraints=True,
        key_identifiers=True,
    ) -> x509.Certificate:
        key = key or ec_key
        public_key = key.public_key()

        builder = (
            x509.CertificateBuilder()
            .subject_name(subject)
            .issuer_name(issuer)
            .public_key(public_key)
            .serial_number(serial_number)
            .not_valid_before(not_before)
            .not_valid_after(not_after)
        )

        names = [x509.UniformResourceIdentifier(uri) for uri in uris]
        names += [x509.DNSName(name) for name in dns_names]
        names += [x509.IPAddress(ipaddress.ip_address(ip)) for ip in ip_addresses]
        names += [x509.RFC822Name(email) for email in emails]
        names += list(extra_names)
        if names:
            builder = builder.add_extension(x509.SubjectAlternativeName(names), critical=False)

        if key_usage is not None:
            flags = {
                "digital_signature": False,
                "content_commitment": False,
                "key_encipherment": False,
                "data_encipherment": False,
                "key_agreement": False,
                "key_cert_sign": False,
                "crl_sign": False,
                "encipher_only": False,
                "decipher_only": False,
            }
            flags.update(key_usage)
            builder = builder.add_extension(x509.KeyUsage(**flags), critical=True)

        if extended_key_usage:
            builder = builder.add_extension(
                x509.ExtendedKeyUsage(list(extended_key_usage)), critical=False
            )

        if basic_constraints:
            builder = builder.add_extension(
                x509.BasicConstraints(ca=ca, path_length=path_length), critical=True
            )

        if key_identifiers:
            builder = builder.add_extension(
                x509.SubjectKeyIdentifier.from_public_key(public_key), critical=False
            )
            builder = builder.add_extension(
                x509.AuthorityKeyIdentifier.from_issuer_public_key(public_key), critical=False
            )

        if isinstance(key, ed25519.Ed25519PrivateKey):
            return builder.sign(key, None)
        return builder.sign(key, hashes.SHA256())

    return _make


@pytest.fixture
def to_x5c():
    def _encode(cert: x509.Certificate) -> str:
        return base64.b64encode(cert.public_bytes(serialization.Encoding.DER)).decode("ascii")

    return _encode


@pytest.fixture
def make_x5c(make_certificate, to_x5c):
    """Factory returning the base64 DER x5c entry of a test certificate."""

    def _make(key=None, **kwargs) -> str:
        return to_x5c(make_certificate(key, **kwargs))

    return _make


@pytest.fixture
def patch_der():
    """Rewrite bytes of a certificate's DER and return the x5c entry.

    The signature is left as is; decoding never verifies it.
    """

    def _patch(cert: x509.Certificate, old: bytes, new: bytes) -> str:
        der = cert.public_bytes(serialization.Encoding.DER)
        assert der.count(old) == 1
        return base64.b64encode(der.replace(old, new)).decode("ascii")

    return _patch
