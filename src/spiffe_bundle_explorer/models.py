"""Value records produced when a trust bundle is classified.

Every record here is immutable. A new bundle load produces a fresh set of
records and the previous ones are discarded wholesale.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Union

# Shown in place of a SPIFFE ID when a certificate carries no URI SAN
NO_SPIFFE_ID = "No SPIFFE ID found"


class CertificateStatus(str, Enum):
    """Validity status of a certificate at a reference time."""

    VALID = "valid"
    EXPIRING_SOON = "expiring-soon"
    EXPIRED = "expired"


class SanType(str, Enum):
    """Subject alternative name kinds kept in the certificate record."""

    URI = "URI"
    DNS = "DNS"
    IP = "IP"
    EMAIL = "EMAIL"


class DiagnosticCode(str, Enum):
    """Recoverable anomalies reported alongside a classification."""

    INVALID_KEY_ENTRY = "invalid-key-entry"
    UNKNOWN_USE = "unknown-use"
    MISSING_X5C = "missing-x5c"
    MALFORMED_CERTIFICATE = "malformed-certificate"
    MULTIPLE_URI_SANS = "multiple-uri-sans"
    UNSUPPORTED_SAN_TYPE = "unsupported-san-type"
    MALFORMED_EXTENSIONS = "malformed-extensions"
    INVALID_BUNDLE_FIELD = "invalid-bundle-field"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal problem found while decoding or classifying.

    Attributes:
        code: Machine-readable anomaly kind
        message: Human-readable description
        key_index: Position of the offending key in the bundle, if any
        certificate_index: Position in the key's x5c chain, if any
    """

    code: DiagnosticCode
    message: str
    key_index: int | None = None
    certificate_index: int | None = None


@dataclass(frozen=True)
class SpiffeId:
    """A parsed SPIFFE ID."""

    trust_domain: str
    path: str = ""

    def __str__(self) -> str:
        return f"spiffe://{self.trust_domain}{self.path}"


@dataclass(frozen=True)
class ValidityWindow:
    """Certificate validity period as timezone-aware UTC datetimes."""

    not_before: datetime
    not_after: datetime


@dataclass(frozen=True)
class StatusReport:
    """Result of classifying a validity window against a reference time."""

    is_valid: bool
    status: CertificateStatus
    days_remaining: int | None
    not_yet_valid: bool = False


@dataclass(frozen=True)
class KeyUsage:
    """X.509 key usage flags. Missing extension means all False."""

    digital_signature: bool = False
    key_encipherment: bool = False
    key_agreement: bool = False
    key_cert_sign: bool = False
    crl_sign: bool = False
    critical: bool = False


@dataclass(frozen=True)
class ExtendedKeyUsage:
    """Extended key usage purposes as display labels."""

    purposes: tuple[str, ...] = ()
    critical: bool = False


@dataclass(frozen=True)
class BasicConstraints:
    """X.509 basic constraints. Missing extension means not a CA."""

    ca: bool = False
    path_length: int | None = None
    critical: bool = False


@dataclass(frozen=True)
class SubjectAltName:
    """A single subject alternative name entry."""

    type: SanType
    value: str


@dataclass(frozen=True)
class RsaPublicKeyParams:
    """RSA public key numbers, modulus base64 encoded."""

    modulus: str
    exponent: str

    @property
    def algorithm(self) -> str:
        return "RSA"


@dataclass(frozen=True)
class EcPublicKeyParams:
    """EC public key point, coordinates base64 encoded."""

    curve: str
    x: str | None = None
    y: str | None = None

    @property
    def algorithm(self) -> str:
        return "EC"


@dataclass(frozen=True)
class UnknownPublicKeyParams:
    """Placeholder for key types other than RSA and EC."""

    @property
    def algorithm(self) -> str:
        return "Unknown"


PublicKeyParams = Union[RsaPublicKeyParams, EcPublicKeyParams, UnknownPublicKeyParams]


@dataclass(frozen=True)
class Certificate:
    """A decoded X.509 certificate from an x5c entry.

    Attributes:
        spiffe_id: First URI SAN, or NO_SPIFFE_ID
        subject: Subject RDNs as "CN=..., O=..."
        issuer: Issuer RDNs as "CN=..., O=..."
        serial_number: Lowercase hex of the serial's DER content bytes
        validity: Not-before / not-after window
        is_valid: Whether the reference time fell inside the window
        status: Status at the reference time used for decoding
        days_remaining: Whole days left, None when not valid
        public_key_algorithm: "RSA", "EC" or "Unknown"
        public_key_size: Modulus bits for RSA, curve name for EC
        signature_algorithm: Algorithm name, or dotted OID if unknown
        pem_encoded: Canonical PEM encoding
        der_encoded: The original base64 DER string
    """

    spiffe_id: str
    subject: str
    issuer: str
    serial_number: str
    validity: ValidityWindow
    is_valid: bool
    status: CertificateStatus
    days_remaining: int | None
    public_key_algorithm: str
    public_key_size: str
    signature_algorithm: str
    key_usage: KeyUsage
    extended_key_usage: ExtendedKeyUsage
    basic_constraints: BasicConstraints
    subject_alt_names: tuple[SubjectAltName, ...]
    subject_key_identifier: str | None
    authority_key_identifier: str | None
    public_key_params: PublicKeyParams
    pem_encoded: str
    der_encoded: str

    @property
    def valid_from(self) -> datetime:
        return self.validity.not_before

    @property
    def valid_until(self) -> datetime:
        return self.validity.not_after

    @property
    def serial_number_display(self) -> str:
        from spiffe_bundle_explorer.x509.decoder import format_serial_number

        return format_serial_number(self.serial_number)

    def status_at(self, now: datetime, expiring_soon_days: int = 30) -> StatusReport:
        """Re-evaluate the validity status at another reference time."""
        from spiffe_bundle_explorer.x509.analyzer import classify_status

        return classify_status(self.validity, now, expiring_soon_days)


@dataclass(frozen=True)
class JsonWebKey:
    """The JWK members of a bundle key that the explorer reads.

    Thumbprints and key_ops are carried through but never interpreted.
    """

    kty: str | None = None
    use: str | None = None
    kid: str | None = None
    alg: str | None = None
    n: str | None = None
    e: str | None = None
    crv: str | None = None
    x: str | None = None
    y: str | None = None
    x5c: tuple[str, ...] = ()
    key_ops: tuple[str, ...] = ()
    x5t: str | None = None
    x5t_s256: str | None = None


@dataclass(frozen=True)
class ParsedJWK:
    """A JWT-SVID or WIT-SVID signing key."""

    id: str
    key: JsonWebKey
    algorithm_detail: str | None = None

    @property
    def kid(self) -> str | None:
        return self.key.kid


@dataclass(frozen=True)
class X509Svid:
    """An X.509-SVID key with its decoded chain, leaf first."""

    id: str
    key: JsonWebKey
    certificates: tuple[Certificate, ...]


@dataclass(frozen=True)
class ClassifiedBundle:
    """A bundle's keys partitioned by SVID type."""

    sequence: int | None = None
    refresh_hint_seconds: int | None = None
    jwt_keys: tuple[ParsedJWK, ...] = ()
    x509_keys: tuple[X509Svid, ...] = ()
    wit_keys: tuple[ParsedJWK, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def certificates(self) -> tuple[Certificate, ...]:
        """All decoded certificates across X.509-SVID keys, in bundle order."""
        return tuple(cert for svid in self.x509_keys for cert in svid.certificates)

    @property
    def total_keys(self) -> int:
        return len(self.jwt_keys) + len(self.x509_keys) + len(self.wit_keys)


@dataclass(frozen=True)
class BundleSummary:
    """Header-level facts about a classified bundle."""

    trust_domain: str | None
    sequence: int | None
    refresh_hint_seconds: int | None
    refresh_hint_display: str | None
    total_keys: int
    jwt_key_count: int
    x509_key_count: int
    wit_key_count: int
    certificate_count: int
    diagnostic_count: int
