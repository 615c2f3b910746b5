"""Decoding of x5c entries into structured certificate records.

An x5c entry is a standard base64 encoding of a DER X.509 certificate.
Decoding produces a Certificate record with:
1. Identity fields (subject, issuer, serial, SPIFFE ID)
2. Validity window and its status at an explicit reference time
3. Public key and signature algorithm details
4. Key usage, extended key usage, basic constraints, SANs, key identifiers
5. The canonical PEM encoding

Extensions are read independently of one another. A missing extension
yields its all-defaults record rather than an error.
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from datetime import datetime

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.x509.oid import ExtendedKeyUsageOID

from spiffe_bundle_explorer.models import (
    BasicConstraints,
    Certificate,
    Diagnostic,
    DiagnosticCode,
    EcPublicKeyParams,
    ExtendedKeyUsage,
    KeyUsage,
    PublicKeyParams,
    RsaPublicKeyParams,
    SanType,
    SubjectAltName,
    UnknownPublicKeyParams,
    ValidityWindow,
)
from spiffe_bundle_explorer.x509.analyzer import (
    EXPIRING_SOON_DAYS,
    classify_status,
    extract_spiffe_id,
)
from spiffe_bundle_explorer.x509.oids import (
    EXTENDED_KEY_USAGE_LABELS,
    GeneralNameTag,
    name_attribute_short_name,
    signature_algorithm_name,
)

logger = logging.getLogger(__name__)

# GeneralName classes mapped to their ASN.1 context tag
GENERAL_NAME_TAGS: dict[type, GeneralNameTag] = {
    x509.OtherName: GeneralNameTag.OTHER_NAME,
    x509.RFC822Name: GeneralNameTag.RFC822_NAME,
    x509.DNSName: GeneralNameTag.DNS_NAME,
    x509.DirectoryName: GeneralNameTag.DIRECTORY_NAME,
    x509.UniformResourceIdentifier: GeneralNameTag.URI,
    x509.IPAddress: GeneralNameTag.IP_ADDRESS,
    x509.RegisteredID: GeneralNameTag.REGISTERED_ID,
}

# GeneralName tags kept in the certificate record
SAN_TYPES: dict[GeneralNameTag, SanType] = {
    GeneralNameTag.URI: SanType.URI,
    GeneralNameTag.DNS_NAME: SanType.DNS,
    GeneralNameTag.IP_ADDRESS: SanType.IP,
    GeneralNameTag.RFC822_NAME: SanType.EMAIL,
}


class MalformedCertificate(ValueError):
    """An x5c entry is not a decodable X.509 certificate."""


@dataclass(frozen=True)
class DecodeResult:
    """A decoded certificate and the anomalies found while decoding it."""

    certificate: Certificate
    diagnostics: tuple[Diagnostic, ...] = ()


def format_serial_number(serial: str) -> str:
    """Render a hex serial number as lowercase colon-separated pairs.

    Example:
        format_serial_number("1A2B3C") -> "1a:2b:3c"
    """
    hex_serial = serial.lower()
    return ":".join(hex_serial[i : i + 2] for i in range(0, len(hex_serial), 2))


def format_key_identifier(hex_string: str) -> str:
    """Render a hex key identifier as uppercase colon-separated pairs."""
    return ":".join(hex_string[i : i + 2] for i in range(0, len(hex_string), 2)).upper()


def serial_number_hex(serial: int) -> str:
    """Hex of the serial's DER INTEGER content (two's complement)."""
    length = serial.bit_length() // 8 + 1
    return binascii.hexlify(serial.to_bytes(length, byteorder="big", signed=True)).decode("utf-8")


def format_distinguished_name(name: x509.Name) -> str:
    """Format RDN attributes as "short=value" pairs in encoded order."""
    parts = []
    for attribute in name:
        value = attribute.value
        if isinstance(value, bytes):
            value = binascii.hexlify(value).decode("utf-8")
        parts.append(f"{name_attribute_short_name(attribute.oid.dotted_string)}={value}")
    return ", ".join(parts)


def encode_coordinate(value: int | bytes | str, size: int | None = None) -> str:
    """Base64 encode an EC coordinate.

    Args:
        value: Integer coordinate, raw big-endian bytes, or a binary string
            holding those bytes one per character
        size: Byte width for integer coordinates (curve field size)

    Returns:
        Standard base64 string
    """
    if isinstance(value, str):
        raw = value.encode("latin-1")
    elif isinstance(value, bytes):
        raw = value
    else:
        width = size if size is not None else max(1, (value.bit_length() + 7) // 8)
        raw = value.to_bytes(width, byteorder="big")
    return base64.b64encode(raw).decode("ascii")


def _b64decode_entry(x5c_entry: object) -> bytes:
    if not isinstance(x5c_entry, str):
        raise MalformedCertificate(
            f"x5c entry must be a base64 string, got {type(x5c_entry).__name__}"
        )

    # Line-wrapped base64 is accepted
    compact = "".join(x5c_entry.split())
    try:
        der = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as error:
        raise MalformedCertificate(f"Invalid base64 in x5c entry: {error}") from error

    if not der:
        raise MalformedCertificate("x5c entry is empty")
    return der


def _describe_public_key(cert: x509.Certificate) -> tuple[str, str, PublicKeyParams]:
    """Return (algorithm, size, params) for the certificate's public key."""
    try:
        public_key = cert.public_key()
    except (UnsupportedAlgorithm, ValueError) as error:
        raise MalformedCertificate(f"Unreadable public key: {error}") from error

    if isinstance(public_key, rsa.RSAPublicKey):
        numbers = public_key.public_numbers()
        # Signed big-endian form, so a leading zero byte precedes a high bit
        modulus = numbers.n.to_bytes(numbers.n.bit_length() // 8 + 1, byteorder="big")
        params = RsaPublicKeyParams(
            modulus=base64.b64encode(modulus).decode("ascii"),
            exponent=str(numbers.e),
        )
        return "RSA", str(numbers.n.bit_length()), params

    if isinstance(public_key, ec.EllipticCurvePublicKey):
        numbers = public_key.public_numbers()
        field_size = (public_key.curve.key_size + 7) // 8
        params = EcPublicKeyParams(
            curve=public_key.curve.name,
            x=encode_coordinate(numbers.x, field_size),
            y=encode_coordinate(numbers.y, field_size),
        )
        return "EC", public_key.curve.name, params

    return "Unknown", "Unknown", UnknownPublicKeyParams()


def _read_extensions(cert: x509.Certificate, diagnostics: list[Diagnostic]) -> x509.Extensions:
    """Parse the extension block, falling back to none if it is unreadable."""
    try:
        return cert.extensions
    except (ValueError, x509.DuplicateExtension) as error:
        logger.warning("Ignoring unreadable certificate extensions: %s", error)
        diagnostics.append(
            Diagnostic(
                code=DiagnosticCode.MALFORMED_EXTENSIONS,
                message=f"Certificate extensions could not be parsed: {error}",
            )
        )
        return x509.Extensions([])


def _find_extension(extensions: x509.Extensions, extension_class: type) -> x509.Extension | None:
    try:
        return extensions.get_extension_for_class(extension_class)
    except x509.ExtensionNotFound:
        return None


def extract_key_usage(extensions: x509.Extensions) -> KeyUsage:
    ext = _find_extension(extensions, x509.KeyUsage)
    if ext is None:
        return KeyUsage()

    usage = ext.value
    return KeyUsage(
        digital_signature=usage.digital_signature,
        key_encipherment=usage.key_encipherment,
        key_agreement=usage.key_agreement,
        key_cert_sign=usage.key_cert_sign,
        crl_sign=usage.crl_sign,
        critical=ext.critical,
    )


def extract_extended_key_usage(extensions: x509.Extensions) -> ExtendedKeyUsage:
    """Map EKU purposes to labels.

    Purposes are only reported when serverAuth is among them; a certificate
    without serverAuth yields an empty record.
    """
    ext = _find_extension(extensions, x509.ExtendedKeyUsage)
    if ext is None:
        return ExtendedKeyUsage()

    present = {oid.dotted_string for oid in ext.value}
    if ExtendedKeyUsageOID.SERVER_AUTH.dotted_string not in present:
        return ExtendedKeyUsage()

    purposes = tuple(
        label for oid, label in EXTENDED_KEY_USAGE_LABELS.items() if oid in present
    )
    return ExtendedKeyUsage(purposes=purposes, critical=ext.critical)


def extract_basic_constraints(extensions: x509.Extensions) -> BasicConstraints:
    ext = _find_extension(extensions, x509.BasicConstraints)
    if ext is None:
        return BasicConstraints()

    return BasicConstraints(
        ca=ext.value.ca,
        path_length=ext.value.path_length,
        critical=ext.critical,
    )


def extract_subject_alt_names(
    extensions: x509.Extensions,
) -> tuple[list[SubjectAltName], list[Diagnostic]]:
    """Collect URI, DNS, IP and email SANs in encoded order.

    Other GeneralName kinds are skipped and reported.
    """
    ext = _find_extension(extensions, x509.SubjectAlternativeName)
    if ext is None:
        return [], []

    names = []
    diagnostics = []
    for general_name in ext.value:
        tag = GENERAL_NAME_TAGS.get(type(general_name))
        san_type = SAN_TYPES.get(tag) if tag is not None else None

        if san_type is None:
            kind = tag.name if tag is not None else type(general_name).__name__
            diagnostics.append(
                Diagnostic(
                    code=DiagnosticCode.UNSUPPORTED_SAN_TYPE,
                    message=f"Skipped subject alternative name of type {kind}",
                )
            )
            continue

        if san_type is SanType.IP:
            value = str(general_name.value)
        else:
            value = general_name.value
        names.append(SubjectAltName(type=san_type, value=value))

    return names, diagnostics


def extract_subject_key_identifier(extensions: x509.Extensions) -> str | None:
    ext = _find_extension(extensions, x509.SubjectKeyIdentifier)
    if ext is None or not ext.value.digest:
        return None
    return format_key_identifier(binascii.hexlify(ext.value.digest).decode("utf-8"))


def extract_authority_key_identifier(extensions: x509.Extensions) -> str | None:
    ext = _find_extension(extensions, x509.AuthorityKeyIdentifier)
    if ext is None or not ext.value.key_identifier:
        return None
    return format_key_identifier(binascii.hexlify(ext.value.key_identifier).decode("utf-8"))


def decode_certificate(
    x5c_entry: str,
    now: datetime,
    expiring_soon_days: int = EXPIRING_SOON_DAYS,
) -> DecodeResult:
    """Decode one x5c entry.

    Args:
        x5c_entry: Base64 (not base64url) encoded DER certificate
        now: Reference time for the validity status
        expiring_soon_days: Threshold for the expiring-soon status

    Returns:
        DecodeResult with the certificate and any diagnostics

    Raises:
        MalformedCertificate: If the entry is not base64, not a DER X.509
            certificate, or one of its fields or its public key cannot be read
    """
    der = _b64decode_entry(x5c_entry)

    try:
        cert = x509.load_der_x509_certificate(der)
    except ValueError as error:
        raise MalformedCertificate(f"Invalid DER certificate: {error}") from error

    diagnostics: list[Diagnostic] = []

    public_key_algorithm, public_key_size, public_key_params = _describe_public_key(cert)

    extensions = _read_extensions(cert, diagnostics)
    subject_alt_names, san_diagnostics = extract_subject_alt_names(extensions)
    diagnostics.extend(san_diagnostics)

    spiffe_id, spiffe_diagnostics = extract_spiffe_id(subject_alt_names)
    diagnostics.extend(spiffe_diagnostics)

    # Names, serial and validity are parsed on first access
    try:
        subject = format_distinguished_name(cert.subject)
        issuer = format_distinguished_name(cert.issuer)
        serial_number = serial_number_hex(cert.serial_number)
        validity = ValidityWindow(
            not_before=cert.not_valid_before_utc,
            not_after=cert.not_valid_after_utc,
        )
        signature_algorithm = signature_algorithm_name(cert.signature_algorithm_oid.dotted_string)
    except ValueError as error:
        raise MalformedCertificate(f"Invalid certificate field: {error}") from error

    report = classify_status(validity, now, expiring_soon_days)

    certificate = Certificate(
        spiffe_id=spiffe_id,
        subject=subject,
        issuer=issuer,
        serial_number=serial_number,
        validity=validity,
        is_valid=report.is_valid,
        status=report.status,
        days_remaining=report.days_remaining,
        public_key_algorithm=public_key_algorithm,
        public_key_size=public_key_size,
        signature_algorithm=signature_algorithm,
        key_usage=extract_key_usage(extensions),
        extended_key_usage=extract_extended_key_usage(extensions),
        basic_constraints=extract_basic_constraints(extensions),
        subject_alt_names=tuple(subject_alt_names),
        subject_key_identifier=extract_subject_key_identifier(extensions),
        authority_key_identifier=extract_authority_key_identifier(extensions),
        public_key_params=public_key_params,
        pem_encoded=cert.public_bytes(serialization.Encoding.PEM).decode("ascii"),
        der_encoded=x5c_entry,
    )

    return DecodeResult(certificate=certificate, diagnostics=tuple(diagnostics))


def decode_pem_certificate(
    pem: str | bytes,
    now: datetime,
    expiring_soon_days: int = EXPIRING_SOON_DAYS,
) -> DecodeResult:
    """Decode a PEM certificate through the same path as an x5c entry."""
    if isinstance(pem, str):
        pem = pem.encode("utf-8")

    try:
        cert = x509.load_pem_x509_certificate(pem)
    except ValueError as error:
        raise MalformedCertificate(f"Invalid PEM certificate: {error}") from error

    der = cert.public_bytes(serialization.Encoding.DER)
    return decode_certificate(base64.b64encode(der).decode("ascii"), now, expiring_soon_days)
