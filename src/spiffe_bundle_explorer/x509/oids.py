"""Lookup tables for X.509 certificate fields.

Names follow the short forms commonly shown by certificate viewers:
- Signature algorithms: PKCS#1 and X9.62 names keyed by dotted OID
- Distinguished name attributes: RFC 4514 style short names
- Extended key usage purposes: human-readable labels
"""

from enum import IntEnum

from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID


class GeneralNameTag(IntEnum):
    """ASN.1 context tags of GeneralName choices (RFC 5280 4.2.1.6)."""

    OTHER_NAME = 0
    RFC822_NAME = 1  # Email address
    DNS_NAME = 2
    X400_ADDRESS = 3
    DIRECTORY_NAME = 4
    EDI_PARTY_NAME = 5
    URI = 6
    IP_ADDRESS = 7
    REGISTERED_ID = 8


# Signature algorithm OIDs that get a readable name; others pass through
SIGNATURE_ALGORITHM_NAMES: dict[str, str] = {
    "1.2.840.113549.1.1.5": "sha1WithRSAEncryption",
    "1.2.840.113549.1.1.11": "sha256WithRSAEncryption",
    "1.2.840.113549.1.1.12": "sha384WithRSAEncryption",
    "1.2.840.113549.1.1.13": "sha512WithRSAEncryption",
    "1.2.840.10045.4.3.2": "ecdsa-with-SHA256",
    "1.2.840.10045.4.3.3": "ecdsa-with-SHA384",
    "1.2.840.10045.4.3.4": "ecdsa-with-SHA512",
}

# Distinguished name attribute short names
NAME_ATTRIBUTE_SHORT_NAMES: dict[str, str] = {
    NameOID.COMMON_NAME.dotted_string: "CN",
    NameOID.COUNTRY_NAME.dotted_string: "C",
    NameOID.LOCALITY_NAME.dotted_string: "L",
    NameOID.STATE_OR_PROVINCE_NAME.dotted_string: "ST",
    NameOID.STREET_ADDRESS.dotted_string: "STREET",
    NameOID.ORGANIZATION_NAME.dotted_string: "O",
    NameOID.ORGANIZATIONAL_UNIT_NAME.dotted_string: "OU",
    NameOID.SERIAL_NUMBER.dotted_string: "serialNumber",
    NameOID.SURNAME.dotted_string: "SN",
    NameOID.GIVEN_NAME.dotted_string: "GN",
    NameOID.TITLE.dotted_string: "title",
    NameOID.EMAIL_ADDRESS.dotted_string: "E",
    NameOID.DOMAIN_COMPONENT.dotted_string: "DC",
    NameOID.USER_ID.dotted_string: "UID",
}

# Extended key usage purposes in display order
EXTENDED_KEY_USAGE_LABELS: dict[str, str] = {
    ExtendedKeyUsageOID.SERVER_AUTH.dotted_string: "TLS Server Authentication",
    ExtendedKeyUsageOID.CLIENT_AUTH.dotted_string: "TLS Client Authentication",
    ExtendedKeyUsageOID.CODE_SIGNING.dotted_string: "Code Signing",
    ExtendedKeyUsageOID.EMAIL_PROTECTION.dotted_string: "Email Protection",
    ExtendedKeyUsageOID.TIME_STAMPING.dotted_string: "Time Stamping",
}


def signature_algorithm_name(dotted_oid: str) -> str:
    """Return the readable name for a signature OID, or the OID itself."""
    return SIGNATURE_ALGORITHM_NAMES.get(dotted_oid, dotted_oid)


def name_attribute_short_name(dotted_oid: str) -> str:
    """Return the short name for a DN attribute OID, or the OID itself."""
    return NAME_ATTRIBUTE_SHORT_NAMES.get(dotted_oid, dotted_oid)
