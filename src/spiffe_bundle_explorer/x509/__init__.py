"""X.509 certificate decoding and analysis."""

from spiffe_bundle_explorer.x509.analyzer import classify_status, extract_spiffe_id
from spiffe_bundle_explorer.x509.decoder import (
    DecodeResult,
    MalformedCertificate,
    decode_certificate,
    decode_pem_certificate,
    format_serial_number,
)

__all__ = [
    "DecodeResult",
    "MalformedCertificate",
    "classify_status",
    "decode_certificate",
    "decode_pem_certificate",
    "extract_spiffe_id",
    "format_serial_number",
]
