"""Partitioning of a trust bundle's keys by SVID type.

Each key is routed by its "use" member:
- jwt-svid: JWT signing key, id = kid or "jwt-<index>"
- x509-svid: certificate chain from x5c, id = "x509-<index>"
- wit-svid: WIT signing key, id = kid or "wit-<index>"

Keys are processed independently. A key that cannot be classified is left
out and reported as a diagnostic; only a bundle without a "keys" list is
rejected outright.
"""

import logging
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime

from spiffe_bundle_explorer.bundle.jwk import describe_jwk_algorithm, jwk_from_mapping
from spiffe_bundle_explorer.models import (
    ClassifiedBundle,
    Diagnostic,
    DiagnosticCode,
    ParsedJWK,
    X509Svid,
)
from spiffe_bundle_explorer.x509.analyzer import EXPIRING_SOON_DAYS
from spiffe_bundle_explorer.x509.decoder import MalformedCertificate, decode_certificate

logger = logging.getLogger(__name__)

USE_JWT_SVID = "jwt-svid"
USE_X509_SVID = "x509-svid"
USE_WIT_SVID = "wit-svid"


class InvalidBundleShape(ValueError):
    """The document is not a bundle: it has no "keys" list."""


def _read_counter(
    document: Mapping, member: str, diagnostics: list[Diagnostic]
) -> int | None:
    """Read an optional non-negative integer bundle member."""
    value = document.get(member)
    if value is None:
        return None

    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        diagnostics.append(
            Diagnostic(
                code=DiagnosticCode.INVALID_BUNDLE_FIELD,
                message=f'Ignoring "{member}": expected a non-negative integer, got {value!r}',
            )
        )
        return None

    return value


def _decode_chain(
    index: int,
    x5c: tuple,
    now: datetime,
    expiring_soon_days: int,
    diagnostics: list[Diagnostic],
) -> tuple | None:
    """Decode every certificate of a chain, or None if any entry fails."""
    certificates = []
    chain_diagnostics = []

    for position, entry in enumerate(x5c):
        try:
            result = decode_certificate(entry, now, expiring_soon_days)
        except MalformedCertificate as error:
            logger.warning("Skipping X.509-SVID key %d: certificate %d: %s", index, position, error)
            diagnostics.append(
                Diagnostic(
                    code=DiagnosticCode.MALFORMED_CERTIFICATE,
                    message=f"Certificate {position} could not be decoded: {error}",
                    key_index=index,
                    certificate_index=position,
                )
            )
            return None

        certificates.append(result.certificate)
        chain_diagnostics.extend(
            replace(diagnostic, key_index=index, certificate_index=position)
            for diagnostic in result.diagnostics
        )

    diagnostics.extend(chain_diagnostics)
    return tuple(certificates)


def classify_bundle(
    document: object,
    now: datetime,
    expiring_soon_days: int = EXPIRING_SOON_DAYS,
) -> ClassifiedBundle:
    """Classify the keys of a decoded bundle JSON document.

    Args:
        document: Parsed bundle JSON
        now: Reference time for certificate status
        expiring_soon_days: Threshold for the expiring-soon status

    Returns:
        ClassifiedBundle with JWT, X.509 and WIT groupings and diagnostics

    Raises:
        InvalidBundleShape: If the document is not an object with a "keys" list
    """
    if not isinstance(document, Mapping):
        raise InvalidBundleShape("Invalid bundle structure: expected a JSON object")

    keys = document.get("keys")
    if not isinstance(keys, list):
        raise InvalidBundleShape('Invalid bundle structure: missing "keys" array')

    diagnostics: list[Diagnostic] = []
    sequence = _read_counter(document, "spiffe_sequence", diagnostics)
    refresh_hint = _read_counter(document, "spiffe_refresh_hint", diagnostics)

    jwt_keys = []
    x509_keys = []
    wit_keys = []

    for index, entry in enumerate(keys):
        if not isinstance(entry, Mapping):
            logger.info("Skipping key %d: not a JSON object", index)
            diagnostics.append(
                Diagnostic(
                    code=DiagnosticCode.INVALID_KEY_ENTRY,
                    message="Key is not a JSON object",
                    key_index=index,
                )
            )
            continue

        key = jwk_from_mapping(entry)
        use = key.use.lower() if key.use else None

        if use == USE_JWT_SVID:
            jwt_keys.append(
                ParsedJWK(
                    id=key.kid or f"jwt-{index}",
                    key=key,
                    algorithm_detail=describe_jwk_algorithm(key),
                )
            )

        elif use == USE_WIT_SVID:
            wit_keys.append(
                ParsedJWK(
                    id=key.kid or f"wit-{index}",
                    key=key,
                    algorithm_detail=describe_jwk_algorithm(key),
                )
            )

        elif use == USE_X509_SVID:
            if not key.x5c:
                logger.info("Skipping X.509-SVID key %d: missing x5c", index)
                diagnostics.append(
                    Diagnostic(
                        code=DiagnosticCode.MISSING_X5C,
                        message="X.509-SVID key has no x5c certificate chain",
                        key_index=index,
                    )
                )
                continue

            certificates = _decode_chain(index, key.x5c, now, expiring_soon_days, diagnostics)
            if certificates is not None:
                x509_keys.append(X509Svid(id=f"x509-{index}", key=key, certificates=certificates))

        else:
            logger.info("Skipping key %d: unknown use %r", index, key.use)
            diagnostics.append(
                Diagnostic(
                    code=DiagnosticCode.UNKNOWN_USE,
                    message=f'Unknown or missing "use" parameter: {key.use!r}',
                    key_index=index,
                )
            )

    return ClassifiedBundle(
        sequence=sequence,
        refresh_hint_seconds=refresh_hint,
        jwt_keys=tuple(jwt_keys),
        x509_keys=tuple(x509_keys),
        wit_keys=tuple(wit_keys),
        diagnostics=tuple(diagnostics),
    )
