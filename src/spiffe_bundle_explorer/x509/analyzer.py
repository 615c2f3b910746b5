"""Time-based status and SPIFFE ID extraction for decoded certificates."""

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from spiffe_bundle_explorer.models import (
    NO_SPIFFE_ID,
    CertificateStatus,
    Diagnostic,
    DiagnosticCode,
    SanType,
    StatusReport,
    SubjectAltName,
    ValidityWindow,
)

logger = logging.getLogger(__name__)

# Certificates with this many days left or fewer are "expiring soon"
EXPIRING_SOON_DAYS = 30

ONE_DAY = timedelta(days=1)


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with certificate times."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def classify_status(
    validity: ValidityWindow,
    now: datetime,
    expiring_soon_days: int = EXPIRING_SOON_DAYS,
) -> StatusReport:
    """Classify a validity window against an explicit reference time.

    A certificate is valid when not_before <= now <= not_after. Days
    remaining are whole days, rounded down. Outside the window the status
    is EXPIRED with no days remaining, including the not-yet-valid case,
    which is additionally flagged on the report.
    """
    now = as_utc(now)
    not_before = as_utc(validity.not_before)
    not_after = as_utc(validity.not_after)

    is_valid = not_before <= now <= not_after
    if not is_valid:
        return StatusReport(
            is_valid=False,
            status=CertificateStatus.EXPIRED,
            days_remaining=None,
            not_yet_valid=now < not_before,
        )

    days_remaining = (not_after - now) // ONE_DAY
    if days_remaining > expiring_soon_days:
        status = CertificateStatus.VALID
    else:
        status = CertificateStatus.EXPIRING_SOON

    return StatusReport(is_valid=True, status=status, days_remaining=days_remaining)


def extract_spiffe_id(
    subject_alt_names: Sequence[SubjectAltName],
) -> tuple[str, list[Diagnostic]]:
    """Pick the SPIFFE ID from a certificate's SANs.

    The first URI SAN wins. An X.509-SVID must carry exactly one URI SAN,
    so more than one is reported but does not change the result.

    Returns:
        Tuple of (spiffe_id or NO_SPIFFE_ID, diagnostics)
    """
    uris = [san.value for san in subject_alt_names if san.type is SanType.URI]

    if not uris:
        return NO_SPIFFE_ID, []

    diagnostics = []
    if len(uris) > 1:
        logger.warning("Multiple URI SANs found, using %s", uris[0])
        diagnostics.append(
            Diagnostic(
                code=DiagnosticCode.MULTIPLE_URI_SANS,
                message=(
                    f"Certificate has {len(uris)} URI SANs; an X.509-SVID must "
                    f"have exactly one. Using {uris[0]}"
                ),
            )
        )

    return uris[0], diagnostics
