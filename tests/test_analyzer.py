from datetime import datetime, timedelta

import pytest

from spiffe_bundle_explorer.models import (
    NO_SPIFFE_ID,
    CertificateStatus,
    DiagnosticCode,
    SanType,
    SubjectAltName,
    ValidityWindow,
)
from spiffe_bundle_explorer.x509.analyzer import classify_status, extract_spiffe_id


def window(now, before_days=10, after=timedelta(days=90)):
    return ValidityWindow(not_before=now - timedelta(days=before_days), not_after=now + after)


def test_more_than_thirty_days_is_valid(now):
    report = classify_status(window(now, after=timedelta(days=31)), now)
    assert report.is_valid
    assert report.status is CertificateStatus.VALID
    assert report.days_remaining == 31


def test_exactly_thirty_days_is_expiring_soon(now):
    report = classify_status(window(now, after=timedelta(days=30)), now)
    assert report.status is CertificateStatus.EXPIRING_SOON
    assert report.days_remaining == 30


def test_last_moment_of_validity_is_expiring_soon(now):
    report = classify_status(window(now, after=timedelta(0)), now)
    assert report.is_valid
    assert report.status is CertificateStatus.EXPIRING_SOON
    assert report.days_remaining == 0


def test_days_remaining_rounds_down(now):
    report = classify_status(window(now, after=timedelta(days=31, hours=23)), now)
    assert report.days_remaining == 31

    report = classify_status(window(now, after=timedelta(days=30, hours=23)), now)
    assert report.days_remaining == 30
    assert report.status is CertificateStatus.EXPIRING_SOON


def test_past_not_after_is_expired(now):
    report = classify_status(window(now, after=-timedelta(seconds=1)), now)
    assert not report.is_valid
    assert report.status is CertificateStatus.EXPIRED
    assert report.days_remaining is None
    assert not report.not_yet_valid


def test_not_yet_valid_is_reported_as_expired(now):
    validity = ValidityWindow(not_before=now + timedelta(days=1), not_after=now + timedelta(days=60))
    report = classify_status(validity, now)
    assert not report.is_valid
    assert report.status is CertificateStatus.EXPIRED
    assert report.days_remaining is None
    assert report.not_yet_valid


def test_not_before_boundary_is_valid(now):
    validity = ValidityWindow(not_before=now, not_after=now + timedelta(days=60))
    assert classify_status(validity, now).is_valid


def test_custom_threshold(now):
    report = classify_status(window(now, after=timedelta(days=45)), now, expiring_soon_days=60)
    assert report.status is CertificateStatus.EXPIRING_SOON


def test_naive_now_is_treated_as_utc(now):
    naive = datetime(2026, 1, 15, 12, 0, 0)
    assert classify_status(window(now), naive) == classify_status(window(now), now)


def test_spiffe_id_is_first_uri_san():
    sans = [
        SubjectAltName(type=SanType.DNS, value="web.example.org"),
        SubjectAltName(type=SanType.URI, value="spiffe://example.org/web"),
    ]
    spiffe_id, diagnostics = extract_spiffe_id(sans)
    assert spiffe_id == "spiffe://example.org/web"
    assert diagnostics == []


def test_no_uri_san_yields_sentinel():
    spiffe_id, diagnostics = extract_spiffe_id([SubjectAltName(type=SanType.DNS, value="a.b")])
    assert spiffe_id == NO_SPIFFE_ID
    assert diagnostics == []


def test_multiple_uri_sans_are_flagged():
    sans = [
        SubjectAltName(type=SanType.URI, value="spiffe://example.org/a"),
        SubjectAltName(type=SanType.URI, value="spiffe://example.org/b"),
    ]
    spiffe_id, diagnostics = extract_spiffe_id(sans)
    assert spiffe_id == "spiffe://example.org/a"
    assert [d.code for d in diagnostics] == [DiagnosticCode.MULTIPLE_URI_SANS]


@pytest.mark.parametrize("days", [31, 365, 3650])
def test_long_lived_certificates_are_valid(now, days):
    assert classify_status(window(now, after=timedelta(days=days)), now).status is CertificateStatus.VALID
