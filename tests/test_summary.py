import pytest

from spiffe_bundle_explorer.bundle.classifier import classify_bundle
from spiffe_bundle_explorer.bundle.summary import (
    discover_trust_domain,
    format_duration,
    summarize_bundle,
)


@pytest.mark.parametrize(
    "seconds, text",
    [
        (86400, "1 day"),
        (3 * 86400 + 7200, "3 days"),
        (3600, "1 hour"),
        (7200, "2 hours"),
        (60, "1 minute"),
        (300, "5 minutes"),
        (59, "0 minutes"),
        (0, "0 minutes"),
    ],
)
def test_format_duration(seconds, text):
    assert format_duration(seconds) == text


def test_trust_domain_comes_from_first_spiffe_id(make_x5c, now):
    bundle = classify_bundle(
        {
            "keys": [
                {"use": "x509-svid", "x5c": [make_x5c(uris=())]},
                {"use": "x509-svid", "x5c": [make_x5c(uris=("spiffe://prod.example.com/db",))]},
                {"use": "x509-svid", "x5c": [make_x5c(uris=("spiffe://other.org/x",))]},
            ]
        },
        now,
    )
    assert discover_trust_domain(bundle) == "prod.example.com"


def test_trust_domain_absent_without_certificates(now):
    bundle = classify_bundle({"keys": [{"use": "jwt-svid", "kid": "a"}]}, now)
    assert discover_trust_domain(bundle) is None


def test_summary_counts(make_x5c, now):
    bundle = classify_bundle(
        {
            "spiffe_sequence": 4,
            "spiffe_refresh_hint": 7200,
            "keys": [
                {"use": "jwt-svid", "kid": "a"},
                {"use": "jwt-svid", "kid": "b"},
                {"use": "wit-svid"},
                {"use": "x509-svid", "x5c": [make_x5c(), make_x5c(serial_number=2)]},
                {"use": "enc"},
            ],
        },
        now,
    )
    summary = summarize_bundle(bundle)

    assert summary.trust_domain == "example.org"
    assert summary.sequence == 4
    assert summary.refresh_hint_seconds == 7200
    assert summary.refresh_hint_display == "2 hours"
    assert summary.total_keys == 4
    assert summary.jwt_key_count == 2
    assert summary.x509_key_count == 1
    assert summary.wit_key_count == 1
    assert summary.certificate_count == 2
    assert summary.diagnostic_count == 1


def test_summary_without_refresh_hint(now):
    summary = summarize_bundle(classify_bundle({"keys": []}, now))
    assert summary.refresh_hint_seconds is None
    assert summary.refresh_hint_display is None
    assert summary.total_keys == 0
