"""Bundle-level summary: trust domain, sequence, refresh hint and counts."""

from spiffe_bundle_explorer.models import BundleSummary, ClassifiedBundle
from spiffe_bundle_explorer.spiffeid import trust_domain_or_none


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_duration(seconds: int) -> str:
    """Render a duration using its largest whole unit.

    Example:
        format_duration(7200) -> "2 hours"
    """
    days = seconds // 86400
    hours = (seconds % 86400) // 3600
    minutes = (seconds % 3600) // 60

    if days > 0:
        return _plural(days, "day")
    if hours > 0:
        return _plural(hours, "hour")
    return _plural(minutes, "minute")


def discover_trust_domain(bundle: ClassifiedBundle) -> str | None:
    """First trust domain found among the bundle's certificate SPIFFE IDs."""
    for certificate in bundle.certificates:
        trust_domain = trust_domain_or_none(certificate.spiffe_id)
        if trust_domain:
            return trust_domain
    return None


def summarize_bundle(bundle: ClassifiedBundle) -> BundleSummary:
    refresh_hint = bundle.refresh_hint_seconds

    return BundleSummary(
        trust_domain=discover_trust_domain(bundle),
        sequence=bundle.sequence,
        refresh_hint_seconds=refresh_hint,
        refresh_hint_display=format_duration(refresh_hint) if refresh_hint is not None else None,
        total_keys=bundle.total_keys,
        jwt_key_count=len(bundle.jwt_keys),
        x509_key_count=len(bundle.x509_keys),
        wit_key_count=len(bundle.wit_keys),
        certificate_count=len(bundle.certificates),
        diagnostic_count=len(bundle.diagnostics),
    )
