"""SPIFFE ID parsing.

A SPIFFE ID has the form ``spiffe://<trust-domain><path>`` where the path is
either empty or a sequence of ``/segment`` parts. Parsing is purely
syntactic: no case folding or percent-decoding is applied, so the parsed
value always renders back to the exact input string.
"""

from spiffe_bundle_explorer.models import SpiffeId

SPIFFE_SCHEME = "spiffe://"


class InvalidSpiffeId(ValueError):
    """The string is not a syntactically valid SPIFFE ID."""


def parse_spiffe_id(value: str) -> SpiffeId:
    """Parse a SPIFFE ID string into trust domain and path.

    Args:
        value: SPIFFE ID, e.g. "spiffe://example.org/workload/web"

    Returns:
        SpiffeId whose str() equals the input

    Raises:
        InvalidSpiffeId: If the string violates the SPIFFE ID grammar
    """
    if not value:
        raise InvalidSpiffeId("SPIFFE ID cannot be empty")

    if not value.startswith(SPIFFE_SCHEME):
        raise InvalidSpiffeId(f'SPIFFE ID must start with "{SPIFFE_SCHEME}"')

    remainder = value[len(SPIFFE_SCHEME) :]
    if not remainder:
        raise InvalidSpiffeId("SPIFFE ID must contain a trust domain")

    slash = remainder.find("/")
    if slash == 0:
        raise InvalidSpiffeId("SPIFFE ID must contain a trust domain")

    if slash == -1:
        trust_domain, path = remainder, ""
    else:
        trust_domain, path = remainder[:slash], remainder[slash:]

    if not trust_domain:
        raise InvalidSpiffeId("Trust domain cannot be empty")

    if "//" in trust_domain or " " in trust_domain:
        raise InvalidSpiffeId("Trust domain contains invalid characters")

    if path:
        if not path.startswith("/"):
            raise InvalidSpiffeId('Path must start with "/"')
        if "//" in path or path.endswith("/"):
            raise InvalidSpiffeId("Path contains invalid segments")

    return SpiffeId(trust_domain=trust_domain, path=path)


def trust_domain_or_none(value: str) -> str | None:
    """Best-effort trust domain lookup; invalid IDs yield None."""
    try:
        return parse_spiffe_id(value).trust_domain
    except InvalidSpiffeId:
        return None
