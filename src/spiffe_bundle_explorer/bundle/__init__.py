"""Trust bundle loading and classification."""

from spiffe_bundle_explorer.bundle.classifier import InvalidBundleShape, classify_bundle
from spiffe_bundle_explorer.bundle.fetch import CORSError, NetworkError, fetch_bundle
from spiffe_bundle_explorer.bundle.loader import LoadedBundle, load_bundle, validate_input
from spiffe_bundle_explorer.bundle.summary import summarize_bundle

__all__ = [
    "CORSError",
    "InvalidBundleShape",
    "LoadedBundle",
    "NetworkError",
    "classify_bundle",
    "fetch_bundle",
    "load_bundle",
    "summarize_bundle",
    "validate_input",
]
