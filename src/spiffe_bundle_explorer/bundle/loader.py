"""Turning user input (a bundle URL or pasted JSON) into a classified bundle."""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Literal
from urllib.parse import urlparse

from spiffe_bundle_explorer.bundle.classifier import classify_bundle
from spiffe_bundle_explorer.bundle.fetch import (
    DEFAULT_PROXY_URL,
    DEFAULT_TIMEOUT,
    fetch_bundle,
)
from spiffe_bundle_explorer.models import ClassifiedBundle
from spiffe_bundle_explorer.x509.analyzer import EXPIRING_SOON_DAYS

logger = logging.getLogger(__name__)

InputType = Literal["url", "json", "invalid"]


@dataclass(frozen=True)
class InputValidation:
    is_valid: bool
    error: str | None = None
    type: InputType | None = None


@dataclass(frozen=True)
class LoadedBundle:
    """A classified bundle together with where it came from."""

    input_type: InputType
    source: str
    bundle: ClassifiedBundle


def detect_input_type(text: str) -> InputType:
    """Tell a bundle URL from pasted bundle JSON."""
    trimmed = text.strip()

    if trimmed.startswith("{"):
        try:
            json.loads(trimmed)
        except ValueError:
            return "invalid"
        return "json"

    if trimmed.startswith("https://") or trimmed.startswith("http://"):
        if urlparse(trimmed).netloc:
            return "url"
        return "invalid"

    return "invalid"


def validate_input(text: str) -> InputValidation:
    if not text or not text.strip():
        return InputValidation(is_valid=False, error="URL or bundle JSON is required")

    trimmed = text.strip()
    input_type = detect_input_type(trimmed)

    if input_type == "json":
        parsed = json.loads(trimmed)
        if not isinstance(parsed, dict) or not isinstance(parsed.get("keys"), list):
            return InputValidation(
                is_valid=False, error='Invalid bundle structure: missing "keys" array'
            )
        return InputValidation(is_valid=True, type="json")

    if input_type == "url":
        if not trimmed.startswith("https://") and not trimmed.startswith("http://localhost"):
            return InputValidation(
                is_valid=False,
                error="URL must use HTTPS protocol (or http://localhost for testing)",
            )
        return InputValidation(is_valid=True, type="url")

    if trimmed.startswith("{"):
        return InputValidation(is_valid=False, error="Invalid JSON format")

    return InputValidation(
        is_valid=False, error="Input must be either a valid HTTPS URL or bundle JSON"
    )


def load_bundle(
    text: str,
    now: datetime,
    use_proxy: bool = False,
    timeout: float = DEFAULT_TIMEOUT,
    proxy_url: str = DEFAULT_PROXY_URL,
    expiring_soon_days: int = EXPIRING_SOON_DAYS,
) -> LoadedBundle:
    """Parse or fetch a bundle and classify it.

    Raises:
        ValueError: If the input is neither bundle JSON nor an acceptable URL
        InvalidBundleShape: If the document has no "keys" list
        NetworkError: If fetching the URL fails (CORSError if unreachable)
    """
    trimmed = text.strip()
    input_type = detect_input_type(trimmed)

    if input_type == "json":
        # Shape problems surface from the classifier as InvalidBundleShape
        document = json.loads(trimmed)
    elif input_type == "url":
        document = fetch_bundle(trimmed, use_proxy=use_proxy, timeout=timeout, proxy_url=proxy_url)
    else:
        raise ValueError(validate_input(trimmed).error)

    bundle = classify_bundle(document, now, expiring_soon_days)
    logger.info(
        "Loaded bundle: %d JWT, %d X.509, %d WIT keys, %d diagnostics",
        len(bundle.jwt_keys),
        len(bundle.x509_keys),
        len(bundle.wit_keys),
        len(bundle.diagnostics),
    )

    return LoadedBundle(input_type=input_type, source=trimmed, bundle=bundle)
