"""Fetching trust bundles from a bundle endpoint.

Only HTTPS endpoints are accepted, plus http://localhost for local testing.
Failures to reach the endpoint at all are raised as CORSError so a caller
can offer a retry through the CORS proxy; every other failure is a plain
NetworkError. Nothing here retries on its own.
"""

import logging
from urllib.parse import quote

import requests

from spiffe_bundle_explorer.bundle.classifier import InvalidBundleShape

logger = logging.getLogger(__name__)

DEFAULT_PROXY_URL = "https://api.cors.lol/?url="
DEFAULT_TIMEOUT = 10.0


class NetworkError(Exception):
    """The bundle could not be retrieved from its endpoint."""


class CORSError(NetworkError):
    """The endpoint could not be reached directly; a proxy may help."""


def check_bundle_url(url: str) -> None:
    """Reject URLs other than https:// and http://localhost.

    Raises:
        ValueError: If the URL uses another scheme
    """
    if not url.startswith("https://") and not url.startswith("http://localhost"):
        raise ValueError("Bundle URL must use HTTPS protocol")


def proxied_url(url: str, proxy_url: str = DEFAULT_PROXY_URL) -> str:
    # RFC 3986 mark characters stay literal
    encoded = quote(url, safe="!*'()")
    return f"{proxy_url}{encoded}"


def fetch_bundle(
    url: str,
    use_proxy: bool = False,
    timeout: float = DEFAULT_TIMEOUT,
    proxy_url: str = DEFAULT_PROXY_URL,
) -> dict:
    """Fetch and JSON-decode a bundle document.

    Args:
        url: Bundle endpoint URL
        use_proxy: Route the request through the CORS proxy
        timeout: Request timeout in seconds
        proxy_url: Proxy prefix the encoded target URL is appended to

    Returns:
        The decoded bundle JSON object

    Raises:
        ValueError: If the URL is not HTTPS (or http://localhost)
        CORSError: If the endpoint could not be reached
        NetworkError: On timeouts, HTTP errors or a non-JSON body
        InvalidBundleShape: If the JSON has no "keys" list
    """
    check_bundle_url(url)

    fetch_url = proxied_url(url, proxy_url) if use_proxy else url
    logger.info("Fetching bundle from %s%s", url, " via proxy" if use_proxy else "")

    try:
        response = requests.get(fetch_url, timeout=timeout, headers={"Accept": "application/json"})
    except requests.exceptions.Timeout as error:
        raise NetworkError(f"Timed out after {timeout}s fetching {url}") from error
    except requests.exceptions.ConnectionError as error:
        raise CORSError(
            "The bundle endpoint could not be reached directly. It may not allow "
            "cross-origin requests; retrying through a CORS proxy may help."
        ) from error
    except requests.exceptions.RequestException as error:
        raise NetworkError(f"Request failed: {error}") from error

    if not response.ok:
        raise NetworkError(f"HTTP {response.status_code}: {response.reason}")

    content_type = response.headers.get("content-type")
    if content_type and "application/json" not in content_type:
        logger.warning("Response Content-Type is not application/json: %s", content_type)

    try:
        data = response.json()
    except ValueError as error:
        raise NetworkError(f"Response is not valid JSON: {error}") from error

    if not isinstance(data, dict) or not isinstance(data.get("keys"), list):
        raise InvalidBundleShape('Invalid bundle structure: missing "keys" array')

    return data
