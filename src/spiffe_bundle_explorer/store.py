"""In-memory holder for the currently loaded bundle."""

import logging
import threading

from spiffe_bundle_explorer.bundle.loader import LoadedBundle
from spiffe_bundle_explorer.models import Certificate

logger = logging.getLogger(__name__)


class BundleStore:
    """Keeps the most recently loaded bundle.

    Loading a new bundle replaces the previous one entirely.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._current: LoadedBundle | None = None

    def replace(self, loaded: LoadedBundle) -> None:
        with self._lock:
            self._current = loaded
        logger.info("Stored bundle from %s input", loaded.input_type)

    def current(self) -> LoadedBundle | None:
        with self._lock:
            return self._current

    def clear(self) -> None:
        with self._lock:
            self._current = None

    def find_certificate(self, serial_number: str) -> Certificate | None:
        """Find a certificate of the current bundle by serial.

        Accepts the plain hex form or the colon-separated display form.
        """
        wanted = serial_number.replace(":", "").lower()
        loaded = self.current()
        if loaded is None:
            return None

        for certificate in loaded.bundle.certificates:
            if certificate.serial_number == wanted:
                return certificate
        return None
