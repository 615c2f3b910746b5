"""Bundle explorer service runner - serves the FastAPI app with uvicorn."""

import logging
import sys

import uvicorn

from spiffe_bundle_explorer.api.app import create_app
from spiffe_bundle_explorer.config import ExplorerConfig
from spiffe_bundle_explorer.store import BundleStore

logger = logging.getLogger(__name__)


class ExplorerService:
    """Main service that runs the API server."""

    def __init__(self, config: ExplorerConfig):
        self.config = config
        self.store = BundleStore()

    def _setup_logging(self):
        """Configure logging."""
        logging.basicConfig(
            level=getattr(logging, self.config.log_level.upper()),
            format="%(name)s %(message)s",
            stream=sys.stdout,
            force=True,
        )

    def run(self):
        """Start the API server and block until it exits."""
        self._setup_logging()

        logger.info("Starting SPIFFE bundle explorer...")
        logger.info("API: %s:%d", self.config.api_host, self.config.api_port)
        logger.info("Expiring-soon threshold: %d days", self.config.expiring_soon_days)

        app = create_app(self.store, self.config)

        try:
            uvicorn.run(
                app,
                host=self.config.api_host,
                port=self.config.api_port,
                log_level=self.config.log_level.lower(),
            )
        except KeyboardInterrupt:
            logger.info("Shutting down...")


def main():
    """Entry point."""
    try:
        from importlib.metadata import version

        package_version = version("spiffe-bundle-explorer")
    except Exception:
        package_version = "1.0.0"

    print(f"SPIFFE Bundle Explorer v{package_version}")

    config = ExplorerConfig()
    service = ExplorerService(config)
    service.run()


if __name__ == "__main__":
    main()
