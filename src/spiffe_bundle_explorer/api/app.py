"""FastAPI application factory for the bundle explorer."""

from fastapi import FastAPI

from spiffe_bundle_explorer.api import routes
from spiffe_bundle_explorer.config import ExplorerConfig
from spiffe_bundle_explorer.store import BundleStore


def create_app(store: BundleStore, config: ExplorerConfig) -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title="SPIFFE Bundle Explorer API",
        description="Classify SPIFFE trust bundles and inspect their keys and certificates",
        version="1.0.0",
    )

    # Override the store and config dependencies
    def get_store():
        return store

    def get_config():
        return config

    app.dependency_overrides[routes.get_store] = get_store
    app.dependency_overrides[routes.get_config] = get_config

    # Include routes
    app.include_router(routes.router, prefix="/api/v1", tags=["bundles"])

    return app
