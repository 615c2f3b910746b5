"""Bundle explorer API routes."""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from spiffe_bundle_explorer.api.schemas import (
    BundleLoadRequest,
    BundleResponse,
    BundleSummaryResponse,
    CertificateInspectRequest,
    CertificateInspectResponse,
    CertificateResponse,
    DiagnosticResponse,
    HealthResponse,
    SpiffeIdParseRequest,
    SpiffeIdResponse,
)
from spiffe_bundle_explorer.bundle.fetch import CORSError, NetworkError
from spiffe_bundle_explorer.bundle.loader import load_bundle
from spiffe_bundle_explorer.bundle.summary import summarize_bundle
from spiffe_bundle_explorer.config import ExplorerConfig
from spiffe_bundle_explorer.spiffeid import InvalidSpiffeId, parse_spiffe_id
from spiffe_bundle_explorer.store import BundleStore
from spiffe_bundle_explorer.x509.decoder import MalformedCertificate, decode_certificate

router = APIRouter()


def get_store() -> BundleStore:
    """Dependency to get the bundle store - will be overridden at app creation."""
    raise NotImplementedError("Bundle store not configured")


def get_config() -> ExplorerConfig:
    """Dependency to get the configuration - will be overridden at app creation."""
    raise NotImplementedError("Configuration not configured")


def _current_bundle(store: BundleStore):
    loaded = store.current()
    if loaded is None:
        raise HTTPException(status_code=404, detail="No bundle loaded")
    return loaded.bundle


@router.get("/health", response_model=HealthResponse)
async def health_check(store: Annotated[BundleStore, Depends(get_store)]):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        service="spiffe-bundle-explorer",
        bundle_loaded=store.current() is not None,
    )


@router.post("/bundle", response_model=BundleResponse)
def load(
    data: BundleLoadRequest,
    store: Annotated[BundleStore, Depends(get_store)],
    config: Annotated[ExplorerConfig, Depends(get_config)],
):
    """Load a bundle from a URL or pasted JSON, replacing the current one."""
    try:
        loaded = load_bundle(
            data.input,
            datetime.now(timezone.utc),
            use_proxy=data.use_proxy,
            timeout=config.fetch_timeout,
            proxy_url=config.cors_proxy_url,
            expiring_soon_days=config.expiring_soon_days,
        )
    except CORSError as e:
        raise HTTPException(status_code=502, detail={"message": str(e), "cors_error": True}) from e
    except NetworkError as e:
        raise HTTPException(status_code=502, detail={"message": str(e), "cors_error": False}) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    store.replace(loaded)
    return BundleResponse.from_domain(loaded.bundle, summarize_bundle(loaded.bundle))


@router.get("/bundle", response_model=BundleResponse)
async def get_bundle(store: Annotated[BundleStore, Depends(get_store)]):
    """Get the currently loaded bundle."""
    bundle = _current_bundle(store)
    return BundleResponse.from_domain(bundle, summarize_bundle(bundle))


@router.get("/bundle/summary", response_model=BundleSummaryResponse)
async def get_summary(store: Annotated[BundleStore, Depends(get_store)]):
    """Get trust domain, sequence, refresh hint and counts of the current bundle."""
    return BundleSummaryResponse.from_domain(summarize_bundle(_current_bundle(store)))


@router.delete("/bundle", status_code=204)
async def clear_bundle(store: Annotated[BundleStore, Depends(get_store)]):
    """Discard the currently loaded bundle."""
    store.clear()


@router.get("/bundle/certificates/{serial_number}/pem")
async def export_certificate(
    serial_number: str,
    store: Annotated[BundleStore, Depends(get_store)],
):
    """Export a certificate of the current bundle as PEM."""
    _current_bundle(store)
    cert = store.find_certificate(serial_number)
    if cert is None:
        raise HTTPException(status_code=404, detail="Certificate not found")

    return PlainTextResponse(
        content=cert.pem_encoded,
        media_type="application/x-pem-file",
        headers={"Content-Disposition": f'attachment; filename="certificate-{cert.serial_number}.pem"'},
    )


@router.post("/certificates/inspect", response_model=CertificateInspectResponse)
async def inspect_certificate(
    data: CertificateInspectRequest,
    config: Annotated[ExplorerConfig, Depends(get_config)],
):
    """Decode a single x5c entry without loading a bundle."""
    try:
        result = decode_certificate(data.x5c, datetime.now(timezone.utc), config.expiring_soon_days)
    except MalformedCertificate as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return CertificateInspectResponse(
        certificate=CertificateResponse.from_domain(result.certificate),
        diagnostics=[DiagnosticResponse.from_domain(d) for d in result.diagnostics],
    )


@router.post("/spiffe-ids/parse", response_model=SpiffeIdResponse)
async def parse_id(data: SpiffeIdParseRequest):
    """Split a SPIFFE ID into trust domain and path."""
    try:
        spiffe_id = parse_spiffe_id(data.spiffe_id)
    except InvalidSpiffeId as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return SpiffeIdResponse(
        spiffe_id=str(spiffe_id),
        trust_domain=spiffe_id.trust_domain,
        path=spiffe_id.path,
    )
