"""Pydantic schemas for the bundle explorer API."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from spiffe_bundle_explorer.bundle.jwk import jwk_to_dict
from spiffe_bundle_explorer.models import (
    BundleSummary,
    Certificate,
    ClassifiedBundle,
    Diagnostic,
    EcPublicKeyParams,
    ParsedJWK,
    RsaPublicKeyParams,
    X509Svid,
)

StatusType = Literal["valid", "expiring-soon", "expired"]
SanKind = Literal["URI", "DNS", "IP", "EMAIL"]


class BundleLoadRequest(BaseModel):
    """Request body for loading a bundle from a URL or pasted JSON."""

    input: Annotated[str, Field(min_length=1)]
    use_proxy: bool = False


class CertificateInspectRequest(BaseModel):
    """Request body for decoding a single x5c entry."""

    x5c: Annotated[str, Field(min_length=1)]


class SpiffeIdParseRequest(BaseModel):
    spiffe_id: str


class SpiffeIdResponse(BaseModel):
    spiffe_id: str
    trust_domain: str
    path: str


class DiagnosticResponse(BaseModel):
    code: str
    message: str
    key_index: int | None
    certificate_index: int | None

    @classmethod
    def from_domain(cls, diagnostic: Diagnostic):
        return cls(
            code=diagnostic.code.value,
            message=diagnostic.message,
            key_index=diagnostic.key_index,
            certificate_index=diagnostic.certificate_index,
        )


class KeyUsageResponse(BaseModel):
    digital_signature: bool
    key_encipherment: bool
    key_agreement: bool
    key_cert_sign: bool
    crl_sign: bool
    critical: bool


class ExtendedKeyUsageResponse(BaseModel):
    purposes: list[str]
    critical: bool


class BasicConstraintsResponse(BaseModel):
    ca: bool
    path_length: int | None
    critical: bool


class SubjectAltNameResponse(BaseModel):
    type: SanKind
    value: str


class PublicKeyParamsResponse(BaseModel):
    """Public key parameters; only the members of the key's algorithm are set."""

    algorithm: str
    modulus: str | None = None
    exponent: str | None = None
    curve: str | None = None
    x: str | None = None
    y: str | None = None


class CertificateResponse(BaseModel):
    """Response for a single decoded certificate."""

    spiffe_id: str
    subject: str
    issuer: str
    serial_number: str
    serial_number_display: str
    valid_from: datetime
    valid_until: datetime
    is_valid: bool
    status: StatusType
    days_remaining: int | None
    public_key_algorithm: str
    public_key_size: str
    signature_algorithm: str
    key_usage: KeyUsageResponse
    extended_key_usage: ExtendedKeyUsageResponse
    basic_constraints: BasicConstraintsResponse
    subject_alt_names: list[SubjectAltNameResponse]
    subject_key_identifier: str | None
    authority_key_identifier: str | None
    public_key_params: PublicKeyParamsResponse
    pem_encoded: str
    der_encoded: str

    @classmethod
    def from_domain(cls, cert: Certificate):
        """Create from a decoded certificate record."""
        params = cert.public_key_params
        if isinstance(params, RsaPublicKeyParams):
            params_response = PublicKeyParamsResponse(
                algorithm=params.algorithm, modulus=params.modulus, exponent=params.exponent
            )
        elif isinstance(params, EcPublicKeyParams):
            params_response = PublicKeyParamsResponse(
                algorithm=params.algorithm, curve=params.curve, x=params.x, y=params.y
            )
        else:
            params_response = PublicKeyParamsResponse(algorithm=params.algorithm)

        usage = cert.key_usage
        return cls(
            spiffe_id=cert.spiffe_id,
            subject=cert.subject,
            issuer=cert.issuer,
            serial_number=cert.serial_number,
            serial_number_display=cert.serial_number_display,
            valid_from=cert.valid_from,
            valid_until=cert.valid_until,
            is_valid=cert.is_valid,
            status=cert.status.value,
            days_remaining=cert.days_remaining,
            public_key_algorithm=cert.public_key_algorithm,
            public_key_size=cert.public_key_size,
            signature_algorithm=cert.signature_algorithm,
            key_usage=KeyUsageResponse(
                digital_signature=usage.digital_signature,
                key_encipherment=usage.key_encipherment,
                key_agreement=usage.key_agreement,
                key_cert_sign=usage.key_cert_sign,
                crl_sign=usage.crl_sign,
                critical=usage.critical,
            ),
            extended_key_usage=ExtendedKeyUsageResponse(
                purposes=list(cert.extended_key_usage.purposes),
                critical=cert.extended_key_usage.critical,
            ),
            basic_constraints=BasicConstraintsResponse(
                ca=cert.basic_constraints.ca,
                path_length=cert.basic_constraints.path_length,
                critical=cert.basic_constraints.critical,
            ),
            subject_alt_names=[
                SubjectAltNameResponse(type=san.type.value, value=san.value)
                for san in cert.subject_alt_names
            ],
            subject_key_identifier=cert.subject_key_identifier,
            authority_key_identifier=cert.authority_key_identifier,
            public_key_params=params_response,
            pem_encoded=cert.pem_encoded,
            der_encoded=cert.der_encoded,
        )


class CertificateInspectResponse(BaseModel):
    certificate: CertificateResponse
    diagnostics: list[DiagnosticResponse]


class JWKResponse(BaseModel):
    """Response for a JWT-SVID or WIT-SVID key."""

    id: str
    kid: str | None
    kty: str | None
    alg: str | None
    algorithm_detail: str | None
    jwk: dict

    @classmethod
    def from_domain(cls, parsed: ParsedJWK):
        return cls(
            id=parsed.id,
            kid=parsed.key.kid,
            kty=parsed.key.kty,
            alg=parsed.key.alg,
            algorithm_detail=parsed.algorithm_detail,
            jwk=jwk_to_dict(parsed.key),
        )


class X509SvidResponse(BaseModel):
    """Response for an X.509-SVID key and its chain."""

    id: str
    jwk: dict
    certificates: list[CertificateResponse]

    @classmethod
    def from_domain(cls, svid: X509Svid):
        return cls(
            id=svid.id,
            jwk=jwk_to_dict(svid.key),
            certificates=[CertificateResponse.from_domain(c) for c in svid.certificates],
        )


class BundleSummaryResponse(BaseModel):
    trust_domain: str | None
    sequence: int | None
    refresh_hint_seconds: int | None
    refresh_hint_display: str | None
    total_keys: int
    jwt_key_count: int
    x509_key_count: int
    wit_key_count: int
    certificate_count: int
    diagnostic_count: int

    @classmethod
    def from_domain(cls, summary: BundleSummary):
        return cls(
            trust_domain=summary.trust_domain,
            sequence=summary.sequence,
            refresh_hint_seconds=summary.refresh_hint_seconds,
            refresh_hint_display=summary.refresh_hint_display,
            total_keys=summary.total_keys,
            jwt_key_count=summary.jwt_key_count,
            x509_key_count=summary.x509_key_count,
            wit_key_count=summary.wit_key_count,
            certificate_count=summary.certificate_count,
            diagnostic_count=summary.diagnostic_count,
        )


class BundleResponse(BaseModel):
    """Response for a classified bundle."""

    summary: BundleSummaryResponse
    jwt_keys: list[JWKResponse]
    x509_keys: list[X509SvidResponse]
    wit_keys: list[JWKResponse]
    diagnostics: list[DiagnosticResponse]

    @classmethod
    def from_domain(cls, bundle: ClassifiedBundle, summary: BundleSummary):
        return cls(
            summary=BundleSummaryResponse.from_domain(summary),
            jwt_keys=[JWKResponse.from_domain(k) for k in bundle.jwt_keys],
            x509_keys=[X509SvidResponse.from_domain(k) for k in bundle.x509_keys],
            wit_keys=[JWKResponse.from_domain(k) for k in bundle.wit_keys],
            diagnostics=[DiagnosticResponse.from_domain(d) for d in bundle.diagnostics],
        )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    bundle_loaded: bool
