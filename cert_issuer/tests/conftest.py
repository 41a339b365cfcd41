"""Test fixtures for cert_issuer tests."""

from datetime import timedelta
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePrivateKey
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from cert_issuer.lib.cert_utils import (
    determine_ecdsa_curve,
    generate_ecdsa_private_key,
    generate_rsa_private_key,
)
from cert_issuer.lib.certificate_builder import CertificateBuilder
from cert_issuer.lib.config import IssuerConfig, SubjectName
from cert_issuer.lib.issuer import SelfSignedCertificateIssuer
from cert_issuer.lib.models import Algorithm, GenerateRequest


@pytest.fixture
def certs_dir(tmp_path: Path) -> Path:
    """Return a not-yet-created certs directory inside tmp_path."""
    return tmp_path / "certs"


@pytest.fixture
def issuer_config(certs_dir: Path) -> IssuerConfig:
    """Return test issuer configuration with a short validity period."""
    return IssuerConfig(
        certificate_base_path=certs_dir,
        certificate_validity=timedelta(days=30),
        organization="Test Org",
    )


@pytest.fixture
def issuer(issuer_config: IssuerConfig) -> SelfSignedCertificateIssuer:
    return SelfSignedCertificateIssuer(issuer_config)


@pytest.fixture
def rsa_request() -> GenerateRequest:
    """Return the svc.internal RSA-2048 request."""
    return GenerateRequest(
        common_name="svc.internal",
        admin_email="ops@example.com",
        algorithm=Algorithm.RSA,
        key_size=2048,
    )


@pytest.fixture
def ecdsa_request() -> GenerateRequest:
    return GenerateRequest(
        common_name="edge.internal",
        admin_email="ops@example.com",
        algorithm=Algorithm.ECDSA,
        key_size=256,
    )


@pytest.fixture(scope="session")
def rsa_key() -> RSAPrivateKey:
    """Generate one RSA key for the session (faster than per test)."""
    return generate_rsa_private_key(2048)


@pytest.fixture
def ec_key() -> EllipticCurvePrivateKey:
    return generate_ecdsa_private_key(determine_ecdsa_curve(256))


@pytest.fixture
def subject_name() -> SubjectName:
    return SubjectName(organization="Test Org", common_name="svc.internal")


@pytest.fixture
def rsa_cert(rsa_key: RSAPrivateKey, subject_name: SubjectName) -> x509.Certificate:
    """Self-signed RSA certificate valid for 30 days."""
    return CertificateBuilder.build_self_signed(
        subject_name=subject_name,
        admin_email="ops@example.com",
        private_key=rsa_key,
        validity=timedelta(days=30),
    )
