"""Issuer configuration dataclasses."""

import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from cryptography import x509
from cryptography.x509 import oid

BASE_PATH_ENV = "CERT_ISSUER_BASE_PATH"
VALIDITY_DAYS_ENV = "CERT_ISSUER_VALIDITY_DAYS"
ORGANIZATION_ENV = "CERT_ISSUER_ORGANIZATION"

DEFAULT_ORGANIZATION = "Ionoverse"
DEFAULT_VALIDITY_DAYS = 365


@dataclass
class IssuerConfig:
    """Self-signed issuer configuration.

    certificate_validity is applied as NotAfter - NotBefore without any
    bounds check, so zero yields a certificate that expires immediately.
    """

    certificate_base_path: Path = Path("certs")
    certificate_validity: timedelta = field(
        default_factory=lambda: timedelta(days=DEFAULT_VALIDITY_DAYS)
    )
    organization: str = DEFAULT_ORGANIZATION

    @classmethod
    def from_env(cls) -> "IssuerConfig":
        """Build configuration from CERT_ISSUER_* environment variables.

        Raises:
            ValueError: If CERT_ISSUER_VALIDITY_DAYS is not an integer
        """
        config = cls()
        base_path = os.environ.get(BASE_PATH_ENV)
        if base_path:
            config.certificate_base_path = Path(base_path)

        validity_days = os.environ.get(VALIDITY_DAYS_ENV)
        if validity_days:
            try:
                config.certificate_validity = timedelta(days=int(validity_days))
            except ValueError as e:
                raise ValueError(
                    f"{VALIDITY_DAYS_ENV} must be an integer, got {validity_days!r}"
                ) from e

        organization = os.environ.get(ORGANIZATION_ENV)
        if organization:
            config.organization = organization
        return config


@dataclass
class SubjectName:
    """X.509 subject (and issuer) name of a self-signed certificate."""

    organization: str
    common_name: str

    def to_x509_name(self) -> x509.Name:
        """Convert to cryptography x509.Name for certificate generation."""
        return x509.Name(
            [
                x509.NameAttribute(oid.NameOID.ORGANIZATION_NAME, self.organization),
                x509.NameAttribute(oid.NameOID.COMMON_NAME, self.common_name),
            ]
        )
