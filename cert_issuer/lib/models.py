"""Request, response and metadata models for certificate issuance."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TypedDict

from .errors import UnsupportedAlgorithmError


class Algorithm(str, Enum):
    """Private key algorithms the issuer can generate."""

    RSA = "RSA"
    ECDSA = "ECDSA"

    @classmethod
    def parse(cls, value: "Algorithm | str") -> "Algorithm":
        """Return the matching member or raise UnsupportedAlgorithmError."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.upper())
            except ValueError:
                pass
        raise UnsupportedAlgorithmError(value)


@dataclass(frozen=True)
class GenerateRequest:
    """Identity and key parameters for a new self-signed certificate.

    common_name is used as subject CN, as the only DNS SAN and as the
    filename stem. For ECDSA, key_size selects the curve (224, 256, 384, 521).
    """

    common_name: str
    admin_email: str
    algorithm: Algorithm | str
    key_size: int


@dataclass(frozen=True)
class GenerateResponse:
    """Absolute paths of the artifacts written by a generate call."""

    cert_path: Path
    key_path: Path


@dataclass(frozen=True)
class RenewRequest:
    common_name: str


@dataclass(frozen=True)
class RenewResponse:
    cert_path: Path
    key_path: Path


@dataclass(frozen=True)
class RevokeRequest:
    common_name: str


@dataclass(frozen=True)
class RevokeResponse:
    common_name: str


class CertificateMetadata(TypedDict):
    """Summary of an issued certificate for log output."""

    serialNumber: str
    commonName: str
    dnsNames: list[str]
    emailAddresses: list[str]
    notBefore: str
    expiry: str
    keyAlgorithm: str
