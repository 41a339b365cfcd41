"""Exceptions raised while issuing certificates."""

from pathlib import Path


class IssuerError(Exception):
    """Base class for all certificate issuer failures."""


class UnsupportedAlgorithmError(IssuerError, ValueError):
    """Raised when the requested key algorithm is not RSA or ECDSA."""

    def __init__(self, algorithm: object) -> None:
        self.algorithm = algorithm
        super().__init__(f"unsupported algorithm: {algorithm!r}")


class InvalidKeySizeError(IssuerError, ValueError):
    """Raised when the key size is not usable for the requested algorithm."""

    def __init__(self, algorithm: str, key_size: object, reason: str | None = None) -> None:
        self.algorithm = algorithm
        self.key_size = key_size
        message = f"invalid key size {key_size!r} for {algorithm}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidCommonNameError(IssuerError, ValueError):
    """Raised when a common name cannot be used as a flat filename stem."""

    def __init__(self, common_name: str, reason: str) -> None:
        self.common_name = common_name
        super().__init__(f"invalid common name {common_name!r}: {reason}")


class ArtifactExistsError(IssuerError, FileExistsError):
    """Raised when a certificate or key for the common name is already on disk."""

    artifact = "artifact"

    def __init__(self, common_name: str, path: Path) -> None:
        self.common_name = common_name
        self.path = path
        super().__init__(f"{self.artifact} for {common_name} already exists: {path}")


class CertificateExistsError(ArtifactExistsError):
    """Certificate file for the common name already exists."""

    artifact = "certificate"


class KeyExistsError(ArtifactExistsError):
    """Private key file for the common name already exists."""

    artifact = "private key"


class IssuerFilesystemError(IssuerError, OSError):
    """Raised when the target directory or an artifact file cannot be used."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"{detail}: {path}")


class SigningError(IssuerError):
    """Raised when key generation entropy or certificate signing fails."""


class OperationNotSupportedError(IssuerError, NotImplementedError):
    """Raised for capability operations the issuer does not provide."""

    def __init__(self, operation: str, issuer: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} is not supported by {issuer}")
