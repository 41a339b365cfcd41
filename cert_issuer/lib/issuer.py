"""Certificate issuers that write PEM certificate and key pairs to disk."""

import contextlib
import os
from abc import ABC, abstractmethod
from pathlib import Path

from cryptography import x509

from .cert_utils import (
    IssuedPrivateKey,
    determine_ecdsa_curve,
    generate_ecdsa_private_key,
    generate_rsa_private_key,
    get_certificate_serial_hex,
    serialize_certificate,
    serialize_private_key,
)
from .certificate_builder import CertificateBuilder
from .config import IssuerConfig, SubjectName
from .errors import (
    ArtifactExistsError,
    CertificateExistsError,
    InvalidCommonNameError,
    IssuerFilesystemError,
    KeyExistsError,
    OperationNotSupportedError,
    SigningError,
)
from .filesystem import (
    DEFAULT_FILE_MODE,
    KEY_FILE_MODE,
    ensure_directory,
    open_exclusive,
    path_exists,
)
from .logging_config import LOGGER
from .models import (
    Algorithm,
    GenerateRequest,
    GenerateResponse,
    RenewRequest,
    RenewResponse,
    RevokeRequest,
    RevokeResponse,
)

CERT_SUFFIX = ".pem"
KEY_SUFFIX = "-key.pem"


class CertificateIssuer(ABC):
    """Capability surface shared by certificate issuers."""

    @abstractmethod
    def generate(self, request: GenerateRequest) -> GenerateResponse:
        """Issue a new certificate and key for request.common_name."""

    @abstractmethod
    def renew(self, request: RenewRequest) -> RenewResponse:
        """Re-issue an existing certificate."""

    @abstractmethod
    def revoke(self, request: RevokeRequest) -> RevokeResponse:
        """Revoke an existing certificate."""


def validate_common_name(common_name: str) -> None:
    """Reject common names that would escape the flat certs directory.

    Raises:
        InvalidCommonNameError: If the name is empty, contains a path
            separator or NUL, or is '.' or '..'
    """
    if not common_name:
        raise InvalidCommonNameError(common_name, "must not be empty")
    separators = {os.sep, "/"}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in common_name for sep in separators):
        raise InvalidCommonNameError(common_name, "must not contain a path separator")
    if "\x00" in common_name:
        raise InvalidCommonNameError(common_name, "must not contain NUL")
    if common_name in (".", ".."):
        raise InvalidCommonNameError(common_name, "must not be a relative path component")


class SelfSignedCertificateIssuer(CertificateIssuer):
    """Issues self-signed server certificates into a single flat directory.

    Each generate call writes <CN>.pem and <CN>-key.pem and refuses to
    overwrite either one. Nothing is cached between calls; existence is
    decided by the filesystem every time.
    """

    def __init__(self, config: IssuerConfig) -> None:
        """Initialize issuer with configuration.

        Args:
            config: Output directory, validity period and subject organization
        """
        self.config = config
        # Path() drops trailing separators
        self.base_path = Path(config.certificate_base_path).absolute()

    def cert_path_for(self, common_name: str) -> Path:
        return self.base_path / f"{common_name}{CERT_SUFFIX}"

    def key_path_for(self, common_name: str) -> Path:
        return self.base_path / f"{common_name}{KEY_SUFFIX}"

    def generate(self, request: GenerateRequest) -> GenerateResponse:
        """Generate a key pair and self-signed certificate, write both as PEM.

        Validation happens before any filesystem or crypto work, and the
        existence check happens before key generation.

        Args:
            request: Common name, admin email, algorithm and key size

        Returns:
            GenerateResponse with absolute certificate and key paths

        Raises:
            UnsupportedAlgorithmError: If algorithm is not RSA or ECDSA
            InvalidKeySizeError: If key size is invalid for the algorithm
            InvalidCommonNameError: If CN cannot be used as a filename stem
            CertificateExistsError: If <CN>.pem already exists
            KeyExistsError: If <CN>-key.pem already exists
            IssuerFilesystemError: If the directory or a file cannot be written
            SigningError: If the certificate cannot be built or signed
        """
        common_name = request.common_name
        try:
            algorithm = Algorithm.parse(request.algorithm)
            curve = None
            if algorithm is Algorithm.ECDSA:
                curve = determine_ecdsa_curve(request.key_size)
            validate_common_name(common_name)
        except ValueError as e:
            LOGGER.error("rejected request for %r: %s", common_name, e)
            raise

        try:
            ensure_directory(self.base_path)
        except IssuerFilesystemError as e:
            LOGGER.error("could not create certs directory: %s", e)
            raise

        cert_path = self.cert_path_for(common_name)
        key_path = self.key_path_for(common_name)
        LOGGER.debug("cert path: %s, key path: %s", cert_path, key_path)
        self._check_not_issued(common_name, cert_path, key_path)

        if curve is not None:
            LOGGER.debug("generating ECDSA key on %s", curve.name)
            private_key: IssuedPrivateKey = generate_ecdsa_private_key(curve)
        else:
            LOGGER.debug("generating RSA key of %s bits", request.key_size)
            try:
                private_key = generate_rsa_private_key(request.key_size)
            except ValueError as e:
                LOGGER.error("failed to generate RSA private key: %s", e)
                raise

        cert = self._sign(common_name, request.admin_email, private_key)
        cert_pem = serialize_certificate(cert)
        key_pem = serialize_private_key(private_key)

        self._write_artifact(
            cert_path,
            cert_pem,
            mode=DEFAULT_FILE_MODE,
            exists_error=CertificateExistsError(common_name, cert_path),
            strict_close=False,
        )
        self._write_artifact(
            key_path,
            key_pem,
            mode=KEY_FILE_MODE,
            exists_error=KeyExistsError(common_name, key_path),
            strict_close=True,
        )

        LOGGER.info(
            "issued self-signed certificate for %s (serial %s)",
            common_name,
            get_certificate_serial_hex(cert),
        )
        return GenerateResponse(cert_path=cert_path, key_path=key_path)

    def renew(self, request: RenewRequest) -> RenewResponse:
        raise OperationNotSupportedError("renew", type(self).__name__)

    def revoke(self, request: RevokeRequest) -> RevokeResponse:
        raise OperationNotSupportedError("revoke", type(self).__name__)

    def _check_not_issued(self, common_name: str, cert_path: Path, key_path: Path) -> None:
        """Fail fast if either artifact is already on disk."""
        if path_exists(cert_path):
            LOGGER.error("cert already exists: %s", cert_path)
            raise CertificateExistsError(common_name, cert_path)
        if path_exists(key_path):
            LOGGER.error("key already exists: %s", key_path)
            raise KeyExistsError(common_name, key_path)

    def _sign(
        self, common_name: str, admin_email: str, private_key: IssuedPrivateKey
    ) -> x509.Certificate:
        subject = SubjectName(organization=self.config.organization, common_name=common_name)
        try:
            return CertificateBuilder.build_self_signed(
                subject_name=subject,
                admin_email=admin_email,
                private_key=private_key,
                validity=self.config.certificate_validity,
            )
        except (ValueError, TypeError, OSError) as e:
            LOGGER.error("failed to create certificate for %s: %s", common_name, e)
            raise SigningError(f"failed to create certificate for {common_name}: {e}") from e

    def _write_artifact(
        self,
        path: Path,
        data: bytes,
        mode: int,
        exists_error: ArtifactExistsError,
        strict_close: bool,
    ) -> None:
        """Create path exclusively and write data to it.

        A close error fails the call only when strict_close is set; otherwise
        it is logged and the write is treated as done.
        """
        try:
            handle = open_exclusive(path, mode)
        except FileExistsError as e:
            LOGGER.error("%s", exists_error)
            raise exists_error from e
        except OSError as e:
            LOGGER.error("failed to open %s for writing: %s", path, e)
            raise IssuerFilesystemError(path, "failed to open for writing") from e

        try:
            handle.write(data)
            handle.flush()
        except OSError as e:
            LOGGER.error("failed to write %s: %s", path, e)
            with contextlib.suppress(OSError):
                handle.close()
            raise IssuerFilesystemError(path, "failed to write") from e

        try:
            handle.close()
        except OSError as e:
            if strict_close:
                LOGGER.error("error closing %s: %s", path, e)
                raise IssuerFilesystemError(path, "failed to close") from e
            LOGGER.error("error closing %s, keeping written file: %s", path, e)
