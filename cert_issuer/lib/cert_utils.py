"""Certificate utility functions for key generation, serialization, and metadata extraction."""

import secrets

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePrivateKey
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from .errors import InvalidKeySizeError
from .models import Algorithm, CertificateMetadata

# Keys the issuer generates and knows how to encode
IssuedPrivateKey = RSAPrivateKey | EllipticCurvePrivateKey

SERIAL_NUMBER_LIMIT = 1 << 128

_ECDSA_CURVES: dict[int, type[ec.EllipticCurve]] = {
    224: ec.SECP224R1,
    256: ec.SECP256R1,
    384: ec.SECP384R1,
    521: ec.SECP521R1,
}


def determine_ecdsa_curve(key_size: int) -> ec.EllipticCurve:
    """Map an ECDSA key size selector to its NIST named curve.

    Raises:
        InvalidKeySizeError: If key_size is not one of 224, 256, 384, 521
    """
    curve_class = _ECDSA_CURVES.get(key_size) if isinstance(key_size, int) else None
    if curve_class is None:
        raise InvalidKeySizeError(
            Algorithm.ECDSA.value,
            key_size,
            f"expected one of {sorted(_ECDSA_CURVES)}",
        )
    return curve_class()


def generate_rsa_private_key(key_size: int) -> RSAPrivateKey:
    """Generate RSA private key; bit length limits are left to cryptography."""
    try:
        return rsa.generate_private_key(
            public_exponent=65537,
            key_size=key_size,
        )
    except (TypeError, ValueError) as e:
        raise InvalidKeySizeError(Algorithm.RSA.value, key_size, str(e)) from e


def generate_ecdsa_private_key(curve: ec.EllipticCurve) -> EllipticCurvePrivateKey:
    """Generate EC private key on the given curve."""
    return ec.generate_private_key(curve)


def signature_hash_for_key(key: IssuedPrivateKey) -> hashes.HashAlgorithm:
    """Pick the signature digest matching the key strength.

    RSA and curves up to P-256 use SHA-256, P-384 uses SHA-384, P-521 uses SHA-512.
    """
    if isinstance(key, EllipticCurvePrivateKey):
        if key.curve.key_size > 384:
            return hashes.SHA512()
        if key.curve.key_size > 256:
            return hashes.SHA384()
    return hashes.SHA256()


def serialize_private_key(key: IssuedPrivateKey) -> bytes:
    """Serialize private key to unencrypted PEM.

    RSA keys are written as PKCS#1 ("RSA PRIVATE KEY") and EC keys as
    SEC1 ("EC PRIVATE KEY").

    Raises:
        TypeError: If key is neither an RSA nor an EC private key
    """
    if not isinstance(key, (RSAPrivateKey, EllipticCurvePrivateKey)):
        raise TypeError(f"cannot encode private key of type {type(key).__name__}")
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


def deserialize_private_key(pem_data: bytes) -> IssuedPrivateKey:
    """Deserialize private key from PEM bytes."""
    key = serialization.load_pem_private_key(pem_data, password=None)
    if not isinstance(key, (RSAPrivateKey, EllipticCurvePrivateKey)):
        raise ValueError("expected RSA or EC private key")
    return key


def serialize_certificate(cert: x509.Certificate) -> bytes:
    """Serialize certificate to PEM format."""
    return cert.public_bytes(serialization.Encoding.PEM)


def deserialize_certificate(pem_data: bytes) -> x509.Certificate:
    """Deserialize certificate from PEM bytes."""
    return x509.load_pem_x509_certificate(pem_data)


def generate_serial_number() -> int:
    """Draw a certificate serial number from the OS CSPRNG.

    Values are uniform over [1, 2**128). Zero is excluded because X.509
    serial numbers must be positive. Collisions with earlier issuances
    are not checked.

    Returns:
        Integer serial number for x509.CertificateBuilder.serial_number()
    """
    return secrets.randbelow(SERIAL_NUMBER_LIMIT - 1) + 1


def get_certificate_serial_hex(cert: x509.Certificate) -> str:
    """Return certificate serial number as hex with colons (e.g., 3A:F2:B1:...)."""
    serial_hex = f"{cert.serial_number:X}"
    if len(serial_hex) % 2 != 0:
        serial_hex = "0" + serial_hex
    return ":".join(serial_hex[i : i + 2] for i in range(0, len(serial_hex), 2))


def describe_public_key(cert: x509.Certificate) -> str:
    """Return a short label like 'RSA-2048' or 'ECDSA-secp384r1'."""
    public_key = cert.public_key()
    if isinstance(public_key, rsa.RSAPublicKey):
        return f"RSA-{public_key.key_size}"
    if isinstance(public_key, ec.EllipticCurvePublicKey):
        return f"ECDSA-{public_key.curve.name}"
    return type(public_key).__name__


def extract_certificate_metadata(cert: x509.Certificate) -> CertificateMetadata:
    """Extract a JSON-friendly summary of an issued certificate."""
    cn = cert.subject.get_attributes_for_oid(x509.NameOID.COMMON_NAME)[0].value
    if not isinstance(cn, str):
        raise ValueError("CN must be string")

    san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value

    return CertificateMetadata(
        serialNumber=get_certificate_serial_hex(cert),
        commonName=cn,
        dnsNames=san.get_values_for_type(x509.DNSName),
        emailAddresses=san.get_values_for_type(x509.RFC822Name),
        notBefore=cert.not_valid_before_utc.isoformat(),
        expiry=cert.not_valid_after_utc.isoformat(),
        keyAlgorithm=describe_public_key(cert),
    )
