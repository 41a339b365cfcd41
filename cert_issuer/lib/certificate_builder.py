"""Certificate builder for self-signed X.509 server certificates."""

from datetime import datetime, timedelta, timezone

from cryptography import x509

from .cert_utils import IssuedPrivateKey, generate_serial_number, signature_hash_for_key
from .config import SubjectName


class CertificateBuilder:
    """Builds self-signed leaf certificates for TLS-terminating services."""

    @staticmethod
    def build_template(
        subject_name: SubjectName,
        admin_email: str,
        private_key: IssuedPrivateKey,
        validity: timedelta,
        not_before: datetime | None = None,
    ) -> x509.CertificateBuilder:
        """Build the unsigned certificate template.

        Issuer equals subject. The key usage set always includes
        key_cert_sign and crl_sign even though BasicConstraints is CA:FALSE.

        Args:
            subject_name: Organization and common name for subject and issuer
            admin_email: Sole RFC822 name in the SAN extension
            private_key: Key whose public half is certified
            validity: NotAfter - NotBefore
            not_before: Start of validity, defaults to now (UTC)

        Returns:
            CertificateBuilder ready to be signed
        """
        name = subject_name.to_x509_name()
        if not_before is None:
            not_before = datetime.now(timezone.utc)
        # X.509 times carry whole seconds only
        not_before = not_before.replace(microsecond=0)
        not_after = not_before + validity

        return (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(private_key.public_key())
            .serial_number(generate_serial_number())
            .not_valid_before(not_before)
            .not_valid_after(not_after)
            .add_extension(
                x509.BasicConstraints(ca=False, path_length=None),
                critical=True,
            )
            .add_extension(
                x509.KeyUsage(
                    digital_signature=True,
                    content_commitment=False,
                    key_encipherment=True,
                    data_encipherment=False,
                    key_agreement=False,
                    key_cert_sign=True,
                    crl_sign=True,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=True,
            )
            .add_extension(
                x509.ExtendedKeyUsage([x509.ExtendedKeyUsageOID.SERVER_AUTH]),
                critical=False,
            )
            .add_extension(
                x509.SubjectAlternativeName(
                    [
                        x509.DNSName(subject_name.common_name),
                        x509.RFC822Name(admin_email),
                    ]
                ),
                critical=False,
            )
        )

    @staticmethod
    def build_self_signed(
        subject_name: SubjectName,
        admin_email: str,
        private_key: IssuedPrivateKey,
        validity: timedelta,
        not_before: datetime | None = None,
    ) -> x509.Certificate:
        """Build and sign a self-signed server certificate with its own key.

        Returns:
            Signed X.509 v3 certificate
        """
        builder = CertificateBuilder.build_template(
            subject_name=subject_name,
            admin_email=admin_email,
            private_key=private_key,
            validity=validity,
            not_before=not_before,
        )
        return builder.sign(private_key, signature_hash_for_key(private_key))
