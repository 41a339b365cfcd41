#!/usr/bin/env python3
"""Issue a self-signed server certificate and key for one common name."""

import argparse
import json
import sys
from datetime import timedelta
from pathlib import Path

from cert_issuer.lib.cert_utils import deserialize_certificate, extract_certificate_metadata
from cert_issuer.lib.config import IssuerConfig
from cert_issuer.lib.errors import ArtifactExistsError, IssuerError
from cert_issuer.lib.issuer import SelfSignedCertificateIssuer
from cert_issuer.lib.logging_config import LOGGER
from cert_issuer.lib.models import Algorithm, GenerateRequest


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Issue a self-signed certificate (<CN>.pem and <CN>-key.pem)"
    )
    parser.add_argument(
        "--common-name",
        required=True,
        help="Host identity used as subject CN, DNS SAN and file name",
    )
    parser.add_argument(
        "--admin-email",
        required=True,
        help="Administrator email embedded in the certificate",
    )
    parser.add_argument(
        "--algorithm",
        choices=[a.value for a in Algorithm],
        default=Algorithm.RSA.value,
        help="Private key algorithm (default: RSA)",
    )
    parser.add_argument(
        "--key-size",
        type=int,
        default=2048,
        help="RSA modulus bits, or ECDSA curve size 224/256/384/521 (default: 2048)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Certificate directory (default: $CERT_ISSUER_BASE_PATH or ./certs)",
    )
    parser.add_argument(
        "--validity-days",
        type=int,
        default=None,
        help="Certificate validity in days (default: $CERT_ISSUER_VALIDITY_DAYS or 365)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Issue a certificate for the given common name.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = build_parser().parse_args(argv)

    try:
        config = IssuerConfig.from_env()
        if args.output_dir is not None:
            config.certificate_base_path = args.output_dir
        if args.validity_days is not None:
            config.certificate_validity = timedelta(days=args.validity_days)

        issuer = SelfSignedCertificateIssuer(config)
        request = GenerateRequest(
            common_name=args.common_name,
            admin_email=args.admin_email,
            algorithm=args.algorithm,
            key_size=args.key_size,
        )

        LOGGER.info("Issuing certificate for: %s", args.common_name)
        result = issuer.generate(request)

        metadata = extract_certificate_metadata(
            deserialize_certificate(result.cert_path.read_bytes())
        )
        LOGGER.info("Certificate created:")
        LOGGER.info("  Cert: %s", result.cert_path)
        LOGGER.info("  Key: %s", result.key_path)
        LOGGER.info("  Metadata: %s", json.dumps(metadata))
        return 0

    except ArtifactExistsError as e:
        LOGGER.error("Refusing to overwrite existing material: %s", e)
        return 1
    except IssuerError as e:
        LOGGER.error("Certificate issuance failed: %s", e)
        return 1
    except ValueError as e:
        LOGGER.error("Invalid configuration: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
