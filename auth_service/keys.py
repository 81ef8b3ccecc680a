"""
Generates the RSA key pair used to sign access tokens.

Usage:
    auth-service-keys [--dir certs] [--bits 4096] [--force]
    python -m auth_service.keys
"""
from pathlib import Path
from typing import Optional, Sequence, Tuple
import argparse
import logging
import sys

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

logger = logging.getLogger(__name__)

PRIVATE_KEY_FILE = "privateKey.pem"
PUBLIC_KEY_FILE = "publicKey.pem"


def generate_key_pair(directory, key_size: int = 4096, overwrite: bool = False) -> Tuple[Path, Path]:
    """
    Write a fresh PEM key pair into `directory`, creating it if needed.

    Returns:
        (private_key_path, public_key_path)

    Raises:
        FileExistsError: a key file already exists and `overwrite` is False
    """
    directory = Path(directory)
    private_path = directory / PRIVATE_KEY_FILE
    public_path = directory / PUBLIC_KEY_FILE

    if not overwrite:
        for path in (private_path, public_path):
            if path.exists():
                raise FileExistsError(f"{path} already exists")

    directory.mkdir(parents=True, exist_ok=True)

    private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    private_path.write_bytes(
        private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    private_path.chmod(0o600)
    public_path.write_bytes(
        private_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    )
    logger.info("Keys generated and saved to %s", directory)
    return private_path, public_path


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Generate the access token signing key pair")
    parser.add_argument("--dir", default="certs", help="output directory (default: certs)")
    parser.add_argument("--bits", type=int, default=4096, help="RSA modulus size (default: 4096)")
    parser.add_argument("--force", action="store_true", help="overwrite existing key files")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        generate_key_pair(args.dir, key_size=args.bits, overwrite=args.force)
    except FileExistsError as exc:
        logger.error("%s (use --force to replace it)", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
