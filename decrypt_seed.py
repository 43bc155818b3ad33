import base64
import binascii
import logging
from pathlib import Path
from typing import Iterable, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization, hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from config import settings
from errors import CryptoError
from seed_store import SeedStore
from totp_utils import normalize_hex_seed, provisioning_uri

logger = logging.getLogger(__name__)


def find_private_key_path(candidates: Iterable[Union[str, Path]]) -> Path:
    """
    Return the first candidate that exists, or the first candidate so the
    caller gets a meaningful "not found" error for it.
    """
    paths = [Path(p) for p in candidates]
    if not paths:
        raise CryptoError(details="No private key locations configured")

    for path in paths:
        if path.exists():
            return path
    return paths[0]


def load_private_key(path: Union[str, Path]) -> rsa.RSAPrivateKey:
    """
    Load an unencrypted RSA private key (PKCS8 PEM)
    """
    path = Path(path)
    if not path.exists():
        raise CryptoError(details=f"Private key not found at {path}")

    try:
        private_key = serialization.load_pem_private_key(
            path.read_bytes(),
            password=None,
        )
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise CryptoError(details=f"Could not load private key from {path}: {e}") from e

    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise CryptoError(details=f"Key at {path} is not an RSA private key")

    return private_key


def decrypt_seed(encrypted_seed_b64: str, private_key: rsa.RSAPrivateKey) -> str:
    """
    Decrypt base64-encoded encrypted seed using RSA/OAEP (SHA-256)
    Returns 64-character lowercase hex string.

    Raises:
        CryptoError: malformed base64, failed decryption, non UTF-8 plaintext
        ValidationError: plaintext is not a 64-character hex seed
    """
    # 1. Base64 decode the encrypted seed string
    try:
        ciphertext = base64.b64decode(encrypted_seed_b64.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise CryptoError(details=f"Invalid base64 ciphertext: {e}") from e

    # 2. RSA/OAEP decrypt with SHA-256
    try:
        plaintext_bytes = private_key.decrypt(
            ciphertext,
            padding.OAEP(
                mgf=padding.MGF1(algorithm=hashes.SHA256()),
                algorithm=hashes.SHA256(),
                label=None,
            ),
        )
    except ValueError as e:
        raise CryptoError(details=f"RSA decryption failed: {e}") from e

    # 3. Decode bytes to UTF-8 string
    try:
        plaintext = plaintext_bytes.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CryptoError(details=f"Plaintext is not UTF-8: {e}") from e

    # 4. Validate and canonicalize
    return normalize_hex_seed(plaintext)


def provision_seed(
    encrypted_seed_b64: str,
    private_key: rsa.RSAPrivateKey,
    store: SeedStore,
) -> str:
    """
    Decrypt, validate and persist. Nothing is written unless every step succeeds.
    """
    hex_seed = decrypt_seed(encrypted_seed_b64, private_key)
    store.save(hex_seed)
    return hex_seed


def main():
    logging.basicConfig(level=settings.LOG_LEVEL)

    # Read encrypted seed
    encrypted_seed_b64 = Path(settings.ENCRYPTED_SEED_PATH).read_text().strip()

    private_key = load_private_key(find_private_key_path(settings.PRIVATE_KEY_PATHS))
    store = SeedStore(settings.SEED_FILE_PATH)
    hex_seed = provision_seed(encrypted_seed_b64, private_key, store)

    print(f"Seed decrypted and written to {store.path}")
    # scan this into an authenticator app to enrol the same seed
    print(
        provisioning_uri(
            hex_seed,
            settings.TOTP_ACCOUNT_NAME,
            issuer_name=settings.APP_NAME,
            period_seconds=settings.TOTP_PERIOD,
            digits=settings.TOTP_DIGITS,
        )
    )


if __name__ == "__main__":
    main()
