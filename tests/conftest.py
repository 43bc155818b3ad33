import base64

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa


HEX_SEED = "7e0535bce1e728630e30ab89cd4c3a9ae953fa7585f52a736ae73b6c71eca5cc"


@pytest.fixture(scope="session")
def private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def private_key_path(tmp_path, private_key):
    path = tmp_path / "student_private.pem"
    path.write_bytes(
        private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    return path


@pytest.fixture
def public_key_path(tmp_path, private_key):
    path = tmp_path / "student_public.pem"
    path.write_bytes(
        private_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    )
    return path


@pytest.fixture
def encrypt(private_key):
    """Encrypt plaintext the way the seed issuer does: RSA/OAEP SHA-256, base64."""

    def _encrypt(plaintext: str) -> str:
        ciphertext = private_key.public_key().encrypt(
            plaintext.encode("utf-8"),
            padding.OAEP(
                mgf=padding.MGF1(algorithm=hashes.SHA256()),
                algorithm=hashes.SHA256(),
                label=None,
            ),
        )
        return base64.b64encode(ciphertext).decode("ascii")

    return _encrypt


@pytest.fixture
def hex_seed():
    return HEX_SEED
