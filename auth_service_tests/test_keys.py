"""Tests for signing key generation."""
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from auth_service.config import Settings
from auth_service.keys import generate_key_pair, main
from auth_service.tokens import TokenIssuer


def test_generate_key_pair_writes_matching_pem_files(tmp_path):
    private_path, public_path = generate_key_pair(tmp_path / "certs", key_size=2048)

    assert private_path.name == "privateKey.pem"
    assert public_path.name == "publicKey.pem"

    private_key = serialization.load_pem_private_key(private_path.read_bytes(), password=None)
    public_key = serialization.load_pem_public_key(public_path.read_bytes())
    assert isinstance(private_key, RSAPrivateKey)
    assert isinstance(public_key, RSAPublicKey)
    assert private_key.key_size == 2048
    assert private_key.public_key().public_numbers() == public_key.public_numbers()


def test_generated_keys_sign_and_verify_access_tokens(tmp_path):
    private_path, public_path = generate_key_pair(tmp_path, key_size=2048)
    issuer = TokenIssuer(Settings(PRIVATE_KEY_PATH=str(private_path), PUBLIC_KEY_PATH=str(public_path)))

    token = issuer.issue_access_token({"sub": "1", "role": "customer"})

    assert issuer.verify_access_token(token)["sub"] == "1"


def test_generate_key_pair_refuses_to_overwrite(tmp_path):
    private_path, _ = generate_key_pair(tmp_path, key_size=2048)
    original = private_path.read_bytes()

    with pytest.raises(FileExistsError):
        generate_key_pair(tmp_path, key_size=2048)
    assert private_path.read_bytes() == original

    generate_key_pair(tmp_path, key_size=2048, overwrite=True)
    assert private_path.read_bytes() != original


def test_main_writes_keys_and_exits_nonzero_when_present(tmp_path):
    out = tmp_path / "certs"

    assert main(["--dir", str(out), "--bits", "2048"]) == 0
    assert (out / "privateKey.pem").exists()
    assert (out / "publicKey.pem").exists()

    assert main(["--dir", str(out), "--bits", "2048"]) == 1
    assert main(["--dir", str(out), "--bits", "2048", "--force"]) == 0
