import pytest

from auth_service.auth import CredentialVerifier


@pytest.fixture
def verifier():
    return CredentialVerifier(rounds=1000)


def test_hash_never_stores_plaintext(verifier):
    digest = verifier.hash("password")
    assert digest != "password"
    assert "password" not in digest
    assert digest.startswith("$pbkdf2-sha256$")


def test_hash_is_salted(verifier):
    assert verifier.hash("password") != verifier.hash("password")


def test_compare_accepts_original_plaintext(verifier):
    digest = verifier.hash("correct horse")
    assert verifier.compare("correct horse", digest) is True


@pytest.mark.parametrize("other", ["correct hors", "Correct horse", "", "correct horse "])
def test_compare_rejects_anything_else(verifier, other):
    digest = verifier.hash("correct horse")
    assert verifier.compare(other, digest) is False


@pytest.mark.parametrize("digest", ["", "not-a-hash", "$pbkdf2-sha256$broken", None])
def test_compare_malformed_digest_is_false(verifier, digest):
    """A corrupt stored hash is a mismatch, not an exception."""
    assert verifier.compare("password", digest) is False


def test_rounds_are_configurable():
    digest = CredentialVerifier(rounds=1234).hash("password")
    assert digest.startswith("$pbkdf2-sha256$1234$")
