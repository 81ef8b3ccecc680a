from passlib.context import CryptContext


class CredentialVerifier:
    """Salted one-way password hashing and verification."""

    def __init__(self, rounds: int = 29000):
        # Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
        self._context = CryptContext(
            schemes=["pbkdf2_sha256"],
            deprecated="auto",
            pbkdf2_sha256__default_rounds=rounds,
        )

    def hash(self, plaintext: str) -> str:
        return self._context.hash(plaintext)

    def compare(self, plaintext: str, digest: str) -> bool:
        """
        Check `plaintext` against a stored digest.

        A malformed or unrecognised digest is a mismatch, never an error.
        passlib compares the derived keys in constant time.
        """
        if not digest:
            return False
        try:
            return self._context.verify(plaintext, digest)
        except (ValueError, TypeError):
            return False
