"""
auth_service tests

Endpoint tests drive the FastAPI app through TestClient against a
throwaway SQLite file and a freshly generated RSA key pair (see conftest.py).
Unit tests cover the credential verifier, token issuer, stores, rule tables
and event logger directly.
"""
