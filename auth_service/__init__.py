"""
auth_service package

Minimal authentication micro-service:

- FastAPI application factory (`main.py`)
- SQLAlchemy models, storage context and stores (`models.py`, `db.py`, `stores.py`)
- Password hashing (`auth.py`) and token issuance/verification (`tokens.py`)
- Request rule tables (`validation.py`) and error responder (`errors.py`)
"""
