"""
Entrypoint for running the auth service in development.
In production run it behind a process manager: uvicorn --factory auth_service.main:create_app
"""
import os

import uvicorn

from .main import create_app

app = create_app()

if __name__ == "__main__":
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run(app, host=host, port=port)
