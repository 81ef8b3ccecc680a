import base64
import binascii
import re
from http.cookies import Morsel, SimpleCookie
from typing import Dict, Optional

USER_DATA = {
    "firstName": "Lokesh",
    "lastName": "Jha",
    "email": "lokesh@mern.space",
    "password": "password",
}

_BASE64URL = re.compile(r"^[A-Za-z0-9_-]+$")


def is_jwt(token: Optional[str]) -> bool:
    if token is None:
        return False

    parts = token.split(".")
    if len(parts) != 3:
        return False

    for part in parts:
        if not _BASE64URL.match(part):
            return False
        try:
            base64.urlsafe_b64decode(part + "=" * (-len(part) % 4))
        except (binascii.Error, ValueError):
            return False
    return True


def get_cookies(response) -> Dict[str, Morsel]:
    cookies: Dict[str, Morsel] = {}
    for header in response.headers.get_list("set-cookie"):
        jar = SimpleCookie()
        jar.load(header)
        cookies.update(jar)
    return cookies


def cookie_header(**cookies: str) -> Dict[str, str]:
    return {"Cookie": "; ".join(f"{name}={value}" for name, value in cookies.items())}


def register_user(client, **overrides):
    return client.post("/auth/register", json={**USER_DATA, **overrides})


def tokens_from(response) -> Dict[str, str]:
    cookies = get_cookies(response)
    return {name: morsel.value for name, morsel in cookies.items()}
