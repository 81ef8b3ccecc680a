"""
Event logger utility for authentication events.
"""
from typing import Optional
import logging

from fastapi import Request

logger = logging.getLogger(__name__)


ALLOWED_EVENT_TYPES = {
    "register",
    "login_success",
    "login_failure",
    "refresh",
    "logout",
}


def client_ip(request: Request) -> Optional[str]:
    ip_address = None
    if request.client:
        ip_address = request.client.host

    # Check for X-Forwarded-For header (proxy/load balancer scenarios)
    if not ip_address and request.headers.get("x-forwarded-for"):
        # X-Forwarded-For can contain multiple IPs, take the first one
        ip_address = request.headers.get("x-forwarded-for").split(",")[0].strip()

    return ip_address


def log_auth_event(event_type: str, user_id: Optional[int], request: Request) -> None:
    """
    Write one line for an authentication event.

    Args:
        event_type: One of: register, login_success, login_failure,
                    refresh, logout
        user_id: Id of the user concerned, None when no user matched
        request: FastAPI Request object

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    logger.info(
        "AUTH %s user_id=%s ip=%s user_agent=%s",
        event_type, user_id, client_ip(request), request.headers.get("user-agent")
    )
