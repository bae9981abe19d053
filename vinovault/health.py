"""Liveness probe fast path.

Probes are answered by an ASGI middleware that wraps the whole app, so they
never reach routing, request logging or the file system.
"""

from typing import Optional

from starlette.datastructures import Headers
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

HEALTH_PATHS = frozenset({"/_health", "/ping"})
DEFAULT_USER_AGENT_TOKEN = "GoogleHC"


def is_health_probe(path: str, user_agent: Optional[str], token: str = DEFAULT_USER_AGENT_TOKEN) -> bool:
    """Return True for a reserved probe path or an orchestrator user-agent."""
    if path in HEALTH_PATHS:
        return True
    return bool(token and user_agent and token in user_agent)


def health_response() -> Response:
    return Response(
        content=b"OK",
        status_code=200,
        headers={"Content-Type": "text/plain", "Connection": "close"},
    )


class HealthProbeMiddleware:
    """Answer probes with ``200 OK`` before the wrapped app sees them."""

    def __init__(self, app: ASGIApp, user_agent_token: str = DEFAULT_USER_AGENT_TOKEN) -> None:
        self.app = app
        self.user_agent_token = user_agent_token

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            user_agent = Headers(scope=scope).get("user-agent")
            if is_health_probe(scope["path"], user_agent, self.user_agent_token):
                await health_response()(scope, receive, send)
                return
        await self.app(scope, receive, send)
