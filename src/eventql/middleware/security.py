"""Response hardening for the API.

Learn: Every response gets the same fixed header set. Responses from the
GraphQL endpoint also carry `Cache-Control: no-store`, because they hold
freshly issued tokens and per-user data that no proxy or browser cache
should keep. HSTS is only sent when the request itself came over HTTPS.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}

HSTS = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Apply SECURITY_HEADERS, plus no-store on the GraphQL path."""

    def __init__(self, app, graphql_path: str = "/graphql"):
        super().__init__(app)
        self.graphql_path = graphql_path

    async def dispatch(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)

        if request.url.path.startswith(self.graphql_path):
            response.headers["Cache-Control"] = "no-store"
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = HSTS
        return response
