"""Security headers middleware.

Learn: every response gets the baseline headers below. On top of that,
anything that can carry a token is marked Cache-Control: no-store:
the /api/auth routes (their bodies contain the token) and any response
that sets a cookie (login, register, logout). A shared cache must never
hand one user's token to another.

HSTS is only sent over HTTPS; sending it on plain HTTP is meaningless.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

BASELINE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    # Share links put journal ids in the URL
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

NO_STORE_PREFIXES = ("/api/auth",)

HSTS = "max-age=31536000; includeSubDomains"


def _carries_credentials(request: Request, response: Response) -> bool:
    return (
        request.url.path.startswith(NO_STORE_PREFIXES)
        or "set-cookie" in response.headers
    )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Baseline headers, plus no-store on anything token-bearing."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)
        response.headers.update(BASELINE_HEADERS)
        if _carries_credentials(request, response):
            response.headers["Cache-Control"] = "no-store"
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = HSTS
        return response
