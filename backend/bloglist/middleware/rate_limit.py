"""
Bloglist Backend - Login Rate Limiting Middleware
==================================================

What:  Per-IP sliding window limit on failed POST /api/login attempts.
How:   Keeps the timestamps of recent failed logins (401 responses) per
       client IP in memory; once the window holds `max_attempts`, further
       attempts get 429. Successful logins are not counted.
Who:   Installed by create_app() with values from LOGIN_RATE_LIMIT_ATTEMPTS
       and LOGIN_RATE_LIMIT_WINDOW.

Algorithm: Sliding Window Counter
    1. Drop timestamps older than the window
    2. If the remaining count >= limit, reject with 429 and Retry-After
    3. Otherwise pass the request on
    4. Record the attempt only if the response is 401

    Every other path passes through untouched.

Limitations:
    State is per process. Several workers each keep their own window.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)


class LoginRateLimitMiddleware(BaseHTTPMiddleware):
    """In-memory sliding window limiter on failed /api/login attempts."""

    LIMITED_PATH = "/api/login"

    def __init__(self, app, max_attempts: int = 20, window_seconds: int = 900):
        super().__init__(app)
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._attempts: Dict[str, List[float]] = defaultdict(list)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method != "POST" or request.url.path != self.LIMITED_PATH:
            return await call_next(request)

        client_ip = (
            getattr(request.client, "host", "unknown")
            if request.client
            else "unknown"
        )

        now = time.time()
        window_start = now - self.window_seconds

        self._attempts[client_ip] = [
            ts for ts in self._attempts[client_ip] if ts > window_start
        ]

        if len(self._attempts[client_ip]) >= self.max_attempts:
            oldest = self._attempts[client_ip][0]
            retry_after = int(oldest + self.window_seconds - now) + 1

            logger.warning(
                "Login rate limit exceeded for IP %s: %d failed attempts in %ds window",
                client_ip,
                len(self._attempts[client_ip]),
                self.window_seconds,
            )

            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": f"Too many failed login attempts. Please wait {retry_after} seconds before retrying.",
                    "details": {"retry_after": retry_after},
                },
                headers={"Retry-After": str(retry_after)},
            )

        response = await call_next(request)

        if response.status_code == 401:
            self._attempts[client_ip].append(now)

        if len(self._attempts) > 1000:
            self._cleanup_inactive_ips(window_start)

        return response

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        """Forget IPs with no attempt inside the current window."""
        inactive_ips = [
            ip for ip, timestamps in self._attempts.items()
            if not timestamps or max(timestamps) < window_start
        ]
        for ip in inactive_ips:
            del self._attempts[ip]

        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
