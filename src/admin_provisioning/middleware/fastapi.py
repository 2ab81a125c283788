"""HTTP middleware for the provisioning endpoint.

- CORSHeadersMiddleware: answers pre-flight requests and adds permissive
  CORS headers to every response
- CallerAuthMiddleware: optional Bearer JWT check on the caller
"""

import jwt
import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, PlainTextResponse

from ..config import ProvisioningSettings


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """
    CORS middleware for cross-origin admin tooling.

    Unlike starlette's CORSMiddleware, headers are sent on every response
    whether or not the request carries an Origin header, and OPTIONS is
    answered with "ok" before any configuration or body processing.

    Example usage:
        app.add_middleware(CORSHeadersMiddleware, settings=settings)
    """

    def __init__(self, app, settings: ProvisioningSettings):
        super().__init__(app)
        self.cors_headers = settings.cors_headers

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return PlainTextResponse("ok", headers=self.cors_headers)

        response = await call_next(request)
        response.headers.update(self.cors_headers)
        return response


class CallerAuthMiddleware(BaseHTTPMiddleware):
    """
    Verify the caller's Bearer JWT before provisioning.

    Disabled unless settings.verify_caller_jwt is set. Pre-flight requests
    are never checked. Without Supabase credentials the request goes through
    unchecked so the route can answer with the configuration error.

    The middleware adds to request.state:
    - request.state.caller: decoded JWT claims (None when disabled)
    """

    def __init__(self, app, settings: ProvisioningSettings, logger=None):
        """
        Initialize caller auth middleware.

        Args:
            app: FastAPI application
            settings: Provisioning settings
            logger: Optional structlog logger
        """
        super().__init__(app)
        self.settings = settings
        self.logger = logger or structlog.get_logger(__name__)

    async def dispatch(self, request: Request, call_next):
        request.state.caller = None

        if not self.settings.verify_caller_jwt or request.method == "OPTIONS":
            return await call_next(request)

        if not self.settings.is_configured:
            return await call_next(request)

        if not self.settings.caller_jwt_secret:
            self.logger.critical("Caller verification enabled without CALLER_JWT_SECRET")
            return self._error("Server configuration error: Missing caller JWT secret.", 500)

        token = self._extract_token(request.headers.get("Authorization"))
        if not token:
            return self._error("Missing or malformed Authorization header")

        try:
            request.state.caller = jwt.decode(
                token,
                self.settings.caller_jwt_secret,
                algorithms=[self.settings.caller_jwt_algorithm],
                options={"verify_aud": False},
            )
        except jwt.ExpiredSignatureError:
            return self._error("Token has expired")
        except jwt.InvalidTokenError as e:
            self.logger.warning("Rejected caller token", error=str(e))
            return self._error(f"Invalid token: {e}")

        return await call_next(request)

    def _extract_token(self, auth_header: str | None) -> str | None:
        """
        Extract JWT token from Authorization header.

        Args:
            auth_header: Authorization header value

        Returns:
            JWT token string or None if absent or not a Bearer token
        """
        if not auth_header:
            return None
        parts = auth_header.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            return None
        return parts[1]

    def _error(self, message: str, status_code: int = 401) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content={"error": message},
            headers={"WWW-Authenticate": "Bearer"} if status_code == 401 else None,
        )
