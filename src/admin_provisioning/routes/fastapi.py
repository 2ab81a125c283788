"""Provisioning route.

POST body: {"email", "password", "full_name", "username", "role"}

Responses:
- 201 {"message", "userId"}
- 400/409/500 (or the provider's status) {"error", "details"?}
"""

import json
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request
from starlette.responses import JSONResponse

from ..config import ProvisioningSettings
from ..dependencies import get_provisioner, get_settings
from ..errors import ConfigurationError, InternalError, ValidationError
from ..models import ProvisionResult
from ..provisioner import UserProvisioner

CONFIGURATION_ERROR_MESSAGE = "Server configuration error: Missing Supabase credentials."

logger = structlog.get_logger(__name__)


def _respond(result: ProvisionResult) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.to_response_body())


async def create_user_admin(
    request: Request,
    settings: Annotated[ProvisioningSettings, Depends(get_settings)],
    provisioner: Annotated[UserProvisioner, Depends(get_provisioner)],
) -> JSONResponse:
    """
    Provision a user from the admin console.

    Configuration is checked before the body is read, so an unconfigured
    deployment rejects every request the same way.
    """
    if not settings.is_configured:
        logger.error(
            "Rejecting request: missing Supabase credentials",
            missing=settings.missing_credentials(),
        )
        return _respond(ConfigurationError(CONFIGURATION_ERROR_MESSAGE).to_result())

    try:
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Invalid JSON payload", error=str(e))
            return _respond(ValidationError(f"Invalid JSON payload: {e}").to_result())

        result = await provisioner.provision(payload)

    except Exception as e:
        logger.exception("Unexpected error handling provisioning request", error=str(e))
        result = InternalError(
            f"Internal server error: {e}",
            details={"type": type(e).__name__, "message": str(e)},
        ).to_result()

    return _respond(result)


def create_router(settings: ProvisioningSettings) -> APIRouter:
    """
    Build the provisioning router.

    The endpoint is served on settings.route_path and on "/".

    Args:
        settings: Provisioning settings

    Returns:
        APIRouter with the POST endpoint registered
    """
    router = APIRouter(tags=["provisioning"])

    paths = [settings.route_path]
    if settings.route_path != "/":
        paths.append("/")

    for path in paths:
        router.add_api_route(
            path,
            create_user_admin,
            methods=["POST"],
            status_code=201,
            response_class=JSONResponse,
            name=f"create_user_admin:{path}",
        )

    return router
