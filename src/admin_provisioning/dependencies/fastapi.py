"""FastAPI dependencies for the provisioning endpoint.

The settings and the provisioner are built once by the application
factory and stored on app.state; these dependencies hand them to routes.
"""

from fastapi import Request

from ..config import ProvisioningSettings
from ..provisioner import UserProvisioner


def get_settings(request: Request) -> ProvisioningSettings:
    """
    Get the application's provisioning settings.

    Usage:
        @router.post("/")
        async def endpoint(settings: Annotated[ProvisioningSettings, Depends(get_settings)]):
            ...
    """
    return request.app.state.settings


def get_provisioner(request: Request) -> UserProvisioner:
    """
    Get the application's user provisioner.

    Usage:
        @router.post("/")
        async def endpoint(provisioner: Annotated[UserProvisioner, Depends(get_provisioner)]):
            result = await provisioner.provision(payload)
    """
    return request.app.state.provisioner
