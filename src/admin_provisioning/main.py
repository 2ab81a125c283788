"""ASGI entry point.

Serve with any ASGI server, e.g. `uvicorn admin_provisioning.main:app`.
"""

from .app import create_app
from .config import ProvisioningSettings
from .logging_config import configure_logging

settings = ProvisioningSettings()
configure_logging(json=settings.log_json)

app = create_app(settings)
