"""Static table of known service types.

The help formatter lists these regardless of what is registered.
Service actions read the probe and argument details from here.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal

AddShape = Literal["url_key", "general", "tailscale"]
AuthScheme = Literal["api-key", "plex-token", "bearer", "none"]

TAILSCALE_API_URL = "https://api.tailscale.com"


@dataclass(frozen=True)
class ServiceTypeSpec:
    """Metadata for one service type.

    name doubles as the namespace segment in
    "service <name> <action>" and as the instance id prefix
    "<name>-<n>".
    """

    name: str
    display_name: str
    description: str
    health_path: str
    auth_scheme: AuthScheme = "api-key"
    add_shape: AddShape = "url_key"

    @property
    def prefix(self) -> str:
        """Instance id prefix, e.g. 'radarr-'."""
        return f"{self.name}-"

    def accepts_add_status(self, status: str) -> bool:
        """Whether a probe status allows the add to proceed."""
        if self.add_shape == "tailscale":
            return status not in {"error", "offline"}
        return status == "online"


SERVICE_TYPES: MappingProxyType[str, ServiceTypeSpec] = MappingProxyType(
    {
        "autobrr": ServiceTypeSpec(
            name="autobrr",
            display_name="Autobrr",
            description="Autobrr service management",
            health_path="/api/healthz/liveness",
        ),
        "omegabrr": ServiceTypeSpec(
            name="omegabrr",
            display_name="Omegabrr",
            description="Omegabrr service management",
            health_path="/api/healthz/liveness",
        ),
        "radarr": ServiceTypeSpec(
            name="radarr",
            display_name="Radarr",
            description="Radarr service management",
            health_path="/api/v3/system/status",
        ),
        "sonarr": ServiceTypeSpec(
            name="sonarr",
            display_name="Sonarr",
            description="Sonarr service management",
            health_path="/api/v3/system/status",
        ),
        "prowlarr": ServiceTypeSpec(
            name="prowlarr",
            display_name="Prowlarr",
            description="Prowlarr service management",
            health_path="/api/v1/system/status",
        ),
        "plex": ServiceTypeSpec(
            name="plex",
            display_name="Plex",
            description="Plex service management",
            health_path="/identity",
            auth_scheme="plex-token",
        ),
        "overseerr": ServiceTypeSpec(
            name="overseerr",
            display_name="Overseerr",
            description="Overseerr service management",
            health_path="/api/v1/status",
        ),
        "maintainerr": ServiceTypeSpec(
            name="maintainerr",
            display_name="Maintainerr",
            description="Maintainerr service management",
            health_path="/api/app/status",
            auth_scheme="none",
        ),
        "tailscale": ServiceTypeSpec(
            name="tailscale",
            display_name="Tailscale",
            description="Tailscale service management",
            health_path="/api/v2/tailnet/-/devices",
            auth_scheme="bearer",
            add_shape="tailscale",
        ),
        "general": ServiceTypeSpec(
            name="general",
            display_name="General",
            description="General HTTP service management",
            health_path="",
            add_shape="general",
        ),
    },
)


def service_type_for_instance(instance_id: str) -> ServiceTypeSpec | None:
    """Return the type whose prefix the instance id carries."""
    for spec in SERVICE_TYPES.values():
        if instance_id.startswith(spec.prefix):
            return spec
    return None
