"""
Per-app collaborators of the page services.

``init_services(app)`` builds them from the app config and stores them on
``app.extensions``; application functions accept explicit collaborators
and fall back to ``current_services()`` inside an app context.
"""
from dataclasses import dataclass
from typing import Any

from flask import current_app

from .config import HubSettings
from .integrations.assets import LocalAssetStore
from .integrations.groups import SqlGroupDirectory
from .integrations.profiles import build_profile_directory

EXTENSION_KEY = "landing_hub"


@dataclass
class HubServices:
    settings: HubSettings
    profiles: Any
    groups: Any
    assets: Any


def init_services(app, **overrides) -> HubServices:
    settings = HubSettings.from_config(app.config)
    services = HubServices(
        settings=settings,
        profiles=overrides.get("profiles") or build_profile_directory(settings),
        groups=overrides.get("groups") or SqlGroupDirectory(),
        assets=overrides.get("assets") or LocalAssetStore(
            settings.upload_folder, settings.public_base_url
        ),
    )
    app.extensions[EXTENSION_KEY] = services
    return services


def current_services() -> HubServices:
    return current_app.extensions[EXTENSION_KEY]
