"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.catalog.app.command import create_or_update_event_use_case
from src.service.catalog.app.query import get_event_use_case, list_events_use_case
from src.service.catalog.driving_adapter.http_controller.auth import role_auth


WIRE_MODULES: list[ModuleType] = [
    create_or_update_event_use_case,
    get_event_use_case,
    list_events_use_case,
    role_auth,
]
