"""Domain-specific configuration models."""

from apidump.core.settings.app_config import AppConfig
from apidump.core.settings.dispatch_config import DispatchConfig
from apidump.core.settings.relay_config import RelayConfig

__all__ = [
    "AppConfig",
    "DispatchConfig",
    "RelayConfig",
]
