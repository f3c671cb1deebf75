"""Runtime discovery of the in-memory transport capability."""

import importlib
from types import ModuleType
from typing import Any, Protocol

import structlog

from apidump.core.exceptions import LoadFailure

logger = structlog.get_logger()

CAPABILITY_PACKAGE = "apidump.capabilities"
SUPPORTED_CONTRACT_VERSION = 1


class InMemoryClient(Protocol):
    def get(self, path: str) -> Any: ...


class InMemoryServer(Protocol):
    def create_client(self, base_address: str) -> InMemoryClient: ...


def load_capability(name: str) -> ModuleType:
    """Import ``apidump.capabilities.<name>`` and check its contract version."""
    qualified = f"{CAPABILITY_PACKAGE}.{name}"
    try:
        module = importlib.import_module(qualified)
    except ImportError as e:
        raise LoadFailure(f"Capability module cannot be loaded: {qualified}") from e

    version = getattr(module, "CONTRACT_VERSION", None)
    if version != SUPPORTED_CONTRACT_VERSION:
        raise LoadFailure(
            f"Capability module {qualified} implements contract {version}, "
            f"expected {SUPPORTED_CONTRACT_VERSION}"
        )
    if not callable(getattr(module, "InMemoryServer", None)):
        raise LoadFailure(f"Capability module {qualified} has no InMemoryServer")

    logger.debug("Capability loaded", module=qualified, contract=version)
    return module


def create_server(capability: ModuleType, host: Any) -> InMemoryServer:
    """Instantiate the capability's in-memory server for a host."""
    server: InMemoryServer = capability.InMemoryServer(host)
    return server
