"""In-memory dispatch configuration."""

from typing import Literal

from pydantic import BaseModel


class DispatchConfig(BaseModel, frozen=True):
    """In-memory host and request settings."""

    default_base_address: str
    interface: Literal["auto", "asgi", "wsgi"]
    app_attribute: str | None
    capability_module: str
