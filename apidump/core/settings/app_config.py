"""Application logging configuration."""

from typing import Literal

from pydantic import BaseModel


class AppConfig(BaseModel, frozen=True):
    """Logging settings."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"]
    log_format: Literal["console", "json"]

    @property
    def is_json(self) -> bool:
        """Check if log output should be rendered as JSON."""
        return self.log_format == "json"
