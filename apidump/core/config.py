"""Tool configuration using Pydantic Settings V2."""

from functools import cached_property
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from apidump.core.settings import AppConfig, DispatchConfig, RelayConfig


class Settings(BaseSettings):
    """Tool settings loaded from ``APIDUMP_*`` environment variables.

    The relayed child inherits the parent's environment, so both process
    generations resolve the same values.
    """

    model_config = SettingsConfigDict(
        env_prefix="APIDUMP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum log level written to stderr",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log renderer",
    )

    # Relay
    dependency_manifest_suffix: str = Field(
        default=".deps.json",
        description="Suffix of the dependency manifest next to the startup module",
    )
    runtime_config_suffix: str = Field(
        default=".runtimeconfig.json",
        description="Suffix of the runtime configuration next to the startup module",
    )
    relay_marker: str = Field(
        default="_",
        min_length=1,
        description="Prefix marking a subcommand as relay-only",
    )

    # Dispatch
    default_base_address: str = Field(
        default="http://localhost",
        description="Base address used when --baseaddress is not given",
    )
    interface: Literal["auto", "asgi", "wsgi"] = Field(
        default="auto",
        description="Application interface of the target",
    )
    app_attribute: str | None = Field(
        default=None,
        description="Attribute of the startup module holding the app or factory",
    )
    capability_module: str = Field(
        default="inmemory_server",
        description="Name of the in-memory transport module under apidump.capabilities",
    )

    # --- Domain properties ---

    @cached_property
    def app(self) -> AppConfig:
        """Logging configuration."""
        return AppConfig(log_level=self.log_level, log_format=self.log_format)

    @cached_property
    def relay(self) -> RelayConfig:
        """Relay configuration."""
        return RelayConfig(
            dependency_manifest_suffix=self.dependency_manifest_suffix,
            runtime_config_suffix=self.runtime_config_suffix,
            marker=self.relay_marker,
        )

    @cached_property
    def dispatch(self) -> DispatchConfig:
        """In-memory dispatch configuration."""
        return DispatchConfig(
            default_base_address=self.default_base_address,
            interface=self.interface,
            app_attribute=self.app_attribute,
            capability_module=self.capability_module,
        )


# Global settings instance
settings = Settings()
