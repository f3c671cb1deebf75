"""Relay (process relaunch) configuration."""

from pydantic import BaseModel


class RelayConfig(BaseModel, frozen=True):
    """Runtime binding file suffixes and the private subcommand marker."""

    dependency_manifest_suffix: str
    runtime_config_suffix: str
    marker: str

    def private_name(self, command: str) -> str:
        """Return the relay-only name of a public subcommand."""
        return f"{self.marker}{command}"
