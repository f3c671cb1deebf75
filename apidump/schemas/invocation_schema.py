"""Schemas for a single fetch-and-save invocation."""

from pathlib import Path

from pydantic import BaseModel, Field


class InvocationRequest(BaseModel, frozen=True):
    """Parsed ``tofile`` / ``_tofile`` arguments."""

    startup_reference: Path
    document_path: str
    output_path: Path
    base_address: str | None = None
    relayed: bool = False

    def to_argv(self) -> list[str]:
        """Rebuild the argument vector that follows the subcommand name."""
        argv = [str(self.startup_reference), self.document_path, str(self.output_path)]
        if self.base_address is not None:
            argv += ["--baseaddress", self.base_address]
        return argv


class RuntimeBinding(BaseModel, frozen=True):
    """Location of the files describing the target's execution context."""

    dependency_manifest: Path
    runtime_config: Path

    @classmethod
    def from_startup_reference(
        cls,
        startup_reference: Path,
        manifest_suffix: str,
        config_suffix: str,
    ) -> "RuntimeBinding":
        """Derive both paths by replacing the reference's final suffix."""
        stem = startup_reference.with_suffix("") if startup_reference.suffix else startup_reference
        return cls(
            dependency_manifest=stem.with_name(stem.name + manifest_suffix),
            runtime_config=stem.with_name(stem.name + config_suffix),
        )


class DependencyManifest(BaseModel, frozen=True):
    """Contents of the ``*.deps.json`` file."""

    paths: list[str] = Field(default_factory=list)

    def resolve(self, base_dir: Path) -> list[Path]:
        """Resolve relative import roots against the manifest's directory."""
        return [(base_dir / p).resolve() for p in self.paths]


class RuntimeConfig(BaseModel, frozen=True):
    """Contents of the ``*.runtimeconfig.json`` file."""

    interpreter: str | None = None
    environment: dict[str, str] = Field(default_factory=dict)

    def resolve_interpreter(self, base_dir: Path) -> Path | None:
        """Resolve the interpreter against the config's directory, if set."""
        if self.interpreter is None:
            return None
        path = Path(self.interpreter)
        # A bare name such as "python3" is looked up on PATH.
        if path.is_absolute() or len(path.parts) == 1:
            return path
        return base_dir / path


class CapturedResponse(BaseModel, frozen=True):
    """Response returned by the in-memory host."""

    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""

    @property
    def is_success(self) -> bool:
        """Check if the status code is 2xx."""
        return 200 <= self.status_code < 300
