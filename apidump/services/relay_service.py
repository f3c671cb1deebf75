"""Relay launcher: re-run the tool inside the target's execution context."""

import os
import subprocess
import sys
from pathlib import Path
from typing import TypeVar

import structlog
from pydantic import BaseModel, ValidationError

import apidump
from apidump.core.exceptions import RelayStartFailure
from apidump.core.settings import RelayConfig
from apidump.schemas import (
    DependencyManifest,
    InvocationRequest,
    RuntimeBinding,
    RuntimeConfig,
)

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)

PUBLIC_COMMAND = "tofile"

# Directory that holds the apidump package, appended after the target's roots.
TOOL_ROOT = Path(apidump.__file__).resolve().parent.parent


class RelayCommand(BaseModel, frozen=True):
    """Fully resolved child invocation."""

    argv: list[str]
    env: dict[str, str]


class RelayLauncher:
    """Runs the private extraction command under the target's interpreter."""

    def __init__(self, config: RelayConfig) -> None:
        self.config = config

    def resolve_binding(self, startup_reference: Path) -> RuntimeBinding:
        """Derive the dependency manifest and runtime config paths."""
        return RuntimeBinding.from_startup_reference(
            startup_reference,
            manifest_suffix=self.config.dependency_manifest_suffix,
            config_suffix=self.config.runtime_config_suffix,
        )

    def build_command(
        self, request: InvocationRequest, binding: RuntimeBinding
    ) -> RelayCommand:
        """Read the binding files and assemble the child argv and environment."""
        manifest = _read_binding_file(binding.dependency_manifest, DependencyManifest)
        runtime = _read_binding_file(binding.runtime_config, RuntimeConfig)

        interpreter = runtime.resolve_interpreter(binding.runtime_config.parent)
        import_roots = manifest.resolve(binding.dependency_manifest.parent)

        env = dict(os.environ)
        env.update(runtime.environment)
        # Manifest roots, then PYTHONPATH from the runtime config (or the
        # caller), then the tool itself.
        existing = [p for p in env.get("PYTHONPATH", "").split(os.pathsep) if p]
        env["PYTHONPATH"] = os.pathsep.join(
            [str(p) for p in import_roots] + existing + [str(TOOL_ROOT)]
        )

        argv = [
            str(interpreter) if interpreter is not None else sys.executable,
            "-m",
            "apidump",
            self.config.private_name(PUBLIC_COMMAND),
            *request.to_argv(),
        ]
        return RelayCommand(argv=argv, env=env)

    def run(self, request: InvocationRequest) -> int:
        """Spawn the relayed child, wait for it and return its exit code."""
        binding = self.resolve_binding(request.startup_reference)
        command = self.build_command(request, binding)

        logger.debug(
            "Relaying to target context",
            interpreter=command.argv[0],
            dependency_manifest=str(binding.dependency_manifest),
            runtime_config=str(binding.runtime_config),
        )
        try:
            completed = subprocess.run(command.argv, env=command.env, check=False)
        except OSError as e:
            raise RelayStartFailure(
                f"Cannot execute interpreter {command.argv[0]}"
            ) from e

        logger.debug("Relayed process exited", exit_code=completed.returncode)
        return completed.returncode


def _read_binding_file(path: Path, model: type[ModelT]) -> ModelT:
    """Load and validate one of the runtime binding files."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RelayStartFailure(f"Runtime binding file not readable: {path}") from e
    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        raise RelayStartFailure(f"Runtime binding file is invalid: {path}") from e
