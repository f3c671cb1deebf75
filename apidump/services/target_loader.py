"""Load the target's startup module and build an in-memory host from it."""

import importlib.util
import inspect
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Literal

import structlog

from apidump.core.exceptions import DispatchFailure, LoadFailure
from apidump.core.settings import DispatchConfig

logger = structlog.get_logger()

APP_ATTRIBUTES = ("app", "application")
FACTORY_ATTRIBUTES = ("create_app",)


class InMemoryHost:
    """Application object plus the interface it speaks (ASGI or WSGI)."""

    def __init__(self, app: Any, interface: Literal["asgi", "wsgi"]) -> None:
        self.app = app
        self.interface = interface

    def __repr__(self) -> str:
        return f"InMemoryHost(app={type(self.app).__name__}, interface={self.interface!r})"


def load_target(startup_reference: Path) -> ModuleType:
    """Import the startup module from a file path relative to the cwd.

    A module inside a package (its directory has ``__init__.py``) is imported
    by its dotted name from above the outermost package, so relative imports
    work. A standalone module is loaded from its file, with its directory
    first on ``sys.path`` so sibling modules import as they would when it
    runs on its own.
    """
    path = (Path.cwd() / startup_reference).resolve()
    if not path.is_file():
        raise LoadFailure(f"Startup module not found: {path}")

    root, dotted = package_location(path)
    if dotted is not None:
        module = _import_packaged(path, root, dotted)
    else:
        module = _import_standalone(path)

    logger.debug("Target loaded", module=module.__name__, path=str(path))
    return module


def package_location(path: Path) -> tuple[Path, str | None]:
    """Return the import root and dotted name of a module file.

    The dotted name is None when the file is not part of a package.
    """
    parts = [path.stem] if path.stem != "__init__" else []
    root = path.parent
    while (root / "__init__.py").is_file():
        parts.insert(0, root.name)
        root = root.parent
    if root == path.parent:
        return root, None
    return root, ".".join(parts)


def _import_packaged(path: Path, root: Path, dotted: str) -> ModuleType:
    sys.path.insert(0, str(root))
    try:
        module = importlib.import_module(dotted)
    except Exception as e:
        raise LoadFailure(f"Startup module failed to import: {path}") from e

    loaded_from = getattr(module, "__file__", None)
    if loaded_from is None or Path(loaded_from).resolve() != path:
        raise LoadFailure(
            f"Startup module {dotted} resolved to {loaded_from}, expected {path}"
        )
    return module


def _import_standalone(path: Path) -> ModuleType:
    spec = importlib.util.spec_from_file_location(path.stem, path)
    if spec is None or spec.loader is None:
        raise LoadFailure(f"Startup module cannot be imported: {path}")

    module = importlib.util.module_from_spec(spec)
    sys.path.insert(0, str(path.parent))
    sys.modules[spec.name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(spec.name, None)
        raise LoadFailure(f"Startup module failed to import: {path}") from e
    return module


def build_host(module: ModuleType, config: DispatchConfig) -> InMemoryHost:
    """Resolve the app (or run its factory) and detect its interface."""
    app = _resolve_app(module, config.app_attribute)
    interface = config.interface if config.interface != "auto" else detect_interface(app)
    host = InMemoryHost(app, interface)
    logger.debug("Host constructed", host=repr(host))
    return host


def detect_interface(app: Any) -> Literal["asgi", "wsgi"]:
    """ASGI apps are coroutine callables; anything else is treated as WSGI."""
    if inspect.iscoroutinefunction(app):
        return "asgi"
    call = getattr(app, "__call__", None)
    if call is not None and inspect.iscoroutinefunction(call):
        return "asgi"
    return "wsgi"


def _resolve_app(module: ModuleType, attribute: str | None) -> Any:
    # An explicit "name()" marks a factory.
    factories = set(FACTORY_ATTRIBUTES)
    if attribute is not None:
        if attribute.endswith("()"):
            attribute = attribute[:-2]
            factories.add(attribute)
        candidates: tuple[str, ...] = (attribute,)
    else:
        candidates = APP_ATTRIBUTES + FACTORY_ATTRIBUTES

    for name in candidates:
        obj = getattr(module, name, None)
        if obj is None:
            continue
        if name in factories:
            try:
                return obj()
            except Exception as e:
                raise DispatchFailure(f"App factory {name}() failed") from e
        return obj

    raise LoadFailure(
        f"No application found in {module.__name__}; looked for {', '.join(candidates)}"
    )
