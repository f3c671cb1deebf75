"""Pytest configuration and fixtures."""

import json
import sys
from collections.abc import AsyncGenerator, Callable, Generator
from pathlib import Path

import pytest
import structlog
from httpx import ASGITransport, AsyncClient

from apidump.core.settings import DispatchConfig, RelayConfig

DOCUMENT_PATH = "/swagger/v1/swagger.json"
DOCUMENT_BODY = b'{"openapi":"3.0.1"}'

# --- Target application sources ---

FASTAPI_TARGET = '''
from fastapi import FastAPI, Request
from fastapi.responses import Response

app = FastAPI(title="Sample", version="1.0.0")


@app.get("/swagger/v1/swagger.json")
def swagger() -> Response:
    return Response(content=b'{"openapi":"3.0.1"}', media_type="application/json")


@app.get("/base")
def base(request: Request) -> Response:
    return Response(content=str(request.base_url).encode(), media_type="text/plain")


@app.get("/boom")
def boom() -> Response:
    raise RuntimeError("configuration routine failed")
'''

FACTORY_TARGET = '''
from fastapi import FastAPI


def create_app() -> FastAPI:
    app = FastAPI(title="Factory", version="2.0.0")

    @app.get("/health")
    def health() -> dict:
        return {"status": "healthy"}

    return app
'''

WSGI_TARGET = '''
def app(environ, start_response):
    if environ["PATH_INFO"] != "/swagger.json":
        start_response("404 Not Found", [("Content-Type", "text/plain")])
        return [b"not found"]
    start_response("200 OK", [("Content-Type", "application/json")])
    return [b'{"swagger":', b'"2.0"}']
'''


# --- Isolation ---


@pytest.fixture(autouse=True)
def restore_import_state(tmp_path: Path) -> Generator[None, None, None]:
    """Undo sys.path and sys.modules changes made by loading targets."""
    saved_path = list(sys.path)
    yield
    sys.path[:] = saved_path
    for name, module in list(sys.modules.items()):
        if str(getattr(module, "__file__", None) or "").startswith(str(tmp_path.resolve())):
            del sys.modules[name]


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Drop structlog config bound to a per-test capture stream."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test with tmp_path as the current working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


# --- Target helpers ---


@pytest.fixture
def write_target(workdir: Path) -> Callable[..., Path]:
    """Write a startup module plus its runtime binding files into workdir."""

    def _write(
        source: str = FASTAPI_TARGET,
        name: str = "App.py",
        paths: list[str] | None = None,
        interpreter: str | None = sys.executable,
        environment: dict[str, str] | None = None,
        with_binding: bool = True,
    ) -> Path:
        target = workdir / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(source, encoding="utf-8")
        if with_binding:
            stem = target.with_suffix("")
            stem.with_name(stem.name + ".deps.json").write_text(
                json.dumps({"paths": paths or []})
            )
            runtime: dict[str, object] = {"environment": environment or {}}
            if interpreter is not None:
                runtime["interpreter"] = interpreter
            stem.with_name(stem.name + ".runtimeconfig.json").write_text(
                json.dumps(runtime)
            )
        return target.relative_to(workdir)

    return _write


# --- Config fixtures ---


@pytest.fixture
def relay_config() -> RelayConfig:
    return RelayConfig(
        dependency_manifest_suffix=".deps.json",
        runtime_config_suffix=".runtimeconfig.json",
        marker="_",
    )


@pytest.fixture
def dispatch_config() -> DispatchConfig:
    return DispatchConfig(
        default_base_address="http://localhost",
        interface="auto",
        app_attribute=None,
        capability_module="inmemory_server",
    )


# --- Client fixture ---


@pytest.fixture
async def target_client(
    write_target: Callable[..., Path],
) -> AsyncGenerator[AsyncClient, None]:
    """Async client talking to the sample target directly, for comparison."""
    from apidump.services.target_loader import load_target

    module = load_target(write_target())
    transport = ASGITransport(app=module.app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
