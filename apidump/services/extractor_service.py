"""In-memory extractor: fetch the document from the target and save it."""

import os
import stat
import tempfile
from pathlib import Path

import structlog

from apidump.core.exceptions import DispatchFailure, PersistenceFailure
from apidump.core.settings import DispatchConfig
from apidump.schemas import CapturedResponse, InvocationRequest
from apidump.services.capability_loader import (
    InMemoryServer,
    create_server,
    load_capability,
)
from apidump.services.target_loader import build_host, load_target

logger = structlog.get_logger()


class InMemoryExtractor:
    """Runs one fetch-and-save round trip inside the relayed process."""

    def __init__(self, config: DispatchConfig) -> None:
        self.config = config

    def run(self, request: InvocationRequest) -> Path:
        """Load, host, dispatch and persist; returns the absolute output path.

        Every step either completes or raises, and nothing touches the output
        path before the response has been captured.
        """
        module = load_target(request.startup_reference)
        host = build_host(module, self.config)
        capability = load_capability(self.config.capability_module)
        server = create_server(capability, host)

        base_address = self.effective_base_address(request)
        response = self.dispatch(server, base_address, request.document_path)
        output = write_document(request.output_path, response.body)

        logger.info(
            "Document written",
            output=str(output),
            status_code=response.status_code,
            size=len(response.body),
        )
        return output

    def effective_base_address(self, request: InvocationRequest) -> str:
        """--baseaddress verbatim when given, else the configured default."""
        if request.base_address is not None:
            return request.base_address
        return self.config.default_base_address

    def dispatch(
        self, server: InMemoryServer, base_address: str, document_path: str
    ) -> CapturedResponse:
        """Issue the single blocking GET against the in-memory server."""
        client = server.create_client(base_address)
        try:
            raw = client.get(document_path)
        except Exception as e:
            raise DispatchFailure(f"GET {document_path} failed in the target") from e

        response = CapturedResponse(
            status_code=raw.status_code,
            headers=dict(raw.headers),
            body=raw.content,
        )
        logger.debug(
            "Response captured",
            base_address=base_address,
            path=document_path,
            status_code=response.status_code,
        )
        if not response.is_success:
            logger.warning(
                "Document route returned a non-success status",
                path=document_path,
                status_code=response.status_code,
            )
        return response


def write_document(output_path: Path, body: bytes) -> Path:
    """Write body to output_path (relative to the cwd) atomically.

    Missing parent directories are created. The bytes go to a temporary file
    in the destination directory which then replaces the output, so an
    interrupted write never leaves a truncated document behind.
    """
    # resolve() follows symlinks, so a linked output is replaced at its target.
    output = (Path.cwd() / output_path).resolve()
    tmp_name: str | None = None
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output.name}.", suffix=".tmp", dir=output.parent
        )
        with os.fdopen(fd, "wb") as f:
            f.write(body)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, _output_mode(output))
        os.replace(tmp_name, output)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise PersistenceFailure(f"Cannot write output: {output}") from e
    return output


def _output_mode(output: Path) -> int:
    """Keep an existing file's mode; otherwise what a plain open() would give."""
    try:
        return stat.S_IMODE(output.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask
