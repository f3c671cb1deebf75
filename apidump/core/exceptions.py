"""Tool exception classes and the top-level error handler."""

import structlog

logger = structlog.get_logger()


class ApiDumpError(Exception):
    """Base tool exception."""

    def __init__(self, message: str, code: str, exit_code: int = 1) -> None:
        self.message = message
        self.code = code
        self.exit_code = exit_code
        super().__init__(message)


# --- Phase 1 (relay) ---


class RelayStartFailure(ApiDumpError):
    """The relayed child process could not be started."""

    def __init__(self, message: str = "Failed to start relayed process") -> None:
        super().__init__(message=message, code="RELAY_START_FAILURE")


# --- Phase 2 (extraction) ---


class LoadFailure(ApiDumpError):
    """Target module, app object or capability module could not be loaded."""

    def __init__(self, message: str = "Failed to load module") -> None:
        super().__init__(message=message, code="LOAD_FAILURE")


class DispatchFailure(ApiDumpError):
    """The in-memory request raised instead of producing a response."""

    def __init__(self, message: str = "In-memory request failed") -> None:
        super().__init__(message=message, code="DISPATCH_FAILURE")


class PersistenceFailure(ApiDumpError):
    """The captured document could not be written to the output path."""

    def __init__(self, message: str = "Failed to write output") -> None:
        super().__init__(message=message, code="PERSISTENCE_FAILURE")


# --- Exception Handler ---


def handle_error(exc: ApiDumpError) -> int:
    """Central handler for ApiDumpError; returns the process exit code."""
    logger.error(
        exc.message,
        code=exc.code,
        cause=repr(exc.__cause__) if exc.__cause__ is not None else None,
    )
    return exc.exit_code
