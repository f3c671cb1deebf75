"""Invocation and binding schemas."""

from apidump.schemas.invocation_schema import (
    CapturedResponse,
    DependencyManifest,
    InvocationRequest,
    RuntimeBinding,
    RuntimeConfig,
)

__all__ = [
    "CapturedResponse",
    "DependencyManifest",
    "InvocationRequest",
    "RuntimeBinding",
    "RuntimeConfig",
]
