"""ServiceResult and ServiceError — the service contract.

INVARIANT: All service-layer methods return ServiceResult.
Domain and infrastructure failures are raised as ``KoopaError`` and
converted here, at the service boundary, by :func:`error_result`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from koopa.domain.errors import KoopaError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: Exception) -> ServiceError:
        if isinstance(exc, KoopaError):
            return cls(code=exc.code, message=exc.message, detail=exc.detail)
        return cls(code="IO_ERROR", message=str(exc), detail={"type": type(exc).__name__})


class ServiceResult(BaseModel):
    """Return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (``"copy"`` or ``"list"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None


def error_result(op: str, exc: Exception, *, warnings: list[str] | None = None) -> ServiceResult:
    """Wrap a raised error as a failed ServiceResult."""
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError.from_exception(exc),
        warnings=list(warnings or []),
    )
