from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional

from .envelope import error_message

if TYPE_CHECKING:
    from .gateway import GatewayResponse
    from .models import Task


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a store or editor operation.

    Callers inspect ``ok`` instead of catching exceptions. ``field_errors``
    is only populated for client-side validation failures, in which case no
    request was sent.
    """

    ok: bool
    task: Optional["Task"] = None
    error: Optional[str] = None
    field_errors: Dict[str, str] = field(default_factory=dict)
    status_code: Optional[int] = None

    @classmethod
    def success(cls, task: Optional["Task"] = None, status_code: Optional[int] = None) -> "OperationResult":
        return cls(ok=True, task=task, status_code=status_code)

    @classmethod
    def failure(cls, error: str, *, status_code: Optional[int] = None) -> "OperationResult":
        return cls(ok=False, error=error, status_code=status_code)

    @classmethod
    def invalid(cls, field_errors: Dict[str, str]) -> "OperationResult":
        return cls(ok=False, error="Please fix the highlighted fields.", field_errors=dict(field_errors))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "task": self.task.to_dict() if self.task is not None else None,
            "error": self.error,
            "field_errors": dict(self.field_errors),
            "status_code": self.status_code,
        }


def describe_failure(action: str, response: "GatewayResponse") -> str:
    """User-facing message for a failed call, e.g. ``Failed to create task.``"""
    base = f"Failed to {action}. Please try again."
    if response.status_code == 0:
        return f"{base} The server could not be reached."
    detail = error_message(response.data) or (response.error if response.error and len(response.error) < 200 else None)
    if detail:
        return f"{base} ({detail})"
    return base
