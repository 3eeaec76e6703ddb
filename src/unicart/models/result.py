"""Typed outcome of a user-facing action."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ActionResult(BaseModel, Generic[T]):
    """Success with a value, or failure with a reason.

    Returned by every consumption-layer action so presentation code decides
    whether to surface, log, or ignore a failure.  ``error`` keeps the
    original exception for callers that want to branch on its type; it is
    never serialized.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ok: bool
    value: T | None = None
    reason: str | None = None
    error: Exception | None = Field(default=None, exclude=True, repr=False)

    @classmethod
    def success(cls, value: Any = None) -> ActionResult[Any]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, reason: str, *, error: Exception | None = None) -> ActionResult[Any]:
        return cls(ok=False, reason=reason, error=error)

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> T:
        """Return the value or raise the captured error."""
        if self.ok:
            return self.value  # type: ignore[return-value]
        if self.error is not None:
            raise self.error
        raise RuntimeError(self.reason or "action failed")
