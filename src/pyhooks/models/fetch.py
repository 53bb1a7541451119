"""Request target and observable fetch state models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FetchTarget(BaseModel):
    """Descriptor for one HTTP request: URL plus optional request options."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = Field(..., description="Absolute request URL")
    method: str = "GET"
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = Field(default=None, description="JSON-encodable body or a pre-encoded string")
    timeout: float | None = Field(default=None, description="Per-request timeout override (seconds)")

    @field_validator("url")
    @classmethod
    def _normalize_url(cls, value: str) -> str:
        url = value.strip()
        if not url:
            raise ValueError("url must be non-empty")
        return url

    @field_validator("method")
    @classmethod
    def _normalize_method(cls, value: str) -> str:
        method = value.strip().upper()
        if not method:
            raise ValueError("method must be non-empty")
        return method

    @classmethod
    def coerce(cls, target: FetchTarget | str) -> FetchTarget:
        """Accept a bare URL string wherever a target is expected."""
        if isinstance(target, FetchTarget):
            return target
        return cls(url=target)


class FetchState(BaseModel):
    """Externally observable result of a :class:`RequestCoordinator`.

    While ``loading`` is true, ``data`` and ``error`` still describe the
    last *settled* generation. Once settled, at most one of them is set:
    a failure sets ``error``; a success sets ``data`` to the decoded body.
    A successful response whose body is JSON ``null`` therefore settles with
    both ``None``; check ``error`` (not ``data``) to tell success from failure.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    data: Any = None
    error: Exception | None = None
    loading: bool = False
    generation: int = Field(default=0, description="Generation the state was last touched by")
