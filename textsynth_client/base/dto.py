"""
Pydantic base classes for request and response bodies.

Purpose
-------
Requests are validated as a whole when they are constructed so a bad field
fails fast, before any network call. ``RequestModel.build`` is the validating
constructor: it collects *every* violated constraint and raises a single
:class:`RequestValidationError` listing them. Constructing a model directly
raises pydantic's own ``ValidationError`` with the same information.

Responses are frozen value objects; unknown fields sent by the API are
ignored so new server-side fields do not break decoding.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import FieldViolation, RequestValidationError


def violations_from(exc: ValidationError) -> List[FieldViolation]:
    """Flatten a pydantic ``ValidationError`` into field violations."""
    out: List[FieldViolation] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "request"
        out.append(FieldViolation(field=loc, message=err.get("msg", "invalid value")))
    return out


class RequestModel(BaseModel):
    """Base for request bodies posted to the API."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def build(cls, **fields: Any):
        """Validate ``fields`` and return the request.

        Raises:
            RequestValidationError: one or more fields violate a documented
                constraint; ``violations`` lists all of them.
        """
        try:
            return cls(**fields)
        except ValidationError as e:
            violations = violations_from(e)
            raise RequestValidationError(
                message=f"invalid {cls.__name__}: " + ", ".join(v.field for v in violations),
                violations=violations,
                raw=e,
            ) from e

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready body; unset optional fields are omitted."""
        return self.model_dump(mode="json", exclude_none=True)


class ResponseModel(BaseModel):
    """Base for decoded response bodies."""

    model_config = ConfigDict(extra="ignore", frozen=True)


__all__ = ["RequestModel", "ResponseModel", "violations_from"]
